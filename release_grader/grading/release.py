import re

from release_grader.constants import RELEASE_TAG_PATTERN
from release_grader.errors import InvalidReleaseTag

_RELEASE_TAG_RE = re.compile(RELEASE_TAG_PATTERN)


def parse_project(tag: str) -> int:
    """Return the project number (1-4) encoded by a ``v<major>.<minor>.<patch>`` release tag."""
    if not isinstance(tag, str):
        raise InvalidReleaseTag(tag)

    # fullmatch so a trailing newline cannot slip past the $ anchor
    matched = _RELEASE_TAG_RE.fullmatch(tag)
    if matched is None:
        raise InvalidReleaseTag(tag)

    return int(matched.group(1))
