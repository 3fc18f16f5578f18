# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Error kinds raised while validating and fulfilling a grade request."""

from typing import Any, Iterable, Optional


class GradeRequestError(Exception):
    """Base exception for every failure that ends a grade request."""


class ConfigError(GradeRequestError):
    """Configuration (environment or course tables) is missing or malformed."""


class MissingStateError(GradeRequestError):
    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(missing)
        super().__init__(f'Missing required state value(s): {", ".join(self.missing)}.')


class InvalidGradeType(GradeRequestError):
    """Grade type input did not name functionality or design."""


class InvalidReleaseTag(GradeRequestError):
    def __init__(self, tag: Any):
        self.tag = tag
        super().__init__(f'Unable to parse project from release {tag}.')


class ReleaseLookupFailed(GradeRequestError):
    def __init__(self, tag: str, raw_response: Any = None):
        self.tag = tag
        self.raw_response = raw_response
        super().__init__(f'Unable to find release {tag}.')


class UnknownDeadline(GradeRequestError):
    def __init__(self, grade_type: Any, project: int):
        self.grade_type = grade_type
        self.project = project
        super().__init__(f'No {grade_type} deadline configured for project {project}.')


class UnsupportedGradeType(GradeRequestError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f'The value "{value}" is not a valid project grade type.')


class UnsupportedFeature(GradeRequestError):
    """A requested feature exists in name only and must not be faked."""


class ExactDuplicateRequest(GradeRequestError):
    def __init__(self, title: str, issue_number: Optional[int] = None):
        self.title = title
        self.issue_number = issue_number
        where = f' (#{issue_number})' if issue_number is not None else ''
        super().__init__(f'An issue titled "{title}" already exists{where}. Grade was already requested.')


class AmbiguousPriorIssues(GradeRequestError):
    def __init__(self, count: int, project: int, grade_type: Any):
        self.count = count
        self.project = project
        self.grade_type = grade_type
        super().__init__(
            f'Found {count} related issue(s) for project {project}; '
            f'unable to safely request a {grade_type} grade.'
        )


class MilestoneResolutionFailed(GradeRequestError):
    def __init__(self, message: str, raw_response: Any = None):
        self.raw_response = raw_response
        super().__init__(message)


class IssueWorkflowFailed(GradeRequestError):
    """An issue tracker call failed partway through the issue lifecycle.

    ``state`` is the last state the workflow reached before the failing call,
    so a value past ``NOT_EXISTS`` means an issue was left behind for a human
    to follow up on.
    """

    def __init__(self, state: Any, message: str, raw_response: Any = None):
        self.state = state
        self.raw_response = raw_response
        super().__init__(f'{message} (workflow state: {getattr(state, "value", state)})')
