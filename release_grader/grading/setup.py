# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Setup phase: validate the request inputs and persist them for the run phase.
"""

from typing import Any, Dict

from release_grader.classes import GradeType
from release_grader.config import ActionContext
from release_grader.constants import HTTP_OK
from release_grader.errors import InvalidGradeType, ReleaseLookupFailed
from release_grader.grading.release import parse_project
from release_grader.state import StateStore
from release_grader.utils.github_api_tools import GitHubClient, describe_response
from release_grader.utils.logging import log_group, logger

USAGE = 'Grade types must start with "f" for functionality (test) grades or "d" for design (code review) grades.'


def check_request_type(value: str) -> GradeType:
    """Map a free-form grade type input to a GradeType by its first letter."""
    logger.info(f"Checking request type: {value}")

    if not value or not value.strip():
        raise InvalidGradeType(f'Missing required project grade type. {USAGE}')

    first = value.strip()[0].lower()
    if first == 'd':
        logger.info('Requesting project design grade.')
        return GradeType.DESIGN
    if first == 'f':
        logger.info('Requesting project functionality grade.')
        return GradeType.FUNCTIONALITY

    raise InvalidGradeType(f'The value "{value}" is not a valid project grade type. {USAGE}')


def check_release(client: GitHubClient, tag: str) -> Dict[str, Any]:
    """Confirm the tag names a project release and fetch it."""
    project = parse_project(tag)
    logger.info(f"Getting release {tag} (project {project}) from {client.repository}...")

    response = client.get_release_by_tag(tag)
    if response.status_code != HTTP_OK:
        logger.debug(f"Result: {describe_response(response)}")
        raise ReleaseLookupFailed(tag, response)

    return response.json()


def setup_request(
    client: GitHubClient,
    context: ActionContext,
    grade_type: str,
    tag: str,
    store: StateStore,
) -> Dict[str, str]:
    """Validate inputs, look up the release and save everything the run phase needs."""
    with log_group('Verifying request input...'):
        resolved_type = check_request_type(grade_type)
        release = check_release(client, tag)

    state = {
        'release': tag,
        'type': resolved_type.value,
        'releaseDate': release['created_at'],
        'releaseUrl': release['html_url'],
        'runId': context.run_id,
        'runNumber': context.run_number,
        'runUrl': context.run_url,
    }
    store.save(**state)
    logger.info(f"Saved {resolved_type.label} request for release {tag}.")
    return state
