# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Run phase: turn a restored grade request into a closed tracking issue.

    functionality: duplicate check -> grade -> issue workflow
    design:        duplicate check -> UnsupportedFeature

``run_request`` is the single place failures are reported; nothing raised
below it escapes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from release_grader.classes import GradeRequest, GradeResult, GradeType, TrackingIssue
from release_grader.config import ActionContext
from release_grader.configurations.course_config import CourseConfig
from release_grader.errors import UnsupportedFeature, UnsupportedGradeType
from release_grader.grading.duplicates import check_duplicates
from release_grader.grading.grade import compute_grade
from release_grader.grading.workflow import IssueWorkflow
from release_grader.utils.github_api_tools import GitHubClient
from release_grader.utils.logging import log_group, logger, set_failed

FAILURE_PREFIX = 'Unable to request project grade.'


@dataclass
class RequestOutcome:
    success: bool
    message: str
    issue: Optional[TrackingIssue] = None
    result: Optional[GradeResult] = None
    error: Optional[BaseException] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def request_functionality_grade(
    client: GitHubClient,
    request: GradeRequest,
    course: CourseConfig,
    actor: str,
) -> Tuple[TrackingIssue, GradeResult]:
    with log_group('Checking for prior requests...'):
        check_duplicates(client, request)

    with log_group('Calculating grade...'):
        result = compute_grade(request.release_created_at, request.project, request.grade_type, course.deadlines, course.tz)
        logger.info(f"Release created: {result.created_local}")
        logger.info(f"{request.grade_type.value} deadline: {result.deadline_local}")
        if result.is_late:
            logger.info(f"Release is {result.late_weeks} week(s) late; grade is {result.grade}%.")
        else:
            logger.info("Release created before deadline!")

    with log_group(f'Creating {request.grade_type.label} issue...'):
        issue = IssueWorkflow(client, request, course, actor, result).run()

    return issue, result


def request_design_grade(client: GitHubClient, request: GradeRequest, course: CourseConfig, actor: str):
    with log_group('Checking for prior requests...'):
        check_duplicates(client, request)

    # TODO: verify an approved functionality issue exists once design grading is built
    raise UnsupportedFeature('Design grade requests are not yet supported.')


def request_grade(
    client: GitHubClient,
    request: GradeRequest,
    course: CourseConfig,
    actor: str,
) -> Tuple[TrackingIssue, GradeResult]:
    """Dispatch on grade type. Raises on any failure."""
    logger.info(f"Requesting {request.title}...")

    if request.grade_type == GradeType.FUNCTIONALITY:
        return request_functionality_grade(client, request, course, actor)
    if request.grade_type == GradeType.DESIGN:
        return request_design_grade(client, request, course, actor)

    raise UnsupportedGradeType(request.grade_type)


def run_request(
    state: Mapping[str, Any],
    context: ActionContext,
    course: CourseConfig,
    client: Optional[GitHubClient] = None,
) -> RequestOutcome:
    """Build the request from restored state, run it and report the single outcome."""
    try:
        request = GradeRequest.from_state(state)
        client = client or GitHubClient(context.repository, context.token, context.api_url)
        issue, result = request_grade(client, request, course, context.actor)
    except Exception as e:
        logger.error(str(e), exc_info=logger.isEnabledFor(logging.DEBUG))
        message = f'{FAILURE_PREFIX} {e}'
        set_failed(message)
        return RequestOutcome(success=False, message=message, error=e)

    message = f'Requested {issue.title} (#{issue.number}) with a grade of {result.grade}%.'
    logger.info(message)
    return RequestOutcome(success=True, message=message, issue=issue, result=result)
