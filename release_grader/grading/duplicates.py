# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Duplicate and conflict detection for grade requests.

Issue and milestone creation are not transactional against the rest of the
repository, so this check, run before any mutating call, is the only thing
that keeps repeated or retried runs from opening a second tracking issue. It
is a read-then-act check and a narrow race with a concurrent run remains.
"""

from typing import Any, Dict, List, Sequence

from release_grader.classes import DuplicateCheck, DuplicateStatus, GradeRequest, GradeType, project_label
from release_grader.constants import DESIGN_MAX_PRIOR_ISSUES, HTTP_OK
from release_grader.errors import AmbiguousPriorIssues, ExactDuplicateRequest, IssueWorkflowFailed
from release_grader.grading.workflow import WorkflowState
from release_grader.utils.github_api_tools import GitHubClient, describe_response
from release_grader.utils.logging import logger, warning


def prior_issue_labels(project: int, grade_type: GradeType) -> List[str]:
    """
    Labels used to look up earlier issues for a request.

    Functionality requests only look at functionality issues. Design requests
    look at every issue for the project, since a design grade is gated on an
    earlier functionality issue.
    """
    if grade_type == GradeType.FUNCTIONALITY:
        return [project_label(project), grade_type.label]
    return [project_label(project)]


def classify(existing_issues: Sequence[Dict[str, Any]], request_title: str, grade_type: GradeType) -> DuplicateCheck:
    """Classify a request against prior issues as fresh, an exact duplicate or an ambiguous conflict."""
    for issue in existing_issues:
        if issue.get('title') == request_title:
            return DuplicateCheck(
                status=DuplicateStatus.EXACT_DUPLICATE,
                count=len(existing_issues),
                duplicate_number=issue.get('number'),
                related_titles=(request_title,),
            )

    titles = tuple(issue.get('title', '') for issue in existing_issues)

    if grade_type == GradeType.DESIGN:
        conflicting = len(existing_issues) > DESIGN_MAX_PRIOR_ISSUES
    else:
        conflicting = len(existing_issues) > 0

    if conflicting:
        return DuplicateCheck(status=DuplicateStatus.AMBIGUOUS_CONFLICT, count=len(existing_issues), related_titles=titles)

    return DuplicateCheck(status=DuplicateStatus.FRESH, count=len(existing_issues), related_titles=titles)


def find_prior_issues(client: GitHubClient, project: int, grade_type: GradeType) -> List[Dict[str, Any]]:
    """List issues in any state that could conflict with a new request."""
    labels = prior_issue_labels(project, grade_type)
    logger.info(f"Looking up issues labeled {','.join(labels)}...")

    response, issues = client.list_issues(labels, state='all')
    if response.status_code != HTTP_OK:
        logger.debug(f"Result: {describe_response(response)}")
        raise IssueWorkflowFailed(WorkflowState.NOT_EXISTS, 'Unable to list issues.', response)

    logger.info(f"Found {len(issues)} related issue(s).")
    return issues


def check_duplicates(client: GitHubClient, request: GradeRequest) -> DuplicateCheck:
    """
    Look up and classify prior issues for ``request``, enforcing the per-type policy.

    Raises:
        ExactDuplicateRequest: An issue with the same title already exists
        AmbiguousPriorIssues: Design request with more than one prior issue

    A functionality request with prior issues under other releases only logs a
    warning and proceeds.
    """
    issues = find_prior_issues(client, request.project, request.grade_type)
    result = classify(issues, request.title, request.grade_type)

    if result.status == DuplicateStatus.EXACT_DUPLICATE:
        raise ExactDuplicateRequest(request.title, result.duplicate_number)

    if result.status == DuplicateStatus.AMBIGUOUS_CONFLICT:
        if request.grade_type == GradeType.DESIGN:
            raise AmbiguousPriorIssues(result.count, request.project, request.grade_type.label)

        warning(
            f"Found {result.count} related {request.grade_type.label} issue(s) for project {request.project}: "
            f"{', '.join(result.related_titles)}. Are you sure you need to make a new request?"
        )

    return result
