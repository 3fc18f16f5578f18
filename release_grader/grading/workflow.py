# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tracking issue lifecycle.

    NOT_EXISTS -> CREATED -> MILESTONE_ATTACHED -> BODY_FINAL -> COMMENT_POSTED -> CLOSED

Creation, milestone, labels, assignee and body go out in a single API call, so
one successful create moves the issue through the first three states at once.
CLOSED is terminal for this system. The student is expected to re-open the
issue once they have reviewed it, and the grader finishes it from there; none
of that happens here.

Any failed call stops the pipeline with IssueWorkflowFailed. Earlier steps are
not rolled back, so an issue may be left open or uncommented for follow-up.
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple

import requests

from release_grader.classes import GradeRequest, GradeResult, Milestone, TrackingIssue
from release_grader.configurations.course_config import CourseConfig
from release_grader.constants import HTTP_CREATED, HTTP_OK
from release_grader.errors import IssueWorkflowFailed
from release_grader.grading.milestones import resolve_milestone
from release_grader.grading.templates import render_instructions, render_issue_body
from release_grader.utils.github_api_tools import GitHubClient, describe_response
from release_grader.utils.logging import log_event, logger


class WorkflowState(str, Enum):
    NOT_EXISTS = "not_exists"
    CREATED = "created"
    MILESTONE_ATTACHED = "milestone_attached"
    BODY_FINAL = "body_final"
    COMMENT_POSTED = "comment_posted"
    CLOSED = "closed"


class IssueWorkflow:
    """Drives one grade request's tracking issue from NOT_EXISTS to CLOSED."""

    def __init__(
        self,
        client: GitHubClient,
        request: GradeRequest,
        course: CourseConfig,
        actor: str,
        result: Optional[GradeResult] = None,
    ):
        self.client = client
        self.request = request
        self.course = course
        self.actor = actor
        self.result = result

        self.state = WorkflowState.NOT_EXISTS
        self.history: List[WorkflowState] = [self.state]
        self.milestone: Optional[Milestone] = None
        self.body: Optional[str] = None
        self.issue: Optional[TrackingIssue] = None

    def steps(self) -> List[Tuple[str, Callable[[], None]]]:
        return [
            ('render body', self._render_body),
            ('resolve milestone', self._resolve_milestone),
            ('create issue', self._create_issue),
            ('post instructions', self._post_instructions),
            ('close issue', self._close_issue),
        ]

    def run(self) -> TrackingIssue:
        for name, step in self.steps():
            logger.debug(f"Workflow step: {name} (state: {self.state.value})")
            step()
        return self.issue

    def _advance(self, *states: WorkflowState) -> None:
        for state in states:
            self.state = state
            self.history.append(state)

    def _call(self, action: str, call: Callable[[], requests.Response], expected: int) -> requests.Response:
        try:
            response = call()
        except requests.RequestException as e:
            raise IssueWorkflowFailed(self.state, f'Unable to {action}: {e}') from e

        if response.status_code != expected:
            logger.debug(f"Result: {describe_response(response)}")
            raise IssueWorkflowFailed(self.state, f'Unable to {action}.', response)
        return response

    def _render_body(self) -> None:
        self.body = render_issue_body(self.request, self.course.project_name(self.request.project), self.result)

    def _resolve_milestone(self) -> None:
        self.milestone = resolve_milestone(self.client, self.request.project, self.course)

    def _create_issue(self) -> None:
        title = self.request.title
        grade_type = self.request.grade_type
        logger.info(f"Creating {grade_type.label} issue...")

        response = self._call(
            f'create "{title}" issue',
            lambda: self.client.create_issue(
                title=title,
                body=self.body,
                labels=self.request.labels,
                assignee=self.course.assignee(grade_type),
                milestone=self.milestone.number,
            ),
            HTTP_CREATED,
        )

        self.issue = TrackingIssue.from_json(response.json())
        self._advance(WorkflowState.CREATED, WorkflowState.MILESTONE_ATTACHED, WorkflowState.BODY_FINAL)
        log_event(f"Created issue #{self.issue.number}: {self.issue.title}")

    def _post_instructions(self) -> None:
        self._call(
            f'comment on issue #{self.issue.number}',
            lambda: self.client.create_comment(self.issue.number, render_instructions(self.actor)),
            HTTP_CREATED,
        )
        self._advance(WorkflowState.COMMENT_POSTED)
        logger.info(f"Posted instructions on issue #{self.issue.number}.")

    def _close_issue(self) -> None:
        self._call(
            f'close issue #{self.issue.number}',
            lambda: self.client.update_issue_state(self.issue.number, 'closed'),
            HTTP_OK,
        )
        self.issue.state = 'closed'
        self._advance(WorkflowState.CLOSED)
        log_event(f"Closed issue #{self.issue.number}; waiting for the student to re-open it.")
