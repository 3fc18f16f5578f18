#!/usr/bin/env python3
# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared fixtures for release grader tests.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from release_grader.config import ActionContext
from release_grader.configurations.course_config import CourseConfig
from release_grader.utils import logging as grader_logging


def make_response(status_code: int, data: Any = None, text: str = '') -> Mock:
    """Mock ``requests.Response`` with a status, JSON payload and body text."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = data
    response.text = text
    response.headers = {}
    return response


class FakeGitHub:
    """
    In-memory stand-in for GitHubClient.

    Keeps issues and milestones in lists, records every call, and fails a
    named method with a given status when listed in ``failures``.
    """

    def __init__(self, issues: Optional[List[Dict[str, Any]]] = None, milestones: Optional[List[Dict[str, Any]]] = None):
        self.repository = 'usf-cs212/project-student'
        self.issues: List[Dict[str, Any]] = list(issues or [])
        self.milestones: List[Dict[str, Any]] = list(milestones or [])
        self.comments: Dict[int, List[str]] = {}
        self.calls: List[str] = []
        self.failures: Dict[str, int] = {}
        self.releases: Dict[str, Dict[str, Any]] = {}

    def _fail(self, name: str) -> Optional[Mock]:
        self.calls.append(name)
        if name in self.failures:
            return make_response(self.failures[name], {'message': 'Server Error'}, text='{"message": "Server Error"}')
        return None

    @property
    def mutating_calls(self) -> List[str]:
        return [name for name in self.calls if not name.startswith(('list_', 'get_'))]

    def get_release_by_tag(self, tag):
        failed = self._fail('get_release_by_tag')
        if failed:
            return failed
        if tag not in self.releases:
            return make_response(404, {'message': 'Not Found'}, text='{"message": "Not Found"}')
        return make_response(200, self.releases[tag])

    def list_issues(self, labels, state='all'):
        failed = self._fail('list_issues')
        if failed:
            return failed, []
        matching = [
            issue for issue in self.issues
            if set(labels) <= {label['name'] for label in issue.get('labels', [])}
        ]
        return make_response(200, matching), matching

    def create_issue(self, title, body, labels, assignee=None, milestone=None):
        failed = self._fail('create_issue')
        if failed:
            return failed
        issue = {
            'number': len(self.issues) + 1,
            'title': title,
            'body': body,
            'labels': [{'name': label} for label in labels],
            'assignee': {'login': assignee} if assignee else None,
            'milestone': {'number': milestone} if milestone is not None else None,
            'state': 'open',
            'html_url': f'https://github.com/{self.repository}/issues/{len(self.issues) + 1}',
        }
        self.issues.append(issue)
        return make_response(201, dict(issue))

    def create_comment(self, issue_number, body):
        failed = self._fail('create_comment')
        if failed:
            return failed
        self.comments.setdefault(issue_number, []).append(body)
        return make_response(201, {'id': 1, 'body': body})

    def update_issue_state(self, issue_number, state):
        failed = self._fail('update_issue_state')
        if failed:
            return failed
        issue = self.issue(issue_number)
        issue['state'] = state
        return make_response(200, dict(issue))

    def list_milestones(self, state='all'):
        failed = self._fail('list_milestones')
        if failed:
            return failed, []
        return make_response(200, self.milestones), list(self.milestones)

    def create_milestone(self, title, description, state='open'):
        failed = self._fail('create_milestone')
        if failed:
            return failed
        milestone = {'number': len(self.milestones) + 1, 'title': title, 'description': description, 'state': state}
        self.milestones.append(milestone)
        return make_response(201, dict(milestone))

    def issue(self, number: int) -> Dict[str, Any]:
        return next(issue for issue in self.issues if issue['number'] == number)


def issue_json(number: int, title: str, labels: List[str], state: str = 'open') -> Dict[str, Any]:
    return {'number': number, 'title': title, 'labels': [{'name': label} for label in labels], 'state': state}


@pytest.fixture(autouse=True)
def outside_actions(monkeypatch):
    """Run every test as if outside GitHub Actions, with no groups left open."""
    monkeypatch.delenv('GITHUB_ACTIONS', raising=False)
    grader_logging.close_all_groups()
    yield
    grader_logging.close_all_groups()


@pytest.fixture
def course():
    return CourseConfig.load()


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def context():
    return ActionContext(
        token='fake_github_token',
        repository='usf-cs212/project-student',
        actor='student',
        run_id='123456',
        run_number='7',
    )


@pytest.fixture
def functionality_state():
    """Saved state for the v2.3.1 functionality request."""
    return {
        'release': 'v2.3.1',
        'type': 'Functionality',
        'releaseDate': '2024-03-10T10:00:00Z',
        'releaseUrl': 'https://github.com/usf-cs212/project-student/releases/tag/v2.3.1',
        'runId': '123456',
        'runNumber': '7',
        'runUrl': 'https://github.com/usf-cs212/project-student/actions/runs/123456',
    }


@pytest.fixture
def design_state(functionality_state):
    return {**functionality_state, 'type': 'Design'}


@pytest.fixture
def make_issue():
    return issue_json
