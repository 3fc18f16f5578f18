#!/usr/bin/env python3
# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Unit tests for github_api_tools module.

Tests the GitHub REST calls used by grade requests, particularly focusing on:
- Request shape (method, URL, payload, headers)
- Pagination of list endpoints
- Raw responses handed back without retries
- Rate limit header parsing
"""

import time
from unittest.mock import Mock, patch

import pytest

from release_grader.utils import github_api_tools
from release_grader.utils.github_api_tools import (
    GitHubClient,
    check_preemptive_rate_limit,
    describe_response,
    make_headers,
    parse_rate_limit_headers,
)

REPO_URL = 'https://api.github.com/repos/usf-cs212/project-student'


# ============================================================================
# Fixtures
# ============================================================================


def response(status_code=200, data=None, headers=None, text=''):
    mock = Mock(status_code=status_code, text=text)
    mock.json.return_value = data
    mock.headers = headers or {}
    return mock


@pytest.fixture
def client():
    return GitHubClient('usf-cs212/project-student', 'fake_github_token')


@pytest.fixture
def mock_request():
    with patch('release_grader.utils.github_api_tools.requests.request') as mock:
        yield mock


# ============================================================================
# Headers & Requests
# ============================================================================


class TestRequests:
    def test_make_headers(self):
        headers = make_headers('abc')
        assert headers['Authorization'] == 'token abc'
        assert headers['Accept'] == 'application/vnd.github.v3+json'

    def test_create_issue_payload(self, client, mock_request):
        mock_request.return_value = response(201, {'number': 1})

        result = client.create_issue('Title', 'Body', ['project1', 'functionality'], assignee='grader', milestone=3)

        assert result.status_code == 201
        args, kwargs = mock_request.call_args
        assert args == ('POST', f'{REPO_URL}/issues')
        assert kwargs['json'] == {
            'title': 'Title',
            'body': 'Body',
            'labels': ['project1', 'functionality'],
            'assignee': 'grader',
            'milestone': 3,
        }
        assert kwargs['headers']['Authorization'] == 'token fake_github_token'
        assert kwargs['timeout'] == 30

    def test_create_issue_omits_empty_assignee_and_milestone(self, client, mock_request):
        mock_request.return_value = response(201, {'number': 1})
        client.create_issue('Title', 'Body', ['project1'])
        assert mock_request.call_args.kwargs['json'] == {'title': 'Title', 'body': 'Body', 'labels': ['project1']}

    def test_comment_and_close(self, client, mock_request):
        mock_request.return_value = response(201)
        client.create_comment(7, 'hello')
        assert mock_request.call_args.args == ('POST', f'{REPO_URL}/issues/7/comments')
        assert mock_request.call_args.kwargs['json'] == {'body': 'hello'}

        mock_request.return_value = response(200)
        client.update_issue_state(7, 'closed')
        assert mock_request.call_args.args == ('PATCH', f'{REPO_URL}/issues/7')
        assert mock_request.call_args.kwargs['json'] == {'state': 'closed'}

    def test_create_milestone(self, client, mock_request):
        mock_request.return_value = response(201, {'number': 2})
        client.create_milestone('Project 1', 'Project 1 Inverted Index')
        assert mock_request.call_args.kwargs['json'] == {
            'title': 'Project 1',
            'state': 'open',
            'description': 'Project 1 Inverted Index',
        }

    def test_release_by_tag(self, client, mock_request):
        mock_request.return_value = response(200, {'tag_name': 'v1.0.0'})
        client.get_release_by_tag('v1.0.0')
        assert mock_request.call_args.args == ('GET', f'{REPO_URL}/releases/tags/v1.0.0')

    def test_failure_is_returned_not_retried(self, client, mock_request):
        mock_request.return_value = response(502, text='Bad Gateway')

        result = client.create_comment(1, 'hello')

        assert result.status_code == 502
        assert mock_request.call_count == 1

    def test_custom_api_url(self, mock_request):
        mock_request.return_value = response(200, [])
        GitHubClient('org/repo', 'token', api_url='https://git.example.edu/api/v3/').list_milestones()
        assert mock_request.call_args.args[1] == 'https://git.example.edu/api/v3/repos/org/repo/milestones'


# ============================================================================
# List Endpoints
# ============================================================================


class TestListCalls:
    def test_list_issues_params_and_pull_request_filter(self, client, mock_request):
        mock_request.return_value = response(200, [
            {'number': 1, 'title': 'Issue'},
            {'number': 2, 'title': 'PR', 'pull_request': {'url': 'x'}},
        ])

        result, issues = client.list_issues(['project1', 'functionality'])

        assert result.status_code == 200
        assert [issue['number'] for issue in issues] == [1]
        params = mock_request.call_args.kwargs['params']
        assert params['labels'] == 'project1,functionality'
        assert params['state'] == 'all'
        assert params['per_page'] == 100

    def test_follows_pages_until_short_page(self, client, mock_request):
        full_page = [{'number': i, 'title': f'M{i}'} for i in range(100)]
        mock_request.side_effect = [response(200, full_page), response(200, [{'number': 100, 'title': 'M100'}])]

        result, milestones = client.list_milestones()

        assert len(milestones) == 101
        assert mock_request.call_count == 2
        assert mock_request.call_args_list[1].kwargs['params']['page'] == 2

    def test_list_failure_returns_no_items(self, client, mock_request):
        mock_request.return_value = response(404, {'message': 'Not Found'})

        result, issues = client.list_issues(['project1'])

        assert result.status_code == 404
        assert issues == []


# ============================================================================
# Rate Limits & Diagnostics
# ============================================================================


class TestRateLimits:
    def test_parse_headers(self):
        reset = int(time.time()) + 120
        info = parse_rate_limit_headers(response(headers={
            'X-RateLimit-Limit': '5000',
            'X-RateLimit-Remaining': '4',
            'X-RateLimit-Reset': str(reset),
            'X-RateLimit-Used': '4996',
        }))
        assert info.limit == 5000
        assert info.remaining == 4
        assert 0 < info.seconds_until_reset <= 120
        assert not info.is_exceeded

    def test_missing_headers(self):
        assert parse_rate_limit_headers(response()) is None

    def test_malformed_headers(self):
        assert parse_rate_limit_headers(response(headers={'X-RateLimit-Limit': 'lots'})) is None

    @patch.object(github_api_tools, 'logger')
    def test_warns_when_nearly_exhausted(self, mock_logger):
        check_preemptive_rate_limit(response(headers={
            'X-RateLimit-Limit': '5000',
            'X-RateLimit-Remaining': '3',
            'X-RateLimit-Reset': str(int(time.time()) + 60),
        }))
        mock_logger.warning.assert_called_once()

    @patch.object(github_api_tools, 'logger')
    def test_errors_when_exhausted(self, mock_logger):
        check_preemptive_rate_limit(response(headers={
            'X-RateLimit-Limit': '5000',
            'X-RateLimit-Remaining': '0',
            'X-RateLimit-Reset': str(int(time.time()) + 60),
        }))
        mock_logger.error.assert_called_once()

    def test_describe_response(self):
        assert describe_response(response(422, text='Validation Failed')) == 'status=422 body=Validation Failed'
