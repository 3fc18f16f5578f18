# Entrius 2025
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from release_grader.constants import BASE_GITHUB_API_URL, GITHUB_API_TIMEOUT, GITHUB_PAGE_SIZE, HTTP_OK
from release_grader.utils.logging import logger

# =============================================================================
# Rate Limit Configuration
# =============================================================================
RATE_LIMIT_MIN_REMAINING = 10  # Remaining requests below which a warning is logged


@dataclass
class RateLimitInfo:
    """Represents GitHub API rate limit information extracted from response headers."""

    limit: int  # Maximum requests allowed per hour
    remaining: int  # Requests remaining in current window
    reset_timestamp: int  # Unix timestamp when the rate limit resets
    used: int  # Requests used in current window

    @property
    def is_exceeded(self) -> bool:
        return self.remaining == 0

    @property
    def seconds_until_reset(self) -> int:
        current_time = int(time.time())
        return max(0, self.reset_timestamp - current_time)

    def __str__(self) -> str:
        return f"RateLimit(remaining={self.remaining}/{self.limit}, resets_in={self.seconds_until_reset}s)"


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    """
    Parse GitHub API rate limit information from response headers.

    Args:
        response: The HTTP response from GitHub API

    Returns:
        RateLimitInfo object if headers are present, None otherwise
    """
    headers = response.headers

    try:
        limit = int(headers.get('X-RateLimit-Limit', 0))
        remaining = int(headers.get('X-RateLimit-Remaining', 0))
        reset_timestamp = int(headers.get('X-RateLimit-Reset', 0))
        used = int(headers.get('X-RateLimit-Used', 0))

        if limit == 0 and reset_timestamp == 0:
            return None

        return RateLimitInfo(limit=limit, remaining=remaining, reset_timestamp=reset_timestamp, used=used)
    except (ValueError, TypeError) as e:
        logger.debug(f"Could not parse rate limit headers: {e}")
        return None


def check_preemptive_rate_limit(response: requests.Response) -> None:
    """
    Log a warning when the token is close to its rate limit.

    Requests are never retried, so this is purely diagnostic: a run that fails
    with 403 right after this warning most likely ran out of quota.
    """
    rate_limit_info = parse_rate_limit_headers(response)

    if rate_limit_info:
        if rate_limit_info.is_exceeded:
            logger.error(f"GitHub API rate limit exceeded: {rate_limit_info}")
        elif rate_limit_info.remaining <= RATE_LIMIT_MIN_REMAINING:
            logger.warning(
                f"Approaching GitHub API rate limit: {rate_limit_info.remaining} requests remaining, "
                f"resets in {rate_limit_info.seconds_until_reset}s"
            )


def make_headers(token: str) -> Dict[str, str]:
    """Build standard GitHub HTTP headers for a PAT.

    Args:
        token (str): Github pat
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github.v3+json",
    }


def describe_response(response: Any) -> str:
    """Short diagnostic rendering of a failed response for logs and errors."""
    status = getattr(response, 'status_code', None)
    text = str(getattr(response, 'text', '') or '')[:500]
    return f"status={status} body={text}"


class GitHubClient:
    """
    Issue, milestone and release calls against a single repository.

    Each method makes exactly one logical request (list calls follow pagination)
    and hands back the raw ``requests.Response`` (list calls also return the
    combined items). Deciding whether a status is a success is left to the
    caller, and nothing is retried.
    """

    def __init__(self, repository: str, token: str, api_url: str = BASE_GITHUB_API_URL):
        self.repository = repository
        self.api_url = api_url.rstrip('/')
        self._headers = make_headers(token)

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.repository}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.repo_url}{path}"
        logger.debug(f"{method} {url}")
        response = requests.request(method, url, headers=self._headers, timeout=GITHUB_API_TIMEOUT, **kwargs)
        check_preemptive_rate_limit(response)
        return response

    def _list(self, path: str, params: Dict[str, Any]) -> Tuple[requests.Response, List[Dict[str, Any]]]:
        """GET every page of a list endpoint.

        Returns the last response together with the combined items, or the
        first non-200 response with no items.
        """
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            response = self._request('GET', path, params={**params, 'per_page': GITHUB_PAGE_SIZE, 'page': page})
            if response.status_code != HTTP_OK:
                return response, []

            batch = response.json()
            items.extend(batch)
            if len(batch) < GITHUB_PAGE_SIZE:
                break
            page += 1

        return response, items

    # -------------------------------------------------------------------------
    # Releases
    # -------------------------------------------------------------------------

    def get_release_by_tag(self, tag: str) -> requests.Response:
        return self._request('GET', f"/releases/tags/{tag}")

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    def list_issues(self, labels: List[str], state: str = 'all') -> Tuple[requests.Response, List[Dict[str, Any]]]:
        """List issues carrying every label in ``labels``. Pull requests are dropped."""
        response, items = self._list('/issues', {'labels': ','.join(labels), 'state': state})
        return response, [item for item in items if 'pull_request' not in item]

    def create_issue(
        self,
        title: str,
        body: str,
        labels: List[str],
        assignee: Optional[str] = None,
        milestone: Optional[int] = None,
    ) -> requests.Response:
        payload: Dict[str, Any] = {'title': title, 'body': body, 'labels': labels}
        if assignee:
            payload['assignee'] = assignee
        if milestone is not None:
            payload['milestone'] = milestone
        return self._request('POST', '/issues', json=payload)

    def create_comment(self, issue_number: int, body: str) -> requests.Response:
        return self._request('POST', f"/issues/{issue_number}/comments", json={'body': body})

    def update_issue_state(self, issue_number: int, state: str) -> requests.Response:
        return self._request('PATCH', f"/issues/{issue_number}", json={'state': state})

    # -------------------------------------------------------------------------
    # Milestones
    # -------------------------------------------------------------------------

    def list_milestones(self, state: str = 'all') -> Tuple[requests.Response, List[Dict[str, Any]]]:
        return self._list('/milestones', {'state': state})

    def create_milestone(self, title: str, description: str, state: str = 'open') -> requests.Response:
        return self._request('POST', '/milestones', json={'title': title, 'state': state, 'description': description})
