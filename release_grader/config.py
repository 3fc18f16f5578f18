import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from release_grader.constants import BASE_GITHUB_API_URL, BASE_GITHUB_URL, DEFAULT_STATE_FILE
from release_grader.errors import ConfigError


def load_environment(dotenv_path: Optional[str] = None) -> None:
    """Load an optional .env file. Values already in the environment win."""
    load_dotenv(dotenv_path, override=False)


def debug_enabled(env: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if env is None else env
    return env.get('RELEASE_GRADER_DEBUG', '0').lower() in ('1', 'true', 'yes')


def state_file(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return env.get('GRADE_REQUEST_STATE') or DEFAULT_STATE_FILE


@dataclass(frozen=True)
class ActionContext:
    """Who and where a grade request runs: repository, token and workflow run."""

    token: str
    repository: str
    actor: str
    server_url: str = BASE_GITHUB_URL
    api_url: str = BASE_GITHUB_API_URL
    run_id: str = ''
    run_number: str = ''

    @property
    def run_url(self) -> str:
        return f"{self.server_url}/{self.repository}/actions/runs/{self.run_id}"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'ActionContext':
        env = os.environ if env is None else env

        token = env.get('INPUT_TOKEN') or env.get('GITHUB_TOKEN')
        if not token:
            raise ConfigError('Missing GitHub token. Set GITHUB_TOKEN or the action "token" input.')

        repository = env.get('GITHUB_REPOSITORY')
        if not repository or '/' not in repository:
            raise ConfigError(f'GITHUB_REPOSITORY must be in owner/repo format (got {repository!r}).')

        return cls(
            token=token,
            repository=repository,
            actor=env.get('GITHUB_ACTOR') or repository.split('/', 1)[0],
            server_url=(env.get('GITHUB_SERVER_URL') or BASE_GITHUB_URL).rstrip('/'),
            api_url=(env.get('GITHUB_API_URL') or BASE_GITHUB_API_URL).rstrip('/'),
            run_id=env.get('GITHUB_RUN_ID', ''),
            run_number=env.get('GITHUB_RUN_NUMBER', ''),
        )
