# The MIT License (MIT)
# Copyright © 2025 Entrius

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from release_grader.constants import (
    FULL_GRADE,
    ISSUE_TITLE_FORMAT,
    MILESTONE_TITLE_FORMAT,
    PROJECT_LABEL_FORMAT,
    REQUIRED_STATE_KEYS,
)
from release_grader.errors import MissingStateError, UnsupportedGradeType
from release_grader.grading.release import parse_project


class GradeType(str, Enum):
    """Kind of grade a release is submitted for"""

    FUNCTIONALITY = "Functionality"
    DESIGN = "Design"

    @property
    def label(self) -> str:
        """Lowercase form, used both as issue label and config key."""
        return self.value.lower()

    @classmethod
    def from_value(cls, value: Any) -> 'GradeType':
        if isinstance(value, GradeType):
            return value
        for member in cls:
            if value == member.value or value == member.label:
                return member
        raise UnsupportedGradeType(value)


class DuplicateStatus(str, Enum):
    FRESH = "fresh"
    EXACT_DUPLICATE = "exact_duplicate"
    AMBIGUOUS_CONFLICT = "ambiguous_conflict"


@dataclass(frozen=True)
class DuplicateCheck:
    """Classification of prior tracking issues against a new request"""

    status: DuplicateStatus
    count: int = 0
    duplicate_number: Optional[int] = None
    related_titles: Tuple[str, ...] = ()

    @property
    def is_fresh(self) -> bool:
        return self.status == DuplicateStatus.FRESH


@dataclass(frozen=True)
class GradeRequest:
    """A single grade request restored from the setup phase. Never mutated."""

    project: int
    grade_type: GradeType
    release: str
    release_created_at: str
    release_url: str
    run_id: str
    run_number: str
    run_url: str

    @property
    def title(self) -> str:
        return issue_title(self.release, self.grade_type)

    @property
    def labels(self) -> List[str]:
        return [project_label(self.project), self.grade_type.label]

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> 'GradeRequest':
        """Build a request from persisted state, failing on any absent key."""
        missing = [key for key in REQUIRED_STATE_KEYS if state.get(key) in (None, '')]
        if missing:
            raise MissingStateError(missing)

        return cls(
            project=parse_project(state['release']),
            grade_type=GradeType.from_value(state['type']),
            release=state['release'],
            release_created_at=state['releaseDate'],
            release_url=state['releaseUrl'],
            run_id=str(state['runId']),
            run_number=str(state['runNumber']),
            run_url=state['runUrl'],
        )


@dataclass(frozen=True)
class GradeResult:
    """Late-penalty adjusted grade. Recomputed every run, never persisted."""

    created_local: str
    deadline_local: str
    late_weeks: int
    grade: int

    @property
    def is_late(self) -> bool:
        return self.late_weeks > 0

    @property
    def penalty(self) -> int:
        return FULL_GRADE - self.grade


@dataclass
class Milestone:
    number: int
    title: str
    description: Optional[str] = None
    state: str = "open"

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Milestone':
        return cls(
            number=data['number'],
            title=data['title'],
            description=data.get('description'),
            state=data.get('state', 'open'),
        )


@dataclass
class TrackingIssue:
    """Repository issue that drives a single grade request to completion"""

    number: int
    title: str
    labels: List[str] = field(default_factory=list)
    assignee: Optional[str] = None
    milestone: Optional[int] = None
    body: str = ""
    state: str = "open"
    html_url: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'TrackingIssue':
        labels = [label['name'] if isinstance(label, dict) else label for label in data.get('labels', [])]
        assignee = data.get('assignee')
        milestone = data.get('milestone')
        return cls(
            number=data['number'],
            title=data['title'],
            labels=labels,
            assignee=assignee.get('login') if isinstance(assignee, dict) else assignee,
            milestone=milestone.get('number') if isinstance(milestone, dict) else milestone,
            body=data.get('body') or "",
            state=data.get('state', 'open'),
            html_url=data.get('html_url'),
        )


def issue_title(release: str, grade_type: GradeType) -> str:
    return ISSUE_TITLE_FORMAT.format(release=release, type=grade_type.value)


def project_label(project: int) -> str:
    return PROJECT_LABEL_FORMAT.format(project=project)


def milestone_title(project: int) -> str:
    return MILESTONE_TITLE_FORMAT.format(project=project)
