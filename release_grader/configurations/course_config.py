import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import pytz

from release_grader.classes import GradeType
from release_grader.constants import DEFAULT_REFERENCE_TIMEZONE, PROJECT_NUMBERS
from release_grader.errors import ConfigError, UnknownDeadline
from release_grader.utils.logging import logger

DEFAULT_COURSE_FILE = Path(__file__).parent / "course.json"

DeadlineKey = Tuple[GradeType, int]


@dataclass(frozen=True)
class CourseConfig:
    """Static course tables: deadlines, project names and default assignees."""

    timezone: str
    deadlines: Mapping[DeadlineKey, date]
    names: Mapping[int, str]
    assignees: Mapping[GradeType, str]

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    def deadline(self, grade_type: GradeType, project: int) -> date:
        try:
            return self.deadlines[(grade_type, project)]
        except KeyError:
            raise UnknownDeadline(grade_type.label, project) from None

    def project_name(self, project: int) -> str:
        return self.names[project]

    def assignee(self, grade_type: GradeType) -> str:
        return self.assignees[grade_type]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'CourseConfig':
        """
        Build and validate the course tables from their JSON form.

        Every grade type needs a deadline for every project, every project a
        name and every grade type an assignee. Gaps raise ConfigError here
        rather than surfacing later as UnknownDeadline mid-request.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(f"Expected a mapping for course config, got {type(data).__name__}")

        timezone = data.get('timezone', DEFAULT_REFERENCE_TIMEZONE)
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ConfigError(f"Unknown reference timezone: {timezone}") from None

        raw_deadlines = data.get('deadlines') or {}
        raw_names = data.get('names') or {}
        raw_assignees = data.get('assignees') or {}

        deadlines: Dict[DeadlineKey, date] = {}
        names: Dict[int, str] = {}
        assignees: Dict[GradeType, str] = {}
        problems = []

        for grade_type in GradeType:
            by_project = raw_deadlines.get(grade_type.label) or {}
            for project in PROJECT_NUMBERS:
                value = by_project.get(str(project))
                if value is None:
                    problems.append(f"missing {grade_type.label} deadline for project {project}")
                    continue
                try:
                    deadlines[(grade_type, project)] = date.fromisoformat(value)
                except (TypeError, ValueError):
                    problems.append(f"invalid {grade_type.label} deadline for project {project}: {value!r}")

            assignee = raw_assignees.get(grade_type.label)
            if not assignee:
                problems.append(f"missing {grade_type.label} assignee")
            else:
                assignees[grade_type] = assignee

        for project in PROJECT_NUMBERS:
            name = raw_names.get(str(project))
            if not name:
                problems.append(f"missing name for project {project}")
            else:
                names[project] = name

        if problems:
            raise ConfigError("Invalid course config: " + "; ".join(problems))

        return cls(timezone=timezone, deadlines=deadlines, names=names, assignees=assignees)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'CourseConfig':
        """Load course tables from ``path``, or the bundled course.json."""
        course_file = Path(path) if path else DEFAULT_COURSE_FILE

        try:
            with open(course_file, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Course config not found: {course_file}") from None
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse JSON from {course_file}: {e}") from None

        config = cls.from_mapping(data)
        logger.debug(f"Loaded course config from {course_file} ({len(config.deadlines)} deadlines)")
        return config
