# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Late-penalty grade computation.

A release created strictly before its deadline cutoff earns full credit. Any
release at or after the cutoff is at least one week late, and every further
full week of lateness costs another tier:

    late_weeks = 1 + floor(days_late / 7)
    grade      = 100 - 10 * late_weeks

Grades are not clamped; an extremely late release yields a negative grade and
it is up to whoever records the grade to decide what to do with it.
"""

import math
from datetime import date, datetime
from typing import Mapping, Optional, Tuple, Union

import pytz

from release_grader.classes import GradeResult, GradeType
from release_grader.constants import DAYS_PER_WEEK, FULL_GRADE, LATE_PENALTY_PER_WEEK
from release_grader.errors import UnknownDeadline
from release_grader.utils.datetime_utils import (
    REFERENCE_TZ,
    civil_days_between,
    deadline_cutoff,
    format_timestamp,
    parse_github_timestamp,
)
from release_grader.utils.logging import logger


def late_weeks_for(days_late: float) -> int:
    """Number of late-penalty tiers for a release ``days_late`` civil days past the cutoff."""
    return 1 + math.floor(max(days_late, 0.0) / DAYS_PER_WEEK)


def compute_grade(
    created_at: Union[str, datetime],
    project: int,
    grade_type: GradeType,
    deadlines: Mapping[Tuple[GradeType, int], date],
    tz: Optional[pytz.BaseTzInfo] = None,
) -> GradeResult:
    """
    Compute the late-penalty adjusted grade for a release.

    Args:
        created_at: Release creation timestamp (ISO 8601, as reported by GitHub)
        project: Project number the release belongs to
        grade_type: Functionality or design
        deadlines: Civil deadline dates keyed by (grade type, project)
        tz: Reference timezone for deadlines (defaults to America/Los_Angeles)

    Returns:
        GradeResult with local timestamps, late weeks and grade

    Raises:
        UnknownDeadline: No deadline for (grade_type, project)
    """
    tz = tz or REFERENCE_TZ

    try:
        deadline_date = deadlines[(grade_type, project)]
    except KeyError:
        raise UnknownDeadline(grade_type.label, project) from None

    created = parse_github_timestamp(created_at, tz)
    deadline = deadline_cutoff(deadline_date, tz)

    if created < deadline:
        late_weeks = 0
    else:
        days_late = civil_days_between(deadline, created)
        late_weeks = late_weeks_for(days_late)
        logger.debug(f"Release is {days_late:.2f} days late ({late_weeks} late week(s))")

    return GradeResult(
        created_local=format_timestamp(created),
        deadline_local=format_timestamp(deadline),
        late_weeks=late_weeks,
        grade=FULL_GRADE - LATE_PENALTY_PER_WEEK * late_weeks,
    )
