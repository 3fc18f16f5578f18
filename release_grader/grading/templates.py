"""
Markdown bodies for tracking issues and their instructional comment.
"""

from typing import Optional

from release_grader.classes import GradeRequest, GradeResult, GradeType
from release_grader.errors import UnsupportedFeature

FUNCTIONALITY_BODY = """\
## Student Information

  - **Full Name:** [FULL_NAME]
  - **USF Email:** [USF_EMAIL]@usfca.edu

## Project Information

  - **Project:** Project {project} {project_name}
  - **{grade_type} Deadline:** {deadline}
  - **Release:** [{release}]({release_url})
  - **Release Date:** {created}

## Grade Information

  - **Late Weeks:** {late_weeks}
  - **Late Penalty:** {penalty}%
  - **Project {grade_type} Grade:** {grade}%

> Computed by run [#{run_number}]({run_url}) (id {run_id}).
"""

INSTRUCTIONS_COMMENT = """\
## Student Instructions

Hello @{actor}! Please follow these instructions to complete your request:

  - [ ] Replace the `[FULL_NAME]` and `[USF_EMAIL]` placeholders above with your actual name and username.
  - [ ] Make sure the labels, assignee and milestone on this issue are correct.
  - [ ] Double-check the release, release date, deadline and grade information above.
  - [ ] **Re-open this issue when all of the above is complete.**

This issue was closed automatically. Your grade is not final until you re-open it and it is reviewed.
"""


def render_issue_body(
    request: GradeRequest,
    project_name: str,
    result: Optional[GradeResult],
) -> str:
    if request.grade_type != GradeType.FUNCTIONALITY or result is None:
        raise UnsupportedFeature(f'{request.grade_type.value} grade issues are not yet supported.')

    return FUNCTIONALITY_BODY.format(
        project=request.project,
        project_name=project_name,
        grade_type=request.grade_type.value,
        deadline=result.deadline_local,
        release=request.release,
        release_url=request.release_url,
        created=result.created_local,
        late_weeks=result.late_weeks,
        penalty=result.penalty,
        grade=result.grade,
        run_number=request.run_number,
        run_url=request.run_url,
        run_id=request.run_id,
    )


def render_instructions(actor: str) -> str:
    return INSTRUCTIONS_COMMENT.format(actor=actor)
