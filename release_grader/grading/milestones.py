from release_grader.classes import Milestone, milestone_title
from release_grader.configurations.course_config import CourseConfig
from release_grader.constants import HTTP_CREATED, HTTP_OK, MILESTONE_DESCRIPTION_FORMAT
from release_grader.errors import MilestoneResolutionFailed
from release_grader.utils.github_api_tools import GitHubClient, describe_response
from release_grader.utils.logging import log_event, logger


def resolve_milestone(client: GitHubClient, project: int, course: CourseConfig) -> Milestone:
    """
    Get or create the ``Project {n}`` milestone.

    An existing milestone is returned as-is, without reconciling its fields.
    There is no locking: two first-time runs for the same project at the same
    moment could each create one.
    """
    title = milestone_title(project)

    logger.info("Listing milestones...")
    response, milestones = client.list_milestones(state='all')
    if response.status_code != HTTP_OK:
        logger.debug(f"Result: {describe_response(response)}")
        raise MilestoneResolutionFailed('Unable to list milestones.', response)

    for data in milestones:
        if data.get('title') == title:
            logger.info(f"Found {title} milestone (#{data['number']}).")
            return Milestone.from_json(data)

    description = MILESTONE_DESCRIPTION_FORMAT.format(project=project, name=course.project_name(project))
    response = client.create_milestone(title=title, description=description, state='open')
    if response.status_code != HTTP_CREATED:
        logger.debug(f"Result: {describe_response(response)}")
        raise MilestoneResolutionFailed(f'Unable to create {title} milestone.', response)

    milestone = Milestone.from_json(response.json())
    log_event(f"Created {milestone.title} milestone (#{milestone.number}).")
    return milestone
