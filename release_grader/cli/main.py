# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Release Grader CLI - Main entry point

Usage:
    grade-request setup --type T --release TAG   - Validate a request and save it (alias: s)
    grade-request run                            - Create the tracking issue for the saved request (alias: r)
    grade-request grade --release TAG ...        - Preview a grade offline (alias: g)
    grade-request deadlines                      - Show configured deadlines (alias: d)
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from release_grader import __version__
from release_grader.classes import GradeType
from release_grader.config import ActionContext, debug_enabled, load_environment, state_file
from release_grader.configurations.course_config import CourseConfig
from release_grader.errors import GradeRequestError
from release_grader.grading.grade import compute_grade
from release_grader.grading.orchestrator import run_request
from release_grader.grading.release import parse_project
from release_grader.grading.setup import check_request_type, setup_request
from release_grader.state import StateStore
from release_grader.utils.github_api_tools import GitHubClient
from release_grader.utils.logging import logger, mask, set_failed, setup_logger
from release_grader.utils.utils import mask_secret

console = Console()


class AliasGroup(click.Group):
    """Click Group that supports command aliases without duplicate help entries."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._aliases = {}  # alias -> canonical name

    def add_alias(self, name, alias):
        self._aliases[alias] = name

    def get_command(self, ctx, cmd_name):
        canonical = self._aliases.get(cmd_name, cmd_name)
        return super().get_command(ctx, canonical)

    def format_commands(self, ctx, formatter):
        """Write the help text, appending aliases to command descriptions."""
        alias_map = {}
        for alias, canonical in self._aliases.items():
            alias_map.setdefault(canonical, []).append(alias)

        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.commands.get(subcommand)
            if cmd is None or cmd.hidden:
                continue
            help_text = cmd.get_short_help_str(limit=150)
            aliases = alias_map.get(subcommand)
            if aliases:
                subcommand = f'{subcommand}, {", ".join(sorted(aliases))}'
            commands.append((subcommand, help_text))

        if commands:
            with formatter.section('Commands'):
                formatter.write_dl(commands)


@click.group(cls=AliasGroup)
@click.version_option(version=__version__, prog_name='release-grader')
@click.option('--debug', is_flag=True, default=False, help='Verbose logging')
@click.option('--log-dir', default=None, type=click.Path(file_okay=False), help='Also write a rotating log here')
@click.option(
    '--config',
    'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Course config JSON (deadlines, names, assignees)',
)
@click.pass_context
def cli(ctx, debug: bool, log_dir: Optional[str], config_path: Optional[str]):
    """Release Grader - Request project grades from release tags"""
    load_environment()
    setup_logger(debug=debug or debug_enabled(), log_dir=log_dir)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


def _load_course(ctx) -> CourseConfig:
    return CourseConfig.load(ctx.obj.get('config_path'))


def _load_context() -> ActionContext:
    context = ActionContext.from_env()
    mask(context.token)
    logger.debug(f"Using token {mask_secret(context.token)} for {context.repository}")
    return context


@cli.command('setup')
@click.option('--type', 'grade_type', required=True, help='Grade type: functionality (f) or design (d)')
@click.option('--release', 'tag', required=True, help='Release tag, e.g. v1.2.0')
@click.pass_context
def setup_command(ctx, grade_type: str, tag: str):
    """
    Validate a grade request and save it for the run phase.

    \b
    Examples:
        grade-request setup --type functionality --release v1.0.0
        grade-request s --type d --release v2.1.3
    """
    try:
        context = _load_context()
        client = GitHubClient(context.repository, context.token, context.api_url)
        setup_request(client, context, grade_type, tag, StateStore(state_file()))
    except Exception as e:
        set_failed(f'Invalid project grade request. {e}')
        sys.exit(1)


@cli.command('run')
@click.pass_context
def run_command(ctx):
    """
    Create, comment on and close the tracking issue for the saved request.

    \b
    Examples:
        grade-request run
        GRADE_REQUEST_STATE=/tmp/state.json grade-request r
    """
    try:
        course = _load_course(ctx)
        context = _load_context()
        state = StateStore(state_file()).restore()
    except Exception as e:
        set_failed(f'Unable to request project grade. {e}')
        sys.exit(1)

    outcome = run_request(state, context, course)
    if not outcome.success:
        sys.exit(outcome.exit_code)

    console.print(f'\n  [green]✓[/green] {outcome.message}\n')
    if outcome.issue and outcome.issue.html_url:
        console.print(f'  [dim]{outcome.issue.html_url}[/dim]\n')


@cli.command('grade')
@click.option('--release', 'tag', required=True, help='Release tag, e.g. v1.2.0')
@click.option('--created', required=True, help='Release creation time (ISO 8601)')
@click.option('--type', 'grade_type', default='functionality', show_default=True, help='Grade type')
@click.pass_context
def grade_command(ctx, tag: str, created: str, grade_type: str):
    """
    Preview the late-penalty grade for a release without touching GitHub.

    \b
    Examples:
        grade-request grade --release v2.3.1 --created 2024-03-10T10:00:00Z
    """
    try:
        course = _load_course(ctx)
        project = parse_project(tag)
        resolved = check_request_type(grade_type)
        result = compute_grade(created, project, resolved, course.deadlines, course.tz)
    except (GradeRequestError, ValueError) as e:
        console.print(f'[red]Error: {e}[/red]')
        sys.exit(1)

    table = Table(show_header=True)
    table.add_column('Field', style='cyan')
    table.add_column('Value', style='green')
    table.add_row('Project', f'{project} {course.project_name(project)}')
    table.add_row('Release created', result.created_local)
    table.add_row(f'{resolved.value} deadline', result.deadline_local)
    table.add_row('Late weeks', str(result.late_weeks))
    table.add_row('Grade', f'{result.grade}%')
    console.print(table)


@cli.command('deadlines')
@click.pass_context
def deadlines_command(ctx):
    """Show the configured deadline for every project and grade type."""
    try:
        course = _load_course(ctx)
    except GradeRequestError as e:
        console.print(f'[red]Error: {e}[/red]')
        sys.exit(1)

    table = Table(show_header=True, title=f'Deadlines ({course.timezone}, 23:59:59)')
    table.add_column('Project', style='cyan')
    for grade_type in GradeType:
        table.add_column(grade_type.value, style='green')

    for project, name in sorted(course.names.items()):
        row = [f'{project} {name}']
        row.extend(course.deadline(grade_type, project).isoformat() for grade_type in GradeType)
        table.add_row(*row)

    console.print(table)


cli.add_alias('setup', 's')
cli.add_alias('run', 'r')
cli.add_alias('grade', 'g')
cli.add_alias('deadlines', 'd')


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
