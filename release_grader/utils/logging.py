import logging
import os
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from typing import Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from release_grader.utils.utils import running_in_actions

LOGGER_NAME = 'release_grader'
EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10
DEFAULT_LOG_RETENTION_SIZE = 1024 * 1024

console = Console(highlight=False)

logger = logging.getLogger(LOGGER_NAME)

# Depth of currently open console groups
_open_groups = 0


def setup_logger(debug: bool = False, log_dir: Optional[str] = None) -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    logging.addLevelName(EVENTS_LEVEL_NUM, 'EVENT')

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_time=False, show_path=debug, markup=False)
        handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(handler)

    if log_dir and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, 'grade_requests.log'),
            maxBytes=DEFAULT_LOG_RETENTION_SIZE,
            backupCount=DEFAULT_LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s | %(levelname)s | %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
        )
        logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


def log_event(message: str) -> None:
    """Record a lifecycle event (issue created, closed, ...) at the EVENT level."""
    logger.log(EVENTS_LEVEL_NUM, message)


def start_group(title: str) -> None:
    global _open_groups
    _open_groups += 1
    if running_in_actions():
        print(f'::group::{title}', flush=True)
    else:
        console.rule(f'[bold cyan]{title}[/bold cyan]', align='left')


def end_group() -> None:
    """Close the innermost group. Closing with no open group is a no-op."""
    global _open_groups
    if _open_groups == 0:
        return
    _open_groups -= 1
    if running_in_actions():
        print('::endgroup::', flush=True)


def close_all_groups() -> None:
    while _open_groups:
        end_group()


@contextmanager
def log_group(title: str) -> Iterator[None]:
    start_group(title)
    try:
        yield
    finally:
        end_group()


def warning(message: str) -> None:
    logger.warning(message)
    if running_in_actions():
        print(f'::warning::{message}', flush=True)


def mask(value: str) -> None:
    """Ask the Actions runner to redact ``value`` from all later output."""
    if value and running_in_actions():
        print(f'::add-mask::{value}', flush=True)


def set_failed(message: str) -> None:
    """Report the terminal failure. Always printed outside of any group."""
    close_all_groups()
    if running_in_actions():
        print(f'::error::{message}', flush=True)
    console.print(f'\n  [red]✗[/red] {escape(message)}\n')
