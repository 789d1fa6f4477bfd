"""Logging setup for prebundle progress and stats lines.

Progress and stats are INFO records on the ``prebundle`` logger tree.
``-q`` hides them; ``-v`` or ``is_debug = true`` in prebundle.toml adds
debug records such as ignored manifests and merged dynamic compile options.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "prebundle"


def log_level(verbosity: int = 0, quiet: bool = False) -> int:
    """Pick the root log level; quiet wins over verbosity."""
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbosity >= 1 else logging.INFO


def configure_logging(verbosity: int = 0, quiet: bool = False, no_color: bool = False) -> Console:
    """Route log records through a Rich handler on stderr.

    Returns:
        The stderr console, shared with CLI output
    """
    console = Console(stderr=True, force_terminal=not no_color, no_color=no_color)
    handler = RichHandler(
        console=console,
        show_time=verbosity >= 2,
        show_path=verbosity >= 2,
    )
    logging.basicConfig(level=log_level(verbosity, quiet), format="%(message)s", handlers=[handler])
    return console


def enable_debug_logging() -> None:
    """Let debug records from prebundle through; quiet runs stay quiet."""
    if not logging.getLogger().isEnabledFor(logging.INFO):
        return
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)
