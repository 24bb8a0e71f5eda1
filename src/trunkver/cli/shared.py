"""Helpers shared by the command implementations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.logging import RichHandler

from trunkver.config import load_config
from trunkver.exceptions import ConfigError, GitError
from trunkver.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from trunkver.config.models import TrunkverConfig


def setup_logging(verbose: bool, console: Console) -> None:
    """Route trunkver's loggers through rich on ``console``."""
    logger = logging.getLogger("trunkver")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=False, show_time=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def open_project(path: str | None, err_console: Console) -> tuple[TrunkverConfig, GitRepository]:
    """Load the configuration and open the repository at ``path``.

    Exits with status 1 after printing the error when either fails.
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    try:
        repo = GitRepository(project_path)
    except GitError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    return config, repo
