"""Implementation of the 'config' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trunkver.cli.shared import open_project
from trunkver.core.calculator import resolve_branch
from trunkver.exceptions import GitError
from trunkver.output import render_configuration

if TYPE_CHECKING:
    from rich.console import Console


def run_config(
    path: str | None,
    branch: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Print the effective configuration of a branch as JSON."""
    config, repo = open_project(path, err_console)

    if branch is None:
        try:
            branch = resolve_branch(repo).friendly_name
        except GitError as e:
            err_console.print(f"[red]Error:[/] {e}")
            raise SystemExit(1) from e

    console.print_json(render_configuration(config.get_effective_configuration(branch), branch))
