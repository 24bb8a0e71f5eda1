"""Implementation of the 'show' command.

The show command prints the calculated version of a branch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trunkver.cli.shared import open_project
from trunkver.core.calculator import calculate_version
from trunkver.exceptions import TrunkverError
from trunkver.output import render_json, render_text

if TYPE_CHECKING:
    from rich.console import Console


def run_show(
    path: str | None,
    branch: str | None,
    label: str | None,
    output_format: str,
    console: Console,
    err_console: Console,
) -> None:
    """Run the show command.

    Args:
        path: Optional path to project directory
        branch: Branch to calculate for (defaults to the checked-out one)
        label: Pre-release label overriding the branch configuration
        output_format: "text" for the bare version, "json" for all fields
        console: Console for standard output
        err_console: Console for error output
    """
    config, repo = open_project(path, err_console)

    try:
        result = calculate_version(repo, config, branch_name=branch, label=label)
    except TrunkverError as e:
        err_console.print(f"[red]Error calculating version:[/] {e}")
        raise SystemExit(1) from e

    if output_format == "json":
        console.print_json(render_json(result))
    else:
        console.print(render_text(result), highlight=False)
