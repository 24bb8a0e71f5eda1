"""Implementation of the 'explain' command.

Shows how the version was derived: every iteration of the walk, the
commits attributed to it and the operations each commit contributed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel

from trunkver.cli.shared import open_project
from trunkver.core.calculator import calculate_version
from trunkver.exceptions import TrunkverError
from trunkver.output import build_iteration_tree

if TYPE_CHECKING:
    from rich.console import Console


def run_explain(
    path: str | None,
    branch: str | None,
    label: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the explain command.

    Args:
        path: Optional path to project directory
        branch: Branch to calculate for (defaults to the checked-out one)
        label: Pre-release label overriding the branch configuration
        console: Console for standard output
        err_console: Console for error output
    """
    config, repo = open_project(path, err_console)

    try:
        result = calculate_version(repo, config, branch_name=branch, label=label)
    except TrunkverError as e:
        err_console.print(f"[red]Error calculating version:[/] {e}")
        raise SystemExit(1) from e

    effective = config.get_effective_configuration(result.branch_name)
    target_label = effective.label_for(result.branch_name, label)
    console.print(build_iteration_tree(result.iteration, target_label, result.branch_name))

    source = result.version_source_sha[:7] if result.version_source_sha else "none"
    console.print(
        Panel(
            f"Version: [green]{result.semantic_version}[/]\n"
            f"Branch: [cyan]{result.branch_name}[/] at {result.short_sha}\n"
            f"Source: {source} ({result.commits_since_version_source} commits since)",
            title="[green]Result[/]",
            border_style="green",
        )
    )
