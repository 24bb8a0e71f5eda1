"""Command line interface for trunkver."""

from __future__ import annotations

import click
from rich.console import Console

from trunkver.cli.shared import setup_logging
from trunkver.output import OUTPUT_FORMATS

console = Console()
err_console = Console(stderr=True)

path_argument = click.argument("path", required=False, type=click.Path(exists=True, file_okay=False))
branch_option = click.option("--branch", "-b", default=None, help="Branch to calculate for (defaults to HEAD).")
label_option = click.option("--label", "-l", default=None, help="Pre-release label overriding the branch's own.")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(package_name="trunkver")
def cli(verbose: bool) -> None:
    """trunkver: semantic versions for trunk-based repositories."""
    setup_logging(verbose, err_console)


@cli.command("show")
@path_argument
@branch_option
@label_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Output format.",
)
def show_cmd(path: str | None, branch: str | None, label: str | None, output_format: str) -> None:
    """Print the calculated version."""
    from trunkver.cli.commands.show import run_show

    run_show(path, branch, label, output_format, console, err_console)


@cli.command("explain")
@path_argument
@branch_option
@label_option
def explain_cmd(path: str | None, branch: str | None, label: str | None) -> None:
    """Show how the version was derived."""
    from trunkver.cli.commands.explain import run_explain

    run_explain(path, branch, label, console, err_console)


@cli.command("config")
@path_argument
@branch_option
def config_cmd(path: str | None, branch: str | None) -> None:
    """Print the effective configuration of a branch."""
    from trunkver.cli.commands.config import run_config

    run_config(path, branch, console, err_console)


def main() -> None:
    cli()


__all__ = ["cli", "main"]
