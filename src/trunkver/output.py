"""Rendering of version results for the command line."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.tree import Tree

from trunkver.core.base_version import BaseVersionOperand
from trunkver.core.trunk import evaluate

if TYPE_CHECKING:
    from trunkver.config.models import EffectiveConfiguration
    from trunkver.core.base_version import BaseVersionIncrement
    from trunkver.core.calculator import VersionResult
    from trunkver.core.iteration import TrunkIteration

OUTPUT_FORMATS = ("text", "json")


def render_text(result: VersionResult) -> str:
    return str(result.semantic_version)


def render_json(result: VersionResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def render_configuration(configuration: EffectiveConfiguration, branch_name: str) -> str:
    """Render the effective configuration of ``branch_name`` as JSON."""
    data = {
        "branch_name": branch_name,
        "branch_regex": configuration.branch_regex,
        "label": configuration.label_for(branch_name),
        "increment": str(configuration.increment),
        "is_main_branch": configuration.is_main_branch,
        "is_release_branch": configuration.is_release_branch,
        "commit_message_incrementing": str(configuration.commit_message_incrementing),
        "track_merge_message": configuration.track_merge_message,
        "prevent_increment_when_current_commit_tagged": configuration.prevent_increment_when_current_commit_tagged,
        "tag_prefix": configuration.tag_prefix,
    }
    return json.dumps(data, indent=2)


def describe_increment(item: BaseVersionIncrement) -> str:
    """One-line description of a version operation."""
    if isinstance(item, BaseVersionOperand):
        return f"[cyan]{item.source}[/] set {item.semantic_version}"

    parts = [f"increment {item.increment}"]
    if item.label is not None:
        parts.append(f"label {item.label!r}")
    if item.force_increment:
        parts.append("forced")
    if item.alternative_semantic_version is not None:
        parts.append(f"at least {item.alternative_semantic_version}")
    return f"[cyan]{item.source}[/] " + ", ".join(parts)


def build_iteration_tree(
    iteration: TrunkIteration,
    target_label: str | None,
    target_branch: str | None = None,
    tree: Tree | None = None,
) -> Tree:
    """Build a rich tree of ``iteration``, its commits and their operations.

    Args:
        iteration: Root of the iteration tree to render
        target_label: Label the version was calculated for
        target_branch: Branch the version was calculated for
        tree: Node to attach to (a new root is created when None)
    """
    target_branch = target_branch if target_branch is not None else iteration.branch_name
    label = f"[bold]iteration {iteration.name}[/] [green]{iteration.branch_name}[/]"
    node = tree.add(label) if tree is not None else Tree(label)

    operations: dict[str, list[BaseVersionIncrement]] = {}
    for commit, item in evaluate(iteration, target_label, target_branch):
        operations.setdefault(commit.sha, []).append(item)

    for commit in iteration.commits:
        text = f"[yellow]{commit.value.short_sha}[/] {escape(commit.value.subject)} [dim]({commit.branch_name})[/]"
        if commit.semantic_versions:
            text += " [magenta]" + ", ".join(str(v) for v in commit.semantic_versions) + "[/]"
        commit_node = node.add(text)
        for item in operations.get(commit.sha, []):
            commit_node.add(describe_increment(item))
        if commit.child_iteration is not None:
            build_iteration_tree(commit.child_iteration, target_label, target_branch, commit_node)

    return node
