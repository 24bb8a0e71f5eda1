"""Context enrichers run before and after the incrementers of each commit."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from trunkver.core.version import VersionField

if TYPE_CHECKING:
    from trunkver.core.iteration import TrunkCommit, TrunkIteration
    from trunkver.core.trunk.context import TrunkContext


class ContextEnricher(ABC):
    """Updates the fold context around the evaluation of one commit."""

    @abstractmethod
    def enrich(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> None: ...


# =============================================================================
# Pre-enrichers
# =============================================================================


class EnrichSemanticVersion(ContextEnricher):
    """Select the tag version the incrementers of this commit work with.

    The highest version matching the search label wins; without one the
    highest stable version is used. Remaining versions are kept as
    alternatives.
    """

    def enrich(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> None:
        label = context.search_label(commit)
        matching = [v for v in commit.semantic_versions if v.is_match_for_branch_specific_label(label)]
        candidates = matching or [v for v in commit.semantic_versions if not v.is_pre_release]

        context.semantic_version = max(candidates, default=None)
        context.alternative_semantic_versions.update(
            v for v in commit.semantic_versions if v not in candidates
        )


class EnrichIncrement(ContextEnricher):
    """Consolidate the forced and branch increments; refresh the label.

    Trunk commits only move the version when their message forces it, so
    the branch increment is consolidated for non-trunk commits only.
    """

    def enrich(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> None:
        increment_forced_by_branch = VersionField.NONE
        if not commit.configuration.is_main_branch:
            increment_forced_by_branch = commit.configuration.increment.to_version_field()
        context.increment = context.increment.consolidate(commit.increment, increment_forced_by_branch)
        if commit.increment != VersionField.NONE:
            context.force_increment = True

        if commit.branch_changed:
            context.label = None
        if context.label is None:
            context.label = context.label_for(commit.branch_name, commit.configuration)


# =============================================================================
# Post-enrichers
# =============================================================================


class RemoveSemanticVersion(ContextEnricher):
    def enrich(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> None:
        context.semantic_version = None


class RemoveIncrement(ContextEnricher):
    """Drop consumed increments.

    Every trunk commit is a release of its own, so its increment is
    consumed. Non-trunk commits carry the increment forward until an
    operand resets it.
    """

    def enrich(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> None:
        if commit.configuration.is_main_branch:
            context.increment = VersionField.NONE
        context.force_increment = False
