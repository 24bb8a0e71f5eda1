"""Turns an iteration tree into version operations and folds them.

For every commit of an iteration, oldest first, the pre-enrichers run,
then every incrementer whose precondition matches contributes, then the
post-enrichers clean up. The order of the collections below is part of
the contract: rules are not exclusive, and earlier rules may change the
context later rules see.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trunkver.core.base_version import fold
from trunkver.core.trunk.context import TrunkContext
from trunkver.core.trunk.enrichers import (
    EnrichIncrement,
    EnrichSemanticVersion,
    RemoveIncrement,
    RemoveSemanticVersion,
)
from trunkver.core.trunk.non_trunk import (
    CommitOnNonTrunk,
    CommitOnNonTrunkBranchedToNonTrunk,
    CommitOnNonTrunkBranchedToTrunk,
    CommitOnNonTrunkWithPreReleaseTag,
    CommitOnNonTrunkWithStableTag,
    LastCommitOnNonTrunkWithPreReleaseTag,
    LastCommitOnNonTrunkWithStableTag,
    LastMergeCommitOnNonTrunk,
    MergeCommitOnNonTrunk,
)
from trunkver.core.trunk.trunk import (
    CommitOnTrunk,
    CommitOnTrunkBranchedToNonTrunk,
    CommitOnTrunkBranchedToTrunk,
    CommitOnTrunkWithPreReleaseTag,
    CommitOnTrunkWithStableTag,
    LastCommitOnTrunkWithPreReleaseTag,
    LastCommitOnTrunkWithStableTag,
    LastMergeCommitOnTrunk,
    MergeCommitOnTrunk,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from trunkver.core.base_version import BaseVersion, BaseVersionIncrement
    from trunkver.core.iteration import TrunkCommit, TrunkIteration
    from trunkver.core.trunk.enrichers import ContextEnricher
    from trunkver.core.trunk.incrementers import Incrementer

PRE_ENRICHERS: tuple[ContextEnricher, ...] = (
    EnrichSemanticVersion(),
    EnrichIncrement(),
)

POST_ENRICHERS: tuple[ContextEnricher, ...] = (
    RemoveSemanticVersion(),
    RemoveIncrement(),
)

INCREMENTERS: tuple[Incrementer, ...] = (
    # Trunk
    CommitOnTrunk(),
    CommitOnTrunkWithPreReleaseTag(),
    LastCommitOnTrunkWithPreReleaseTag(),
    CommitOnTrunkWithStableTag(),
    LastCommitOnTrunkWithStableTag(),
    MergeCommitOnTrunk(),
    LastMergeCommitOnTrunk(),
    CommitOnTrunkBranchedToTrunk(),
    CommitOnTrunkBranchedToNonTrunk(),
    # NonTrunk
    CommitOnNonTrunk(),
    CommitOnNonTrunkWithPreReleaseTag(),
    LastCommitOnNonTrunkWithPreReleaseTag(),
    CommitOnNonTrunkWithStableTag(),
    LastCommitOnNonTrunkWithStableTag(),
    MergeCommitOnNonTrunk(),
    LastMergeCommitOnNonTrunk(),
    CommitOnNonTrunkBranchedToTrunk(),
    CommitOnNonTrunkBranchedToNonTrunk(),
)


def evaluate(
    iteration: TrunkIteration,
    target_label: str | None,
    target_branch: str | None = None,
) -> Iterator[tuple[TrunkCommit, BaseVersionIncrement]]:
    """Yield every operation produced for ``iteration`` with its commit."""
    context = TrunkContext(
        target_label=target_label,
        target_branch=target_branch if target_branch is not None else iteration.branch_name,
        resolve_child=determine_base_version,
    )

    for commit in iteration.commits:
        for enricher in PRE_ENRICHERS:
            enricher.enrich(iteration, commit, context)

        for incrementer in INCREMENTERS:
            if incrementer.match_precondition(iteration, commit, context):
                for item in incrementer.get_increments(iteration, commit, context):
                    yield commit, item

        for enricher in POST_ENRICHERS:
            enricher.enrich(iteration, commit, context)


def get_increments(
    iteration: TrunkIteration,
    target_label: str | None,
    target_branch: str | None = None,
) -> Iterator[BaseVersionIncrement]:
    for _, item in evaluate(iteration, target_label, target_branch):
        yield item


def determine_base_version(
    iteration: TrunkIteration,
    target_label: str | None,
    target_branch: str | None = None,
) -> BaseVersion:
    """Fold the operations of ``iteration`` into its base version.

    Raises:
        VersionCalculationError: If the iteration produced no operation
    """
    return fold(get_increments(iteration, target_label, target_branch))
