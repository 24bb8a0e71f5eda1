"""Trunk-based version strategy: the commit-graph walker.

The walker starts at the tip of the current branch and moves back
through its history, attributing every commit to the configuration of
the branch it really belongs to:

- at a commit where the current branch was cut from another branch the
  walk continues under that branch's configuration;
- a merge commit whose message names the merged branch spawns a child
  iteration for the commits that branch brought in;
- the first tag matching the target label ends the whole walk.

The resulting iteration tree is handed to the increment engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trunkver.config.models import CommitMessageIncrementMode, IncrementStrategy
from trunkver.core.iteration import TrunkIteration
from trunkver.core.merge_message import MergeMessage
from trunkver.core.trunk import determine_base_version
from trunkver.core.version import VersionField
from trunkver.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trunkver.config.models import EffectiveConfiguration, TrunkverConfig
    from trunkver.core.base_version import BaseVersion
    from trunkver.core.commits import IncrementStrategyFinder
    from trunkver.core.iteration import TrunkCommit
    from trunkver.core.tags import TaggedSemanticVersionRepository
    from trunkver.core.version import SemanticVersionWithTag
    from trunkver.vcs.git import Branch, Commit, GitRepository

    TaggedSemanticVersions = dict[str, list[SemanticVersionWithTag]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionContext:
    """What a single version calculation is about."""

    configuration: TrunkverConfig
    current_branch: Branch
    current_commit: Commit
    current_branch_commits: list[Commit]


@dataclass(frozen=True)
class EffectiveBranchConfiguration:
    """Effective configuration of a branch found as a branch origin."""

    configuration: EffectiveConfiguration
    branch: Branch


@dataclass(frozen=True)
class TrunkBasedResult:
    """Outcome of the walk and fold."""

    iteration: TrunkIteration
    base_version: BaseVersion
    target_label: str | None
    found: bool


class TrunkBasedVersionStrategy:
    """Builds the iteration tree for the current branch and folds it."""

    def __init__(
        self,
        context: VersionContext,
        repository: GitRepository,
        tagged_semantic_version_repository: TaggedSemanticVersionRepository,
        increment_strategy_finder: IncrementStrategyFinder,
    ) -> None:
        self.context = context
        self.repository = repository
        self.tagged_semantic_version_repository = tagged_semantic_version_repository
        self.increment_strategy_finder = increment_strategy_finder

    def get_base_version(self, configuration: EffectiveConfiguration, label: str | None = None) -> TrunkBasedResult:
        """Walk the current branch and determine its base version.

        Args:
            configuration: Effective configuration of the current branch
            label: Explicit pre-release label overriding the branch's own

        Raises:
            ConfigurationError: On an invalid configuration for the walk
            VersionCalculationError: If no version operation was produced
        """
        context = self.context
        iteration = self._create_iteration(context.current_branch.friendly_name, configuration)

        commits = configuration.ignore.filter(context.current_branch_commits)
        tagged_semantic_versions = self._get_tagged_semantic_versions(configuration, context.current_branch)
        target_label = configuration.label_for(context.current_branch.friendly_name, label)

        found = self._iterate_over_commits_recursive(
            commits=commits,
            iteration=iteration,
            target_label=target_label,
            tagged_semantic_versions=tagged_semantic_versions,
            traversed_commits=set(),
        )

        base_version = determine_base_version(iteration, target_label)
        logger.debug("Base version for %s is %s", context.current_branch, base_version)
        return TrunkBasedResult(iteration, base_version, target_label, found)

    # -------------------------------------------------------------------------
    # Walk
    # -------------------------------------------------------------------------

    def _create_iteration(
        self,
        branch_name: str,
        configuration: EffectiveConfiguration,
        parent: TrunkIteration | None = None,
    ) -> TrunkIteration:
        iteration = TrunkIteration.create(branch_name, configuration, parent)
        logger.debug("Created iteration %s", iteration)
        return iteration

    def _get_tagged_semantic_versions(
        self, configuration: EffectiveConfiguration, branch: Branch
    ) -> TaggedSemanticVersions:
        return self.tagged_semantic_version_repository.get_all_tagged_semantic_versions(
            self.context.configuration,
            configuration,
            branch,
            None,
            self.context.current_commit.date,
        )

    def _iterate_over_commits_recursive(
        self,
        commits: Iterable[Commit],
        iteration: TrunkIteration,
        target_label: str | None,
        tagged_semantic_versions: TaggedSemanticVersions,
        traversed_commits: set[str],
    ) -> bool:
        commits_was_branched_from: dict[str, EffectiveBranchConfiguration] | None = None

        configuration = iteration.configuration
        branch_name = iteration.branch_name

        for item in commits:
            if item.sha in traversed_commits:
                continue
            traversed_commits.add(item.sha)

            if commits_was_branched_from is None:
                commits_was_branched_from = self._get_commits_was_branched_from(iteration.branch_name)

            origin = commits_was_branched_from.get(item.sha)
            if origin is not None and (not configuration.is_main_branch or origin.configuration.is_main_branch):
                logger.debug("%s: %s was branched from %s", item.short_sha, branch_name, origin.branch)
                configuration = origin.configuration
                branch_name = origin.branch.friendly_name
                tagged_semantic_versions = self._get_tagged_semantic_versions(configuration, origin.branch)

            increment = self._get_increment_forced_by_commit(item, configuration)
            commit = iteration.create_commit(item, branch_name, configuration, increment)

            semantic_versions = tagged_semantic_versions.get(item.sha, [])
            commit.add_semantic_versions(element.value for element in semantic_versions)

            label = target_label if target_label is not None else configuration.label_for(branch_name)
            for semantic_version in semantic_versions:
                if semantic_version.value.is_match_for_branch_specific_label(label):
                    logger.debug("%s: tag %s matches label %r", item.short_sha, semantic_version.tag, label)
                    return True

            if item.is_merge and self._iterate_over_merge(
                item, commit, iteration, configuration, target_label, tagged_semantic_versions, traversed_commits
            ):
                return True

        return False

    def _iterate_over_merge(
        self,
        item: Commit,
        commit: TrunkCommit,
        iteration: TrunkIteration,
        configuration: EffectiveConfiguration,
        target_label: str | None,
        tagged_semantic_versions: TaggedSemanticVersions,
        traversed_commits: set[str],
    ) -> bool:
        if not configuration.track_merge_message:
            return False
        merge_message = MergeMessage.try_parse(item, self.context.configuration)
        if merge_message is None:
            return False

        if merge_message.version is not None:
            logger.debug("%s: merge message carries version %s", item.short_sha, merge_message.version)
            commit.add_semantic_versions([merge_message.version])
            return True

        parent_index = 1
        if merge_message.merged_branch is not None:
            child_configuration = self.context.configuration.get_effective_configuration(merge_message.merged_branch)

            if child_configuration.is_main_branch:
                if configuration.is_main_branch:
                    raise ConfigurationError(
                        f"Cannot attribute merge {item.short_sha}: trunk branch "
                        f"{merge_message.merged_branch!r} merged into trunk branch {commit.branch_name!r}",
                        branch=commit.branch_name,
                        merged_branch=merge_message.merged_branch,
                        commit=item.sha,
                    )
                parent_index = 0
                child_configuration = configuration

            merged_commits = self.increment_strategy_finder.get_merged_commits(
                item, parent_index, configuration.ignore
            )
            child_iteration = self._create_iteration(merge_message.merged_branch, child_configuration, iteration)
            logger.debug("%s: following %s into %s", item.short_sha, merge_message.merged_branch, child_iteration)

            done = self._iterate_over_commits_recursive(
                commits=merged_commits,
                iteration=child_iteration,
                target_label=target_label,
                tagged_semantic_versions=tagged_semantic_versions,
                traversed_commits=traversed_commits,
            )
            commit.add_child_iteration(child_iteration)
            if done:
                return True
        else:
            merged_commits = self.increment_strategy_finder.get_merged_commits(
                item, parent_index, configuration.ignore
            )

        traversed_commits.update(element.sha for element in merged_commits)
        return False

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_increment_forced_by_commit(self, commit: Commit, configuration: EffectiveConfiguration) -> VersionField:
        mode = configuration.commit_message_incrementing
        if mode == CommitMessageIncrementMode.ENABLED:
            return self.increment_strategy_finder.get_increment_forced_by_commit(commit, configuration)
        if mode == CommitMessageIncrementMode.DISABLED:
            return VersionField.NONE
        if mode == CommitMessageIncrementMode.MERGE_MESSAGE_ONLY:
            if commit.is_merge:
                return self.increment_strategy_finder.get_increment_forced_by_commit(commit, configuration)
            return VersionField.NONE
        raise ConfigurationError(
            f"Unknown commit message increment mode: {mode!r}",
            commit=commit.sha,
        )

    def _get_commits_was_branched_from(self, branch_name: str) -> dict[str, EffectiveBranchConfiguration]:
        """Map commits where ``branch_name`` left another branch to that branch.

        Branches inheriting their increment are not origins. When several
        branches share an origin commit, a trunk branch wins.
        """
        result: dict[str, EffectiveBranchConfiguration] = {}

        branch = self.repository.find_branch(branch_name)
        if branch is None:
            return result

        config = self.context.configuration
        for branch_commit in self.repository.find_commit_branches_was_branched_from(branch, config):
            name = branch_commit.branch.friendly_name
            if config.get_branch_configuration(name).increment == IncrementStrategy.INHERIT:
                continue

            effective = EffectiveBranchConfiguration(config.get_effective_configuration(name), branch_commit.branch)
            existing = result.get(branch_commit.commit.sha)
            if existing is None or (effective.configuration.is_main_branch and not existing.configuration.is_main_branch):
                result[branch_commit.commit.sha] = effective
        return result
