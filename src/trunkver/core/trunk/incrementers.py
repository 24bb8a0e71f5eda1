"""Base classes for the incrementer rules.

Each rule family exists twice, once for commits whose configuration is a
trunk (main) branch and once for the rest. The concrete rules live in
``trunk.py`` and ``non_trunk.py``; the shared behaviour lives here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from trunkver.core.base_version import BaseVersionOperand, BaseVersionOperator
from trunkver.core.version import VersionField
from trunkver.exceptions import VersionCalculationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from trunkver.core.base_version import BaseVersionIncrement
    from trunkver.core.iteration import TrunkCommit, TrunkIteration
    from trunkver.core.trunk.context import TrunkContext
    from trunkver.core.version import SemanticVersion


class Incrementer(ABC):
    """A rule contributing version operations for matching commits."""

    on_trunk: ClassVar[bool]

    @property
    def name(self) -> str:
        return type(self).__name__

    def is_in_family(self, commit: TrunkCommit) -> bool:
        return commit.configuration.is_main_branch == self.on_trunk

    @abstractmethod
    def match_precondition(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> bool: ...

    @abstractmethod
    def get_increments(
        self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext
    ) -> Iterator[BaseVersionIncrement]: ...

    def _operator(
        self,
        context: TrunkContext,
        increment: VersionField,
        label: str | None,
        *,
        force_increment: bool = False,
        alternative_semantic_version: SemanticVersion | None = None,
    ) -> BaseVersionOperator:
        return BaseVersionOperator(
            source=self.name,
            increment=increment,
            label=label,
            force_increment=force_increment,
            alternative_semantic_version=alternative_semantic_version,
            base_version_source=context.base_version_source,
        )


class CommitBase(Incrementer):
    """Plain commit: no selected tag and no traced merge."""

    def match_precondition(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> bool:
        return self.is_in_family(commit) and context.semantic_version is None and not commit.has_child_iteration

    def get_increments(
        self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext
    ) -> Iterator[BaseVersionIncrement]:
        yield self._operator(
            context,
            context.increment,
            context.label,
            force_increment=context.force_increment,
            alternative_semantic_version=context.alternative_semantic_version if commit.is_last else None,
        )


class CommitWithTagBase(Incrementer):
    """Commit carrying the selected tag version.

    The tag version resets the running result and consumes the pending
    increment. Terminal variants additionally honor
    ``prevent_increment_when_current_commit_tagged``.
    """

    pre_release: ClassVar[bool]
    last: ClassVar[bool]

    def match_precondition(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> bool:
        semantic_version = context.semantic_version
        return (
            self.is_in_family(commit)
            and semantic_version is not None
            and semantic_version.is_pre_release == self.pre_release
            and commit.is_last == self.last
        )

    def get_increments(
        self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext
    ) -> Iterator[BaseVersionIncrement]:
        semantic_version = context.semantic_version
        if semantic_version is None:
            raise VersionCalculationError(f"No tag version selected for commit {commit}")

        context.base_version_source = commit.value
        yield BaseVersionOperand(
            source=self.name,
            semantic_version=semantic_version,
            base_version_source=commit.value,
        )

        if (
            self.last
            and commit.increment != VersionField.NONE
            and not commit.configuration.prevent_increment_when_current_commit_tagged
        ):
            yield self._operator(
                context,
                commit.increment,
                context.label,
                force_increment=True,
                alternative_semantic_version=context.alternative_semantic_version,
            )

        context.increment = VersionField.NONE
        context.force_increment = False
        context.label = None


class MergeCommitBase(Incrementer):
    """Merge commit whose merged branch was traced into a child iteration.

    The child iteration is resolved on its own. Its accumulated increment
    is folded into this commit's increment; when the child is anchored on
    a tag, that version becomes the alternative the operator cannot fall
    below. Terminal variants also apply every alternative seen so far.
    """

    last: ClassVar[bool]

    def match_precondition(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> bool:
        return (
            self.is_in_family(commit)
            and commit.has_child_iteration
            and context.semantic_version is None
            and commit.is_last == self.last
        )

    def get_increments(
        self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext
    ) -> Iterator[BaseVersionIncrement]:
        child_iteration = commit.child_iteration
        if child_iteration is None or context.resolve_child is None:
            raise VersionCalculationError(f"Cannot resolve the merged branch of commit {commit}")

        increment = context.increment
        alternatives = set(context.alternative_semantic_versions) if self.last else set()

        if child_iteration.commits:
            child = context.resolve_child(child_iteration, context.target_label, context.target_branch)
            increment = increment.consolidate(child.increment)
            if child.is_anchored:
                alternatives.add(child.get_semantic_version())
                context.base_version_source = child.base_version_source

        yield self._operator(
            context,
            increment,
            context.label,
            force_increment=context.force_increment,
            alternative_semantic_version=max(alternatives, default=None),
        )


class BranchedBase(Incrementer):
    """Terminal commit reached through a branch-origin switch.

    The iteration's own branch has no commits beyond this one, so the
    version is the one for a branch freshly cut here: the increment and
    label of the iteration's configuration apply.
    """

    to_trunk: ClassVar[bool]

    def match_precondition(self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext) -> bool:
        return (
            self.is_in_family(commit)
            and commit.is_last
            and commit.branch_name != iteration.branch_name
            and iteration.configuration.is_main_branch == self.to_trunk
        )

    def get_increments(
        self, iteration: TrunkIteration, commit: TrunkCommit, context: TrunkContext
    ) -> Iterator[BaseVersionIncrement]:
        configuration = iteration.configuration
        yield self._operator(
            context,
            configuration.increment.to_version_field(),
            context.label_for(iteration.branch_name, configuration),
            alternative_semantic_version=context.alternative_semantic_version,
        )
