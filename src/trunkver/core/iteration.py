"""Iteration tree built while walking the commit graph.

An iteration is one contiguous branch segment visited by the walker. It
owns the commit records attributed to it; a merge commit whose merged
branch was traced owns the child iteration created for that branch.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trunkver.core.version import VersionField

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from trunkver.config.models import EffectiveConfiguration
    from trunkver.core.version import SemanticVersion
    from trunkver.vcs.git import Commit

_iteration_counter = itertools.count(1)
_iteration_lock = threading.Lock()


def next_iteration_id() -> int:
    """Allocate a process-wide, strictly increasing iteration identifier."""
    with _iteration_lock:
        return next(_iteration_counter)


@dataclass(eq=False)
class TrunkIteration:
    """Traversal context for one branch segment."""

    id: int
    branch_name: str
    configuration: EffectiveConfiguration
    parent: TrunkIteration | None = None
    _records: list[TrunkCommit] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        branch_name: str,
        configuration: EffectiveConfiguration,
        parent: TrunkIteration | None = None,
    ) -> TrunkIteration:
        return cls(next_iteration_id(), branch_name, configuration, parent)

    @property
    def name(self) -> str:
        return f"#{self.id}"

    @property
    def commits(self) -> list[TrunkCommit]:
        """Commit records, oldest first."""
        return self._records[::-1]

    def create_commit(
        self,
        value: Commit,
        branch_name: str,
        configuration: EffectiveConfiguration,
        increment: VersionField = VersionField.NONE,
    ) -> TrunkCommit:
        """Record ``value`` as the next (older) commit of this iteration."""
        commit = TrunkCommit(self, value, branch_name, configuration, increment)
        if self._records:
            newer = self._records[-1]
            commit.successor = newer
            newer.predecessor = commit
        self._records.append(commit)
        return commit

    def walk(self) -> Iterator[TrunkCommit]:
        """Yield every record of the tree depth-first, oldest first."""
        for commit in self.commits:
            yield commit
            if commit.child_iteration is not None:
                yield from commit.child_iteration.walk()

    def __str__(self) -> str:
        return f"{self.name} ({self.branch_name})"


@dataclass(eq=False)
class TrunkCommit:
    """A git commit as attributed to an iteration."""

    iteration: TrunkIteration
    value: Commit
    branch_name: str
    configuration: EffectiveConfiguration
    increment: VersionField = VersionField.NONE
    semantic_versions: list[SemanticVersion] = field(default_factory=list)
    child_iteration: TrunkIteration | None = None
    predecessor: TrunkCommit | None = field(default=None, repr=False)
    successor: TrunkCommit | None = field(default=None, repr=False)

    @property
    def sha(self) -> str:
        return self.value.sha

    @property
    def is_merge(self) -> bool:
        return self.value.is_merge

    @property
    def has_child_iteration(self) -> bool:
        return self.child_iteration is not None

    @property
    def is_last(self) -> bool:
        """True for the newest record of the iteration."""
        return self.successor is None

    @property
    def branch_changed(self) -> bool:
        """True when the previous record was attributed to another branch."""
        return self.predecessor is not None and self.predecessor.branch_name != self.branch_name

    def add_semantic_versions(self, versions: Iterable[SemanticVersion]) -> None:
        self.semantic_versions.extend(versions)

    def add_child_iteration(self, iteration: TrunkIteration) -> None:
        self.child_iteration = iteration

    def __str__(self) -> str:
        return f"{self.value.short_sha} ({self.branch_name})"
