"""Fold state threaded through the commits of one iteration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trunkver.core.version import VersionField

if TYPE_CHECKING:
    from collections.abc import Callable

    from trunkver.config.models import EffectiveConfiguration
    from trunkver.core.base_version import BaseVersion
    from trunkver.core.iteration import TrunkCommit, TrunkIteration
    from trunkver.core.version import SemanticVersion
    from trunkver.vcs.git import Commit


@dataclass
class TrunkContext:
    """Mutable state shared by the enrichers and incrementers of one fold.

    Attributes:
        target_label: Label requested for the version being calculated
        target_branch: Branch the version is calculated for
        semantic_version: Tag version selected for the current commit
        label: Label applied by operators, reset when the branch changes
        increment: Accumulated version field to increment
        force_increment: Set when a commit message forced the increment
        alternative_semantic_versions: Tag versions that did not match
        base_version_source: Commit the running version derives from
        resolve_child: Folds the child iteration of a traced merge
    """

    target_label: str | None = None
    target_branch: str | None = None
    semantic_version: SemanticVersion | None = None
    label: str | None = None
    increment: VersionField = VersionField.NONE
    force_increment: bool = False
    alternative_semantic_versions: set[SemanticVersion] = field(default_factory=set)
    base_version_source: Commit | None = None
    resolve_child: Callable[[TrunkIteration, str | None, str | None], BaseVersion] | None = field(
        default=None, repr=False
    )

    @property
    def alternative_semantic_version(self) -> SemanticVersion | None:
        return max(self.alternative_semantic_versions, default=None)

    def label_for(self, branch_name: str, configuration: EffectiveConfiguration) -> str | None:
        """Label for versions built on ``branch_name``.

        The target label applies to the target branch only; every other
        branch uses the label of its own configuration.
        """
        if self.target_label is not None and branch_name == self.target_branch:
            return self.target_label
        return configuration.label_for(branch_name)

    def search_label(self, commit: TrunkCommit) -> str | None:
        """Label a tag on ``commit`` must carry to count as a match."""
        if self.target_label is not None:
            return self.target_label
        return commit.configuration.label_for(commit.branch_name)
