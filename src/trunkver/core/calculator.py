"""Next-version calculation for a branch of a git repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from trunkver.core.commits import IncrementStrategyFinder
from trunkver.core.strategy import TrunkBasedVersionStrategy, VersionContext
from trunkver.core.tags import TaggedSemanticVersionRepository

if TYPE_CHECKING:
    from trunkver.config.models import TrunkverConfig
    from trunkver.core.base_version import BaseVersion
    from trunkver.core.iteration import TrunkIteration
    from trunkver.core.version import SemanticVersion
    from trunkver.vcs.git import Branch, Commit, GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionResult:
    """Calculated version of a branch and where it came from."""

    semantic_version: SemanticVersion
    branch_name: str
    sha: str
    version_source_sha: str | None
    commits_since_version_source: int
    base_version: BaseVersion = field(repr=False, compare=False)
    iteration: TrunkIteration = field(repr=False, compare=False)

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def full_semver(self) -> str:
        """Semantic version with the commit distance as build metadata."""
        if self.commits_since_version_source:
            return f"{self.semantic_version}+{self.commits_since_version_source}"
        return str(self.semantic_version)

    def to_dict(self) -> dict[str, Any]:
        pre_release = self.semantic_version.pre_release
        return {
            "semantic_version": str(self.semantic_version),
            "major": self.semantic_version.major,
            "minor": self.semantic_version.minor,
            "patch": self.semantic_version.patch,
            "pre_release_label": pre_release.label if pre_release else "",
            "pre_release_number": pre_release.number if pre_release else None,
            "full_semver": self.full_semver,
            "branch_name": self.branch_name,
            "sha": self.sha,
            "short_sha": self.short_sha,
            "version_source_sha": self.version_source_sha,
            "commits_since_version_source": self.commits_since_version_source,
        }


def resolve_branch(repository: GitRepository, branch_name: str | None = None) -> Branch:
    """Return the named branch, or the checked-out one.

    Raises:
        BranchNotFoundError: If ``branch_name`` does not exist
    """
    if branch_name is None:
        return repository.current_branch()
    return repository.get_branch(branch_name)


def commits_since(commits: list[Commit], source: Commit | None) -> int:
    """Count ``commits`` (newest first) made after ``source``."""
    if source is None:
        return len(commits)
    for index, commit in enumerate(commits):
        if commit.sha == source.sha:
            return index
    return len(commits)


def calculate_version(
    repository: GitRepository,
    config: TrunkverConfig,
    *,
    branch_name: str | None = None,
    label: str | None = None,
) -> VersionResult:
    """Calculate the version of a branch.

    Args:
        repository: Repository to inspect
        config: Project configuration
        branch_name: Branch to calculate for (defaults to the checked-out one)
        label: Pre-release label overriding the branch's own

    Returns:
        VersionResult for the branch tip

    Raises:
        BranchNotFoundError: If ``branch_name`` does not exist
        ConfigurationError: If the configuration cannot drive the calculation
        GitError: If a git command fails
    """
    branch = resolve_branch(repository, branch_name)
    current_commit = repository.get_commit(branch.tip)
    commits = repository.get_commits(branch.tip)
    logger.debug("Calculating version of %s at %s (%d commits)", branch, current_commit.short_sha, len(commits))

    context = VersionContext(
        configuration=config,
        current_branch=branch,
        current_commit=current_commit,
        current_branch_commits=commits,
    )
    strategy = TrunkBasedVersionStrategy(
        context,
        repository,
        TaggedSemanticVersionRepository(repository),
        IncrementStrategyFinder(repository),
    )

    effective = config.get_effective_configuration(branch.friendly_name)
    result = strategy.get_base_version(effective, label)

    base_version = result.base_version
    source = base_version.base_version_source
    version = base_version.get_semantic_version()
    logger.info("Version of %s is %s", branch, version)

    return VersionResult(
        semantic_version=version,
        branch_name=branch.friendly_name,
        sha=current_commit.sha,
        version_source_sha=source.sha if source is not None else None,
        commits_since_version_source=commits_since(commits, source),
        base_version=base_version,
        iteration=result.iteration,
    )
