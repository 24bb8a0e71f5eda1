"""Commit message analysis.

Determines the version increment a commit message forces, either via
explicit ``+semver:`` markers or via the Conventional Commits format
(https://www.conventionalcommits.org/), and expands merge commits into
the commits they brought in.

Format: <type>[optional scope][!]: <description>

Examples:
    feat: add new feature
    fix(api): handle null response
    feat!: breaking change
    chore: update deps +semver: minor
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trunkver.core.version import VersionField

if TYPE_CHECKING:
    from trunkver.config.models import CommitsConfig, EffectiveConfiguration, IgnoreConfig
    from trunkver.vcs.git import Commit, GitRepository

# Conventional commit regex pattern
# Matches: type(scope)!: description
CONVENTIONAL_PATTERN = re.compile(
    r"^(?P<type>\w+)"  # type (required)
    r"(?:\((?P<scope>[^)]+)\))?"  # (scope) (optional)
    r"(?P<breaking>!)?"  # ! for breaking (optional)
    r":\s*"  # colon and space
    r"(?P<description>.+)$",  # description
    re.MULTILINE,
)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message parsed according to Conventional Commits."""

    commit_type: str | None
    is_breaking: bool
    is_conventional: bool

    @classmethod
    def from_commit(cls, commit: Commit, breaking_pattern: str) -> ParsedCommit:
        """Parse the message of ``commit``.

        Args:
            commit: Raw commit from git
            breaking_pattern: Regex pattern for breaking changes in the body
        """
        match = CONVENTIONAL_PATTERN.match(commit.subject)
        if not match:
            return cls(commit_type=None, is_breaking=False, is_conventional=False)

        is_breaking = bool(match.group("breaking"))
        if not is_breaking and re.search(breaking_pattern, commit.message):
            is_breaking = True

        return cls(
            commit_type=match.group("type").lower(),
            is_breaking=is_breaking,
            is_conventional=True,
        )

    def increment(self, config: CommitsConfig) -> VersionField:
        """Version field this commit asks for under ``config``."""
        if not self.is_conventional:
            return VersionField.NONE
        if self.is_breaking or self.commit_type in config.types_major:
            return VersionField.MAJOR
        if self.commit_type in config.types_minor:
            return VersionField.MINOR
        if self.commit_type in config.types_patch:
            return VersionField.PATCH
        return VersionField.NONE


def get_increment_from_bump_message(commit: Commit, config: EffectiveConfiguration) -> VersionField | None:
    """Return the increment requested by a ``+semver:`` marker, if any.

    ``None`` means no marker was found; ``VersionField.NONE`` means the
    message explicitly asked for no bump.
    """
    patterns = [
        (config.major_version_bump_message, VersionField.MAJOR),
        (config.minor_version_bump_message, VersionField.MINOR),
        (config.patch_version_bump_message, VersionField.PATCH),
        (config.no_bump_message, VersionField.NONE),
    ]
    for pattern, version_field in patterns:
        if pattern and re.search(pattern, commit.message, re.IGNORECASE | re.MULTILINE):
            return version_field
    return None


class IncrementStrategyFinder:
    """Derives forced increments and merged commit lists from the repository."""

    def __init__(self, repository: GitRepository) -> None:
        self.repository = repository

    def get_increment_forced_by_commit(self, commit: Commit, config: EffectiveConfiguration) -> VersionField:
        """Return the increment the message of ``commit`` forces.

        ``+semver:`` markers take precedence over the conventional commit
        type.
        """
        from_marker = get_increment_from_bump_message(commit, config)
        if from_marker is not None:
            return from_marker
        if not config.commits.conventional:
            return VersionField.NONE
        parsed = ParsedCommit.from_commit(commit, config.commits.breaking_pattern)
        return parsed.increment(config.commits)

    def get_merged_commits(self, merge_commit: Commit, parent_index: int, ignore: IgnoreConfig) -> list[Commit]:
        """Return the commits a merge brought in, newest first.

        With ``parent_index`` 1 these are the commits reachable from the
        second parent but not the first; with 0 the sides are swapped.
        """
        if not merge_commit.is_merge:
            raise ValueError(f"{merge_commit.short_sha} is not a merge commit")

        base, merged = merge_commit.parents[0], merge_commit.parents[1]
        if parent_index == 0:
            base, merged = merged, base

        commits = self.repository.get_commits(merged, exclude=(base,))
        return ignore.filter(commits)
