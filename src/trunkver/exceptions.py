"""Exception hierarchy for trunkver.

All exceptions raised by trunkver derive from TrunkverError so callers
can catch everything with a single except clause while still being
able to distinguish configuration problems from git failures and
engine defects.
"""

from __future__ import annotations


class TrunkverError(Exception):
    """Base exception for all trunkver errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(TrunkverError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """No configuration file could be found."""


class ConfigValidationError(ConfigError):
    """Configuration file content is invalid."""


class ConfigurationError(ConfigError):
    """The effective configuration cannot drive a version calculation.

    Raised for an unrecognized commit message increment mode and for a
    trunk branch being merged into another trunk branch.
    """

    def __init__(
        self,
        message: str,
        *,
        branch: str | None = None,
        merged_branch: str | None = None,
        commit: str | None = None,
    ) -> None:
        super().__init__(message)
        self.branch = branch
        self.merged_branch = merged_branch
        self.commit = commit


# =============================================================================
# Git
# =============================================================================


class GitError(TrunkverError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr


class NotARepositoryError(GitError):
    """Path is not inside a git working tree."""


class BranchNotFoundError(GitError):
    """The requested branch does not exist."""


# =============================================================================
# Versions
# =============================================================================


class VersionError(TrunkverError):
    """Base class for version errors."""


class InvalidVersionError(VersionError):
    """A string could not be parsed as a semantic version."""


class VersionCalculationError(TrunkverError):
    """The version engine reached a state that should be impossible."""
