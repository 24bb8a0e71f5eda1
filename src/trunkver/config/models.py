"""Configuration models for trunkver.

The on-disk configuration (``[tool.trunkver]`` in pyproject.toml or a
standalone ``trunkver.toml``) is validated into TrunkverConfig. Branch
specific settings are matched by regex and merged over the global
settings into an EffectiveConfiguration, which is the read-only view the
version engine consumes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trunkver.core.version import VersionField

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trunkver.vcs.git import Commit

_LABEL_PLACEHOLDER_RE = re.compile(r"\{(?P<name>\w+)\}")
_LABEL_INVALID_CHARS_RE = re.compile(r"[^0-9A-Za-z-]")


class IncrementStrategy(StrEnum):
    """How a branch increments the version on new commits."""

    NONE = "None"
    MAJOR = "Major"
    MINOR = "Minor"
    PATCH = "Patch"
    INHERIT = "Inherit"

    def to_version_field(self) -> VersionField:
        return {
            IncrementStrategy.MAJOR: VersionField.MAJOR,
            IncrementStrategy.MINOR: VersionField.MINOR,
            IncrementStrategy.PATCH: VersionField.PATCH,
        }.get(self, VersionField.NONE)


class CommitMessageIncrementMode(StrEnum):
    """Whether commit messages may force a version increment."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"
    MERGE_MESSAGE_ONLY = "MergeMessageOnly"


class IgnoreConfig(BaseModel):
    """Commits excluded from version calculation."""

    shas: list[str] = Field(default_factory=list)
    before: datetime | None = None

    def is_ignored(self, commit: Commit) -> bool:
        if any(commit.sha.startswith(sha) for sha in self.shas):
            return True
        return self.before is not None and _naive(commit.date) < _naive(self.before)

    def filter(self, commits: Iterable[Commit]) -> list[Commit]:
        """Return ``commits`` without the ignored ones, preserving order."""
        return [commit for commit in commits if not self.is_ignored(commit)]


def _naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class CommitsConfig(BaseModel):
    """Conventional commit settings used to infer increments from messages."""

    conventional: bool = True
    types_major: list[str] = Field(default_factory=list)
    types_minor: list[str] = Field(default_factory=lambda: ["feat"])
    types_patch: list[str] = Field(default_factory=lambda: ["fix", "perf"])
    breaking_pattern: str = r"BREAKING[ -]CHANGE:"


class BranchConfig(BaseModel):
    """Settings for branches whose name matches ``regex``.

    Unset fields fall back to the global configuration.
    """

    regex: str
    label: str | None = "{BranchName}"
    increment: IncrementStrategy | None = None
    is_main_branch: bool | None = None
    is_release_branch: bool | None = None
    commit_message_incrementing: CommitMessageIncrementMode | None = None
    track_merge_message: bool | None = None
    prevent_increment_when_current_commit_tagged: bool | None = None

    def matches(self, branch_name: str) -> bool:
        return re.search(self.regex, branch_name) is not None


def default_branches() -> dict[str, BranchConfig]:
    """Branch configuration used when the user configures none."""
    return {
        "main": BranchConfig(
            regex=r"^master$|^main$",
            label="",
            increment=IncrementStrategy.PATCH,
            is_main_branch=True,
        ),
        "develop": BranchConfig(
            regex=r"^dev(elop)?(ment)?$",
            label="alpha",
            increment=IncrementStrategy.MINOR,
        ),
        "release": BranchConfig(
            regex=r"^releases?[/-](?P<BranchName>.+)",
            label="beta",
            increment=IncrementStrategy.MINOR,
            is_release_branch=True,
        ),
        "feature": BranchConfig(
            regex=r"^features?[/-](?P<BranchName>.+)",
            label="{BranchName}",
            increment=IncrementStrategy.INHERIT,
        ),
        "hotfix": BranchConfig(
            regex=r"^hotfix(es)?[/-](?P<BranchName>.+)",
            label="beta",
            increment=IncrementStrategy.PATCH,
        ),
        "pull-request": BranchConfig(
            regex=r"^(pull|pull\-requests|pr)[/-](?P<Number>\d*)",
            label="PullRequest{Number}",
            increment=IncrementStrategy.INHERIT,
        ),
        "unknown": BranchConfig(
            regex=r"(?P<BranchName>.+)",
            label="{BranchName}",
            increment=IncrementStrategy.INHERIT,
        ),
    }


_FALLBACK_BRANCH = BranchConfig(regex=r"(?P<BranchName>.+)", increment=IncrementStrategy.INHERIT)


class TrunkverConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    tag_prefix: str = "[vV]?"
    label: str | None = "{BranchName}"
    increment: IncrementStrategy = IncrementStrategy.PATCH
    is_main_branch: bool = False
    is_release_branch: bool = False
    commit_message_incrementing: CommitMessageIncrementMode = CommitMessageIncrementMode.ENABLED
    track_merge_message: bool = True
    prevent_increment_when_current_commit_tagged: bool = True

    major_version_bump_message: str = r"\+semver:\s?(breaking|major)"
    minor_version_bump_message: str = r"\+semver:\s?(feature|minor)"
    patch_version_bump_message: str = r"\+semver:\s?(fix|patch)"
    no_bump_message: str = r"\+semver:\s?(none|skip)"

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    merge_message_formats: dict[str, str] = Field(default_factory=dict)
    ignore: IgnoreConfig = Field(default_factory=IgnoreConfig)
    branches: dict[str, BranchConfig] = Field(default_factory=default_branches)

    @field_validator("branches", mode="before")
    @classmethod
    def _merge_default_branches(cls, value: Any) -> Any:
        """Merge user branch entries over the defaults, field by field."""
        if not isinstance(value, dict):
            return value
        merged: dict[str, Any] = {
            name: branch.model_dump(exclude_unset=True) for name, branch in default_branches().items()
        }
        for name, override in value.items():
            if isinstance(override, BranchConfig):
                override = override.model_dump(exclude_unset=True)
            merged[name] = {**merged.get(name, {}), **override}
        # the catch-all entry must stay last so specific branches win
        if "unknown" in merged:
            merged["unknown"] = merged.pop("unknown")
        return merged

    def get_branch_configuration(self, branch_name: str) -> BranchConfig:
        """Return the first branch configuration whose regex matches."""
        for branch_config in self.branches.values():
            if branch_config.matches(branch_name):
                return branch_config
        return _FALLBACK_BRANCH

    def get_effective_configuration(self, branch_name: str) -> EffectiveConfiguration:
        """Merge the matching branch configuration over the global settings."""
        branch = self.get_branch_configuration(branch_name)

        def pick(value: Any, default: Any) -> Any:
            return default if value is None else value

        return EffectiveConfiguration(
            branch_regex=branch.regex,
            label=branch.label if "label" in branch.model_fields_set else self.label,
            increment=pick(branch.increment, self.increment),
            is_main_branch=pick(branch.is_main_branch, self.is_main_branch),
            is_release_branch=pick(branch.is_release_branch, self.is_release_branch),
            commit_message_incrementing=pick(branch.commit_message_incrementing, self.commit_message_incrementing),
            track_merge_message=pick(branch.track_merge_message, self.track_merge_message),
            prevent_increment_when_current_commit_tagged=pick(
                branch.prevent_increment_when_current_commit_tagged,
                self.prevent_increment_when_current_commit_tagged,
            ),
            tag_prefix=self.tag_prefix,
            major_version_bump_message=self.major_version_bump_message,
            minor_version_bump_message=self.minor_version_bump_message,
            patch_version_bump_message=self.patch_version_bump_message,
            no_bump_message=self.no_bump_message,
            commits=self.commits,
            ignore=self.ignore,
        )

    def branch_is_release(self, branch_name: str) -> bool:
        return self.get_effective_configuration(branch_name).is_release_branch


@dataclass(frozen=True)
class EffectiveConfiguration:
    """Resolved policy for one branch. Read-only for the version engine."""

    branch_regex: str
    label: str | None
    increment: IncrementStrategy
    is_main_branch: bool
    is_release_branch: bool
    commit_message_incrementing: CommitMessageIncrementMode
    track_merge_message: bool
    prevent_increment_when_current_commit_tagged: bool
    tag_prefix: str
    major_version_bump_message: str
    minor_version_bump_message: str
    patch_version_bump_message: str
    no_bump_message: str
    commits: CommitsConfig
    ignore: IgnoreConfig

    def label_for(self, branch_name: str, override: str | None = None) -> str | None:
        """Return the pre-release label for ``branch_name``.

        ``override`` wins when given. Placeholders such as ``{BranchName}``
        are filled from the named groups of the branch regex, and the result
        is reduced to characters allowed in a pre-release identifier.
        """
        if override is not None:
            return override
        if self.label is None:
            return None

        match = re.search(self.branch_regex, branch_name)
        groups = {k: v for k, v in match.groupdict().items() if v is not None} if match else {}
        groups.setdefault("BranchName", branch_name)

        def substitute(placeholder: re.Match[str]) -> str:
            return groups.get(placeholder.group("name"), placeholder.group(0))

        label = _LABEL_PLACEHOLDER_RE.sub(substitute, self.label)
        return _LABEL_INVALID_CHARS_RE.sub("-", label)
