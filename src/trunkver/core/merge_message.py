"""Merge commit message parsing.

Recognizes the merge messages written by git itself and by the common
hosting platforms, extracting the merged (source) branch, the target
branch and the pull request number. A merged release branch whose name
carries a version (``release/2.1.0``) also yields that version.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trunkver.core.version import SemanticVersion

if TYPE_CHECKING:
    from trunkver.config.models import TrunkverConfig
    from trunkver.vcs.git import Commit

logger = logging.getLogger(__name__)

DEFAULT_FORMATS: dict[str, str] = {
    "Default": r"^Merge (branch|tag) '(?P<SourceBranch>[^']*)'(?: into (?P<TargetBranch>[^\s]*))*",
    "SmartGit": r"^Finish (?P<SourceBranch>[^\s]*)(?: into (?P<TargetBranch>[^\s]*))*",
    "BitBucketPull": (
        r"^Merge pull request #(?P<PullRequestNumber>\d+) (from|in) (?P<Source>.*) "
        r"from (?P<SourceBranch>[^\s]*) to (?P<TargetBranch>[^\s]*)"
    ),
    "BitBucketPullv7": (
        r"^Pull request #(?P<PullRequestNumber>\d+).*\r?\n\r?\n"
        r"Merge in (?P<Source>.*) from (?P<SourceBranch>[^\s]*) to (?P<TargetBranch>[^\s]*)"
    ),
    "BitBucketCloudPull": r"^Merged in (?P<SourceBranch>[^\s]*) \(pull request #(?P<PullRequestNumber>\d+)\)",
    "GitHubPull": (
        r"^Merge pull request #(?P<PullRequestNumber>\d+) (from|in) "
        r"(?:[^\s\/]+\/)?(?P<SourceBranch>[^\s]*)(?: into (?P<TargetBranch>[^\s]*))*"
    ),
    "RemoteTracking": r"^Merge remote-tracking branch '(?P<SourceBranch>[^\s]*)'(?: into (?P<TargetBranch>[^\s]*))*",
    "AzureDevOpsPull": (
        r"^Merge pull request (?P<PullRequestNumber>\d+) from (?P<SourceBranch>[^\s]*) "
        r"into (?P<TargetBranch>[^\s]*)"
    ),
}

_REMOTE_PREFIXES = ("refs/heads/", "refs/remotes/", "origin/")
_VERSION_IN_NAME_RE = re.compile(r"[/-]")


@dataclass(frozen=True)
class MergeMessage:
    """Information extracted from a merge commit message."""

    format_name: str
    merged_branch: str | None
    target_branch: str | None = None
    pull_request_number: int | None = None
    version: SemanticVersion | None = None

    @property
    def is_merged_pull_request(self) -> bool:
        return self.pull_request_number is not None

    @classmethod
    def try_parse(cls, commit: Commit, config: TrunkverConfig) -> MergeMessage | None:
        """Parse the message of ``commit``.

        Custom formats from the configuration are tried before the built-in
        ones.

        Returns:
            The parsed MergeMessage, or None when no format matches
        """
        formats = dict(config.merge_message_formats)
        for format_name, pattern in DEFAULT_FORMATS.items():
            formats.setdefault(format_name, pattern)
        for format_name, pattern in formats.items():
            match = re.search(pattern, commit.message)
            if match is None:
                continue
            groups = match.groupdict()
            merged_branch = _clean_branch_name(groups.get("SourceBranch"))
            number = groups.get("PullRequestNumber")
            version = None
            if merged_branch and config.branch_is_release(merged_branch):
                version = version_from_branch_name(merged_branch, config.tag_prefix)
            logger.debug("Merge message of %s matched format %s", commit.short_sha, format_name)
            return cls(
                format_name=format_name,
                merged_branch=merged_branch,
                target_branch=_clean_branch_name(groups.get("TargetBranch")),
                pull_request_number=int(number) if number else None,
                version=version,
            )
        return None


def _clean_branch_name(name: str | None) -> str | None:
    if not name:
        return None
    for prefix in _REMOTE_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix) :]
    return name


def version_from_branch_name(branch_name: str, tag_prefix: str | None = None) -> SemanticVersion | None:
    """Find a version in a branch name such as ``release/1.2.0``."""
    for part in reversed(_VERSION_IN_NAME_RE.split(branch_name)):
        version = SemanticVersion.try_parse(part, tag_prefix)
        if version is not None:
            return version
    return None
