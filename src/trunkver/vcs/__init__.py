"""Version control access for trunkver."""

from __future__ import annotations

from trunkver.vcs.git import Branch, BranchCommit, Commit, GitRepository, Tag

__all__ = [
    "Branch",
    "BranchCommit",
    "Commit",
    "GitRepository",
    "Tag",
]
