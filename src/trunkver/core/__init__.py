"""Core business logic for trunkver.

This module contains the fundamental building blocks:
- Semantic version parsing and incrementing
- Commit message analysis (``+semver:`` markers, Conventional Commits)
- Merge message parsing
- The version algebra and the iteration tree of the commit walk

The walker lives in ``trunkver.core.strategy`` and the entry point in
``trunkver.core.calculator``; both depend on the configuration models and
are imported from there directly.
"""

from __future__ import annotations

from trunkver.core.base_version import BaseVersion, BaseVersionOperand, BaseVersionOperator, fold
from trunkver.core.commits import IncrementStrategyFinder, ParsedCommit
from trunkver.core.iteration import TrunkCommit, TrunkIteration
from trunkver.core.merge_message import MergeMessage
from trunkver.core.version import PreRelease, SemanticVersion, VersionField

__all__ = [
    # Version algebra
    "BaseVersion",
    "BaseVersionOperand",
    "BaseVersionOperator",
    # Commits
    "IncrementStrategyFinder",
    "MergeMessage",
    "ParsedCommit",
    # Version
    "PreRelease",
    "SemanticVersion",
    # Iterations
    "TrunkCommit",
    "TrunkIteration",
    "VersionField",
    "fold",
]
