"""Configuration management for trunkver."""

from __future__ import annotations

from trunkver.config.loader import load_config
from trunkver.config.models import (
    BranchConfig,
    CommitMessageIncrementMode,
    CommitsConfig,
    EffectiveConfiguration,
    IgnoreConfig,
    IncrementStrategy,
    TrunkverConfig,
)

__all__ = [
    "BranchConfig",
    "CommitMessageIncrementMode",
    "CommitsConfig",
    "EffectiveConfiguration",
    "IgnoreConfig",
    "IncrementStrategy",
    "TrunkverConfig",
    "load_config",
]
