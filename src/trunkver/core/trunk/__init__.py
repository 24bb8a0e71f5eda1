"""Increment engine of the trunk-based version strategy."""

from __future__ import annotations

from trunkver.core.trunk.context import TrunkContext
from trunkver.core.trunk.engine import (
    INCREMENTERS,
    POST_ENRICHERS,
    PRE_ENRICHERS,
    determine_base_version,
    evaluate,
    get_increments,
)

__all__ = [
    "INCREMENTERS",
    "POST_ENRICHERS",
    "PRE_ENRICHERS",
    "TrunkContext",
    "determine_base_version",
    "evaluate",
    "get_increments",
]
