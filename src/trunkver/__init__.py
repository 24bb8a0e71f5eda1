"""trunkver: semantic version calculation for trunk-based git repositories.

Example:
    >>> from trunkver import GitRepository, calculate_version, load_config
    >>> result = calculate_version(GitRepository("."), load_config())
    >>> str(result.semantic_version)
    '1.4.1-login.2'
"""

from __future__ import annotations

from trunkver.config import TrunkverConfig, load_config
from trunkver.core.calculator import VersionResult, calculate_version
from trunkver.core.version import SemanticVersion
from trunkver.exceptions import TrunkverError
from trunkver.vcs import GitRepository

__version__ = "0.1.0"

__all__ = [
    "GitRepository",
    "SemanticVersion",
    "TrunkverConfig",
    "TrunkverError",
    "VersionResult",
    "__version__",
    "calculate_version",
    "load_config",
]
