"""Version algebra used to fold rule contributions into a base version.

Rules contribute a sequence of operations. An operand sets the running
version outright; an operator transforms whatever running version
exists. Folding is strictly left to right.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trunkver.core.version import SemanticVersion, VersionField
from trunkver.exceptions import VersionCalculationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trunkver.vcs.git import Commit


@dataclass(frozen=True)
class BaseVersionOperand:
    """A concrete version that replaces the running result."""

    source: str
    semantic_version: SemanticVersion
    base_version_source: Commit | None = None


@dataclass(frozen=True)
class BaseVersionOperator:
    """A transform applied to the running result."""

    source: str
    increment: VersionField = VersionField.NONE
    label: str | None = None
    force_increment: bool = False
    alternative_semantic_version: SemanticVersion | None = None
    base_version_source: Commit | None = None


BaseVersionIncrement = BaseVersionOperand | BaseVersionOperator


@dataclass(frozen=True)
class BaseVersion:
    """Running result of a fold: an operand plus at most one pending operator.

    ``increment`` records the strongest field requested by the operators
    applied since the last operand; merges use it to carry a child
    branch's contribution into its parent.
    """

    operand: BaseVersionOperand = field(default_factory=lambda: BaseVersionOperand("empty", SemanticVersion()))
    operator: BaseVersionOperator | None = None
    increment: VersionField = VersionField.NONE

    @property
    def base_version_source(self) -> Commit | None:
        if self.operator is not None and self.operator.base_version_source is not None:
            return self.operator.base_version_source
        return self.operand.base_version_source

    @property
    def is_anchored(self) -> bool:
        """True when the version derives from a tag or explicit version."""
        return self.base_version_source is not None

    @property
    def source(self) -> str:
        return self.operator.source if self.operator is not None else self.operand.source

    def get_semantic_version(self) -> SemanticVersion:
        """Materialise the pending operator, if any."""
        if self.operator is None:
            return self.operand.semantic_version
        return self.operand.semantic_version.increment(
            self.operator.increment,
            self.operator.label,
            force_increment=self.operator.force_increment,
            alternative=self.operator.alternative_semantic_version,
        )

    def apply(self, operator: BaseVersionOperator) -> BaseVersion:
        """Materialise the current result and make ``operator`` pending."""
        operand = BaseVersionOperand(
            source=self.source,
            semantic_version=self.get_semantic_version(),
            base_version_source=self.base_version_source,
        )
        return BaseVersion(
            operand=operand,
            operator=operator,
            increment=self.increment.consolidate(operator.increment),
        )

    def __str__(self) -> str:
        source = self.base_version_source
        from_sha = f" from {source.short_sha}" if source is not None else ""
        return f"{self.get_semantic_version()} ({self.source}{from_sha})"


def fold(increments: Iterable[BaseVersionIncrement]) -> BaseVersion:
    """Fold operations left to right into a base version.

    Raises:
        VersionCalculationError: If ``increments`` is empty
    """
    result: BaseVersion | None = None
    for item in increments:
        if isinstance(item, BaseVersionOperand):
            result = BaseVersion(operand=item)
        else:
            result = (result or BaseVersion()).apply(item)
    if result is None:
        raise VersionCalculationError("No version increments were produced for the commit lineage")
    return result
