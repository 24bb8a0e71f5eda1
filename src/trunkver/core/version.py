"""Semantic version parsing and manipulation.

Versions follow SemVer 2.0 with a single pre-release identifier made of
an optional label and an optional number (``1.2.0-beta.3``,
``0.2.0-1``). The increment rules used by the trunk-based engine live
on SemanticVersion.increment().
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import StrEnum
from functools import total_ordering

from trunkver.exceptions import InvalidVersionError

_SEMVER_PATTERN = (
    r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)(?:\.(?P<patch>0|[1-9]\d*))?"
    r"(?:-(?P<pre_release>[0-9A-Za-z\-.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-.]+))?"
)

_PRE_RELEASE_RE = re.compile(r"^(?P<label>.*?)[.\-]?(?P<number>\d+)?$")


class VersionField(StrEnum):
    """Part of a version that can be incremented, weakest first."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def weight(self) -> int:
        return _FIELD_ORDER.index(self)

    def consolidate(self, *others: VersionField | None) -> VersionField:
        """Return the strongest of this field and ``others``."""
        result = self
        for other in others:
            if other is not None and other.weight > result.weight:
                result = other
        return result


_FIELD_ORDER = [VersionField.NONE, VersionField.PATCH, VersionField.MINOR, VersionField.MAJOR]


@total_ordering
@dataclass(frozen=True)
class PreRelease:
    """Pre-release identifier: a label and an optional counter."""

    label: str = ""
    number: int | None = None

    @classmethod
    def parse(cls, value: str | None) -> PreRelease | None:
        if not value:
            return None
        match = _PRE_RELEASE_RE.match(value)
        if match is None:  # pragma: no cover - the pattern matches any string
            return cls(label=value)
        number = match.group("number")
        return cls(label=match.group("label"), number=int(number) if number else None)

    def __str__(self) -> str:
        if self.number is None:
            return self.label
        if not self.label:
            return str(self.number)
        return f"{self.label}.{self.number}"

    def _key(self) -> tuple[str, int]:
        return (self.label, -1 if self.number is None else self.number)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PreRelease):
            return NotImplemented
        return self._key() < other._key()


@total_ordering
@dataclass(frozen=True)
class SemanticVersion:
    """A semantic version.

    Ordering ignores build metadata. A stable version sorts above every
    pre-release of the same core.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    pre_release: PreRelease | None = None
    build_metadata: str | None = field(default=None, compare=False)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, value: str, tag_prefix: str | None = None) -> SemanticVersion:
        """Parse a version string, optionally preceded by ``tag_prefix``.

        Args:
            value: Version or tag name (e.g. ``"v1.2.3-beta.1"``)
            tag_prefix: Regex matched before the version (e.g. ``"[vV]?"``)

        Raises:
            InvalidVersionError: If ``value`` is not a semantic version
        """
        version = cls.try_parse(value, tag_prefix)
        if version is None:
            raise InvalidVersionError(f"Invalid semantic version: {value!r}")
        return version

    @classmethod
    def try_parse(cls, value: str, tag_prefix: str | None = None) -> SemanticVersion | None:
        prefix = tag_prefix or ""
        match = re.fullmatch(f"(?:{prefix}){_SEMVER_PATTERN}", value.strip())
        if match is None:
            return None
        patch = match.group("patch")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(patch) if patch else 0,
            pre_release=PreRelease.parse(match.group("pre_release")),
            build_metadata=match.group("build"),
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def is_pre_release(self) -> bool:
        return self.pre_release is not None

    @property
    def label(self) -> str:
        """Pre-release label, empty for stable versions."""
        return self.pre_release.label if self.pre_release else ""

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def is_match_for_branch_specific_label(self, label: str | None) -> bool:
        """Check whether this version belongs to a branch labelled ``label``.

        An empty or missing label stands for a stable target and matches
        versions without a pre-release label (``1.0.0``, ``0.2.0-1``). Any
        other label only matches an identical pre-release label.
        """
        if not label:
            return self.label == ""
        return self.is_pre_release and self.label == label

    # -------------------------------------------------------------------------
    # Manipulation
    # -------------------------------------------------------------------------

    def bump(self, version_field: VersionField) -> SemanticVersion:
        """Bump a core field, dropping any pre-release identifier.

        A pre-release whose core already reflects ``version_field`` is
        released rather than bumped again (``1.1.0-beta.2`` -> ``1.1.0`` for
        a minor bump).
        """
        if self.is_pre_release:
            if version_field == VersionField.MAJOR and self.minor == 0 and self.patch == 0:
                version_field = VersionField.NONE
            elif version_field == VersionField.MINOR and self.patch == 0:
                version_field = VersionField.NONE
            elif version_field == VersionField.PATCH:
                version_field = VersionField.NONE
        if version_field == VersionField.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if version_field == VersionField.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        if version_field == VersionField.PATCH:
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        return SemanticVersion(self.major, self.minor, self.patch)

    def with_label(self, label: str | None, number: int = 1) -> SemanticVersion:
        """Return the same core with ``label`` as pre-release (stable if empty)."""
        if not label:
            return replace(self, pre_release=None, build_metadata=None)
        return replace(self, pre_release=PreRelease(label, number), build_metadata=None)

    def _next_pre_release(self) -> SemanticVersion:
        number = self.pre_release.number if self.pre_release is not None else None
        return replace(self, pre_release=PreRelease(self.label, (number or 0) + 1), build_metadata=None)

    def increment(
        self,
        version_field: VersionField,
        label: str | None,
        *,
        force_increment: bool = False,
        alternative: SemanticVersion | None = None,
    ) -> SemanticVersion:
        """Apply an increment for a commit labelled ``label``.

        Without ``force_increment`` a pre-release never moves its core: the
        number advances when the label is unchanged, otherwise the label is
        swapped. Stable versions have ``version_field`` bumped and ``label``
        applied; one that must become a pre-release is bumped at least by
        patch. A forced increment the core already reflects advances the
        number of a same-label pre-release instead of restarting it. When
        ``alternative`` has a higher core, that core is used.
        """
        label = label or ""
        pre_release = self.pre_release
        same_label = pre_release is not None and pre_release.label == label

        if same_label and not force_increment:
            result = self._next_pre_release()
        elif pre_release is not None and (version_field == VersionField.NONE or not force_increment):
            # Unreleased core: only the label changes.
            result = self._next_pre_release() if same_label and label else self.with_label(label)
        else:
            if version_field == VersionField.NONE and label:
                version_field = VersionField.PATCH
            bumped = self.bump(version_field)
            if same_label and label and bumped.core == self.core:
                result = self._next_pre_release()
            else:
                result = bumped.with_label(label)

        if alternative is not None and alternative.core > result.core:
            result = SemanticVersion(*alternative.core).with_label(label)
        return result

    # -------------------------------------------------------------------------
    # Dunder
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        result = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release is not None:
            result += f"-{self.pre_release}"
        if self.build_metadata:
            result += f"+{self.build_metadata}"
        return result

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        if self.core != other.core:
            return self.core < other.core
        if self.pre_release is None:
            return False
        if other.pre_release is None:
            return True
        return self.pre_release < other.pre_release


@dataclass(frozen=True)
class SemanticVersionWithTag:
    """A semantic version resolved from a git tag."""

    value: SemanticVersion
    tag: str
    sha: str

    def __str__(self) -> str:
        return self.tag
