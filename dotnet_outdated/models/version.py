"""
NuGet version model for dotnet-outdated.

NuGet versions are SemVer 2.0 versions with two relaxations inherited from
the .NET ecosystem: the minor and patch segments may be omitted (``1.0``),
and a fourth numeric *revision* segment is allowed (``1.0.0.1``).

Ordering follows SemVer 2.0 precedence:

1. numeric segments (major, minor, patch, revision),
2. a stable release sorts above every pre-release of the same numbers,
3. pre-release labels are compared identifier by identifier: numeric
   identifiers numerically, numeric below alphanumeric, alphanumeric
   identifiers case-insensitively; a shorter label that is a prefix of a
   longer one sorts first.

Build metadata (``+sha.abc``) never takes part in ordering or equality.
"""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Any, Optional, Tuple

from dotnet_outdated.exceptions import InvalidVersionError

_IDENTIFIER = r"[0-9A-Za-z-]+"

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+))?"
    r"(?:\.(?P<patch>\d+))?"
    r"(?:\.(?P<revision>\d+))?"
    rf"(?:-(?P<release>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?"
    rf"(?:\+(?P<metadata>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?$"
)


def _label_key(label: str) -> Tuple[int, int, str]:
    if label.isdigit():
        return (0, int(label), "")
    return (1, 0, label.lower())


@total_ordering
class NuGetVersion:
    """An immutable, comparable NuGet package version.

    ``str()`` returns the text the version was parsed from, so a version
    read out of ``[1.2, )`` prints as ``1.2``. Use :attr:`normalized` for
    the canonical ``major.minor.patch[-label]`` form.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        revision: Legacy fourth segment (``0`` when absent).
        release_labels: Dot-separated pre-release identifiers.
        metadata: Build metadata, or ``None``.

    Example:
        >>> v = NuGetVersion.parse("2.0.0-beta.2")
        >>> v.is_prerelease
        True
        >>> v < NuGetVersion.parse("2.0.0")
        True
    """

    __slots__ = (
        "major",
        "minor",
        "patch",
        "revision",
        "release_labels",
        "metadata",
        "_original",
    )

    def __init__(
        self,
        major: int,
        minor: int = 0,
        patch: int = 0,
        revision: int = 0,
        release_labels: Tuple[str, ...] = (),
        metadata: Optional[str] = None,
        original: Optional[str] = None,
    ) -> None:
        self.major = major
        self.minor = minor
        self.patch = patch
        self.revision = revision
        self.release_labels = tuple(release_labels)
        self.metadata = metadata
        self._original = original

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, value: str) -> "NuGetVersion":
        """Parse a NuGet version string.

        Args:
            value: Version text such as ``"1.2.0"`` or ``"2.0.0-beta.1"``.

        Returns:
            The parsed version.

        Raises:
            InvalidVersionError: *value* is not a valid NuGet version.
        """
        text = value.strip() if isinstance(value, str) else value
        match = _VERSION_RE.match(text) if isinstance(text, str) else None
        if match is None:
            raise InvalidVersionError(
                f"Invalid version: {value!r}",
                range_spec=str(value),
            )

        release = match.group("release")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor") or 0),
            patch=int(match.group("patch") or 0),
            revision=int(match.group("revision") or 0),
            release_labels=tuple(release.split(".")) if release else (),
            metadata=match.group("metadata"),
            original=text,
        )

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional["NuGetVersion"]:
        """Parse *value*, returning ``None`` instead of raising."""
        if value is None:
            return None
        try:
            return cls.parse(value)
        except InvalidVersionError:
            return None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_prerelease(self) -> bool:
        """True when the version carries a pre-release label."""
        return bool(self.release_labels)

    @property
    def release(self) -> str:
        """The pre-release label (``"beta.1"``), or an empty string."""
        return ".".join(self.release_labels)

    @property
    def normalized(self) -> str:
        """Canonical text: revision only when non-zero, metadata dropped."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.release_labels:
            text += f"-{self.release}"
        return text

    def _sort_key(self) -> Tuple[Any, ...]:
        numbers = (self.major, self.minor, self.patch, self.revision)
        if not self.release_labels:
            return numbers + ((1, ()),)
        labels = tuple(_label_key(label) for label in self.release_labels)
        return numbers + ((0, labels),)

    # ------------------------------------------------------------------
    # Comparison protocol
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: "NuGetVersion") -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        return self._original if self._original is not None else self.normalized

    def __repr__(self) -> str:
        return f"NuGetVersion({str(self)!r})"
