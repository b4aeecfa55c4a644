"""
NuGet version range model for dotnet-outdated.

Supported notations (whitespace around bounds is ignored):

=================  ==========================================
``1.0``            ``x >= 1.0`` (plain minimum version)
``[1.0]``          ``x == 1.0``
``[1.0, )``        ``x >= 1.0``
``(1.0, )``        ``x > 1.0``
``(, 1.0]``        ``x <= 1.0``
``(, 1.0)``        ``x < 1.0``
``[1.0, 2.0)``     ``1.0 <= x < 2.0`` (any bracket combination)
``1.*``            floating, ``x >= 1.0``
``1.0.0-beta*``    floating pre-release, ``x >= 1.0.0-beta``
``*``              floating, ``x >= 0.0.0``
``1.*-*``          floating with any pre-release, ``x >= 1.0.0-0``
``*-*``            ``x >= 0.0.0-0``
``[1.*, )``        floating minimum inside brackets, as MSBuild writes it
=================  ==========================================

Only the minimum of an interval may float. The minimum bound is what
dotnet-outdated reports as the *referenced* version of a dependency.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from dotnet_outdated.exceptions import InvalidVersionError, MalformedRangeError
from dotnet_outdated.models.version import NuGetVersion


@dataclass(frozen=True)
class VersionRange:
    """An immutable interval of acceptable NuGet versions.

    Attributes:
        min_version: Lower bound, or ``None`` for an open floor.
        max_version: Upper bound, or ``None`` for an open ceiling.
        is_min_inclusive: Whether *min_version* itself satisfies the range.
        is_max_inclusive: Whether *max_version* itself satisfies the range.
        is_floating: True for ``*`` notations.
        original: The text the range was parsed from.
    """

    min_version: Optional[NuGetVersion] = None
    max_version: Optional[NuGetVersion] = None
    is_min_inclusive: bool = False
    is_max_inclusive: bool = False
    is_floating: bool = False
    original: str = field(default="", compare=False)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, spec: str) -> "VersionRange":
        """Parse a NuGet version range specification.

        Args:
            spec: Range text, e.g. ``"[1.2.0, )"`` or ``"1.*"``.

        Returns:
            The parsed :class:`VersionRange`.

        Raises:
            MalformedRangeError: *spec* is empty or syntactically invalid,
                or its bounds describe an empty interval.

        Example:
            >>> r = VersionRange.parse("[1.2.0, 2.0.0)")
            >>> str(r.min_version), str(r.max_version)
            ('1.2.0', '2.0.0')
        """
        if not isinstance(spec, str) or not spec.strip():
            raise MalformedRangeError("Version range is empty", range_spec=spec)

        text = spec.strip()
        try:
            if text[0] in "[(":
                return cls._parse_interval(text)
            if "*" in text:
                return cls._parse_floating(text)
            return cls(
                min_version=NuGetVersion.parse(text),
                is_min_inclusive=True,
                original=text,
            )
        except InvalidVersionError as exc:
            raise MalformedRangeError(
                f"Invalid version in range: {exc.message}",
                range_spec=spec,
            ) from exc

    @classmethod
    def _parse_interval(cls, text: str) -> "VersionRange":
        if text[-1] not in "])":
            raise MalformedRangeError("Unbalanced range brackets", range_spec=text)

        min_inclusive = text[0] == "["
        max_inclusive = text[-1] == "]"
        parts = [part.strip() for part in text[1:-1].split(",")]

        if len(parts) > 2:
            raise MalformedRangeError("Too many range bounds", range_spec=text)

        if len(parts) == 1:
            # Exact match: only "[x]" is meaningful
            if not (min_inclusive and max_inclusive) or not parts[0]:
                raise MalformedRangeError(
                    "Exact version ranges must use [version]", range_spec=text
                )
            if "*" in parts[0]:
                raise MalformedRangeError("Exact versions cannot float", range_spec=text)
            version = NuGetVersion.parse(parts[0])
            return cls(
                min_version=version,
                max_version=version,
                is_min_inclusive=True,
                is_max_inclusive=True,
                original=text,
            )

        low, high = parts
        if not low and not high:
            raise MalformedRangeError("Range has no bounds", range_spec=text)

        if "*" in high:
            raise MalformedRangeError(
                "Only the range minimum may float", range_spec=text
            )

        is_floating = "*" in low
        if is_floating and not min_inclusive:
            raise MalformedRangeError(
                "A floating minimum must be inclusive", range_spec=text
            )
        if is_floating:
            low = _floating_floor(low, range_spec=text)

        min_version = NuGetVersion.parse(low) if low else None
        max_version = NuGetVersion.parse(high) if high else None

        if min_version is not None and max_version is not None:
            if min_version > max_version:
                raise MalformedRangeError(
                    "Range minimum is greater than its maximum", range_spec=text
                )
            if min_version == max_version and not (min_inclusive and max_inclusive):
                raise MalformedRangeError("Range is empty", range_spec=text)

        return cls(
            min_version=min_version,
            max_version=max_version,
            is_min_inclusive=min_inclusive and min_version is not None,
            is_max_inclusive=max_inclusive and max_version is not None,
            is_floating=is_floating,
            original=text,
        )

    @classmethod
    def _parse_floating(cls, text: str) -> "VersionRange":
        return cls(
            min_version=NuGetVersion.parse(_floating_floor(text, range_spec=text)),
            is_min_inclusive=True,
            is_floating=True,
            original=text,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def has_lower_bound(self) -> bool:
        """True when the range declares a floor."""
        return self.min_version is not None

    def satisfies(self, version: NuGetVersion) -> bool:
        """Return whether *version* falls inside the range."""
        if self.min_version is not None:
            if self.is_min_inclusive:
                if version < self.min_version:
                    return False
            elif version <= self.min_version:
                return False

        if self.max_version is not None:
            if self.is_max_inclusive:
                if version > self.max_version:
                    return False
            elif version >= self.max_version:
                return False

        return True

    @property
    def pretty(self) -> str:
        """Canonical bracket notation, e.g. ``[1.2.0, )``."""
        if (
            self.min_version is not None
            and self.min_version == self.max_version
            and self.is_min_inclusive
            and self.is_max_inclusive
        ):
            return f"[{self.min_version.normalized}]"

        low = self.min_version.normalized if self.min_version is not None else ""
        high = self.max_version.normalized if self.max_version is not None else ""
        opening = "[" if self.is_min_inclusive else "("
        closing = "]" if self.is_max_inclusive else ")"
        return f"{opening}{low}, {high}{closing}"

    def __str__(self) -> str:
        return self.original or self.pretty


def _floating_floor(text: str, *, range_spec: str) -> str:
    """Return the lowest version a floating notation can resolve to.

    ``*`` may replace the last numeric segment (``1.*``, ``*``), extend or
    replace the pre-release label (``1.0.0-beta*``, ``1.0.0-*``), or both
    (``1.*-*``). The floor of a floated label is its ``0`` identifier.
    """
    numeric, dash, label = text.partition("-")

    if "*" in numeric:
        if numeric != "*" and not (numeric.endswith(".*") and numeric.count("*") == 1):
            raise MalformedRangeError(
                "Floating ranges must float a whole segment", range_spec=range_spec
            )
        if dash and label != "*":
            raise MalformedRangeError(
                "A floating version may only float its label as '-*'",
                range_spec=range_spec,
            )
        numeric = "0.0.0" if numeric == "*" else numeric[:-1] + "0"

    if "*" in label:
        if label.count("*") != 1 or not label.endswith("*"):
            raise MalformedRangeError(
                "Floating ranges take a single trailing '*'", range_spec=range_spec
            )
        label = label[:-1]
        if not label or label.endswith("."):
            label += "0"

    return numeric + dash + label
