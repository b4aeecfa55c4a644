"""Pre-release policy for dotnet-outdated.

Decides, per dependency, whether pre-release versions may be reported as
the latest version.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from dotnet_outdated.models.version import NuGetVersion


class PrereleaseReporting(str, Enum):
    """Process-wide pre-release reporting policy.

    ``AUTO`` reports pre-releases only for dependencies whose referenced
    version is itself a pre-release.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def from_string(cls, value: str) -> "PrereleaseReporting":
        """Parse a case-insensitive policy name (``"Auto"``, ``"never"``...)."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Invalid pre-release setting {value!r}; expected one of {choices}"
            ) from None


def resolve_eligibility(
    policy: PrereleaseReporting,
    referenced_version: Optional[NuGetVersion],
) -> bool:
    """Return whether pre-release candidates are eligible for a dependency.

    Args:
        policy: The configured :class:`PrereleaseReporting`.
        referenced_version: Floor of the dependency's declared range.

    Returns:
        ``True`` for ``ALWAYS``, ``False`` for ``NEVER``, and
        ``referenced_version.is_prerelease`` for ``AUTO``.

    Raises:
        TypeError: *referenced_version* is ``None``. Callers must only ask
            once the referenced version is known.
    """
    if referenced_version is None:
        raise TypeError("referenced_version must not be None")

    if policy is PrereleaseReporting.ALWAYS:
        return True
    if policy is PrereleaseReporting.NEVER:
        return False
    return referenced_version.is_prerelease
