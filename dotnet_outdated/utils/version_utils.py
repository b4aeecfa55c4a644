"""
Version comparison utilities for dotnet-outdated.

This module provides helpers for classifying version changes between a
referenced and a latest NuGet version.
"""

from __future__ import annotations

from typing import Optional, Union

from dotnet_outdated.models.version import NuGetVersion

VersionLike = Union[NuGetVersion, str]


def get_update_type(
    current_version: Optional[VersionLike],
    target_version: Optional[VersionLike],
) -> str:
    """Determine the semantic update type between two versions.

    Args:
        current_version: Referenced version, or ``None`` if unknown.
        target_version: Version to compare against.

    Returns:
        One of:
            - ``"new"``        : No current version exists
            - ``"same"``       : Versions are identical
            - ``"downgrade"``  : Target version is lower than current
            - ``"major"``      : Major version change
            - ``"minor"``      : Minor version change
            - ``"patch"``      : Patch or revision change
            - ``"prerelease"`` : Same numbers, different pre-release label
            - ``"unknown"``    : Missing or invalid target version

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type(None, "1.0.0")
        'new'
        >>> get_update_type("1.2.3", "1.2.3")
        'same'
        >>> get_update_type("2.0.0-alpha", "2.0.0-beta")
        'prerelease'
    """
    if target_version is None:
        return "unknown"

    target = _coerce(target_version)
    if target is None:
        return "unknown"

    if current_version is None:
        return "new"

    current = _coerce(current_version)
    if current is None:
        return "unknown"

    if target == current:
        return "same"

    if target < current:
        return "downgrade"

    if current.major != target.major:
        return "major"

    if current.minor != target.minor:
        return "minor"

    if (current.patch, current.revision) != (target.patch, target.revision):
        return "patch"

    return "prerelease"


def _coerce(value: VersionLike) -> Optional[NuGetVersion]:
    if isinstance(value, NuGetVersion):
        return value
    return NuGetVersion.try_parse(value)
