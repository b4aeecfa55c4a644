"""
Unified data model exports for dotnet-outdated.

This module re-exports the core data models so callers can import them
directly from ``dotnet_outdated.models`` instead of individual submodules.

Example:
    >>> from dotnet_outdated.models import NuGetVersion, VersionRange
"""

from __future__ import annotations

from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.models.version_range import VersionRange
from dotnet_outdated.models.project import (
    Dependency,
    Project,
    ProjectItem,
    RawProject,
    TargetFramework,
)
from dotnet_outdated.models.comparison import (
    ComparisonFailure,
    ComparisonResult,
    DependencyOutcome,
    DependencyState,
    ProjectReport,
    TargetFrameworkReport,
)

__all__ = [
    "NuGetVersion",
    "VersionRange",
    "ProjectItem",
    "RawProject",
    "Dependency",
    "TargetFramework",
    "Project",
    "DependencyState",
    "ComparisonResult",
    "ComparisonFailure",
    "DependencyOutcome",
    "TargetFrameworkReport",
    "ProjectReport",
]
