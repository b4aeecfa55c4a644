"""
dotnet-outdated: report outdated NuGet dependencies of .NET projects

dotnet-outdated inspects the package references declared by a solution or
project, asks a NuGet v3 registry for the newest published versions and
reports, per target framework, which references have fallen behind.

Features include:
    • NuGet version range parsing (exact, bounded, open and floating ranges)
    • SemVer 2.0 ordering with pre-release awareness
    • Pre-release policy (auto / always / never)
    • Concurrent, order-preserving registry lookups
    • Table or JSON reports
"""

from __future__ import annotations

from dotnet_outdated.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "dotnet-outdated Contributors"
__license__ = "MIT"
__description__ = "List outdated NuGet packages of .NET projects."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from dotnet_outdated.models import (
    ComparisonFailure,
    ComparisonResult,
    Dependency,
    NuGetVersion,
    Project,
    TargetFramework,
    VersionRange,
)
from dotnet_outdated.core import (
    ComparisonEngine,
    DependencyGraphBuilder,
    NuGetRegistryClient,
    PrereleaseReporting,
    resolve_eligibility,
)

__all__ = [
    "__version__",
    # Models
    "NuGetVersion",
    "VersionRange",
    "Project",
    "TargetFramework",
    "Dependency",
    "ComparisonResult",
    "ComparisonFailure",
    # Core
    "ComparisonEngine",
    "DependencyGraphBuilder",
    "NuGetRegistryClient",
    "PrereleaseReporting",
    "resolve_eligibility",
]
