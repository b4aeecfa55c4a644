"""
Core functionality exports for dotnet-outdated.

This module provides convenient access to the core subsystems:

    from dotnet_outdated.core import ComparisonEngine, NuGetRegistryClient
"""

from __future__ import annotations

from dotnet_outdated.core.prerelease import PrereleaseReporting, resolve_eligibility
from dotnet_outdated.core.graph_builder import DependencyGraphBuilder
from dotnet_outdated.core.registry import NuGetRegistryClient, select_latest_version
from dotnet_outdated.core.engine import ComparisonEngine, DependencyComparison
from dotnet_outdated.core.discovery import ProjectDiscoveryService
from dotnet_outdated.core.analysis import (
    DotNetRunner,
    ProjectAnalysisService,
    parse_dependency_graph,
)

__all__ = [
    "PrereleaseReporting",
    "resolve_eligibility",
    "DependencyGraphBuilder",
    "NuGetRegistryClient",
    "select_latest_version",
    "ComparisonEngine",
    "DependencyComparison",
    "ProjectDiscoveryService",
    "ProjectAnalysisService",
    "DotNetRunner",
    "parse_dependency_graph",
]
