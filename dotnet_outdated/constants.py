"""
Centralized constants for dotnet-outdated.

This module defines immutable configuration values used across
dotnet-outdated, including registry endpoints, network settings, project
file patterns, and logging formats. All values are intended to be treated
as read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "dotnet-outdated/{version} (python)"

# ---------------------------------------------------------------------------
# NuGet endpoints
# ---------------------------------------------------------------------------

#: Default NuGet v3 service index.
NUGET_SERVICE_INDEX: Final[str] = "https://api.nuget.org/v3/index.json"

#: Resource type exposing the flat-container version listing.
PACKAGE_BASE_ADDRESS_TYPE: Final[str] = "PackageBaseAddress/3.0.0"

#: Version listing path relative to the package base address.
PACKAGE_VERSIONS_PATH: Final[str] = "{package}/index.json"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of registry lookups in flight at once.
DEFAULT_MAX_CONCURRENCY: Final[int] = 10

# ---------------------------------------------------------------------------
# Defaults for user-facing options
# ---------------------------------------------------------------------------

#: Default pre-release reporting policy.
DEFAULT_PRERELEASE: Final[str] = "auto"

# ---------------------------------------------------------------------------
# Project files and build items
# ---------------------------------------------------------------------------

#: Glob patterns used to discover solutions and project files.
PROJECT_FILE_PATTERNS: Final[Mapping[str, Sequence[str]]] = {
    "solution": ("*.sln",),
    "project": ("*.csproj", "*.fsproj", "*.vbproj"),
}

#: MSBuild item type of a direct NuGet package reference.
PACKAGE_REFERENCE_ITEM: Final[str] = "PackageReference"

#: Restore project style that carries package references.
PACKAGE_REFERENCE_STYLE: Final[str] = "PackageReference"

#: Executable used to drive MSBuild.
DOTNET_EXECUTABLE: Final[str] = "dotnet"

#: File name of the generated dependency graph.
DEPENDENCY_GRAPH_FILE: Final[str] = "dependency-graph.json"

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

#: Placeholder for versions that could not be determined.
UNKNOWN_VALUE: Final[str] = "Unknown"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading generated graph files.
MAX_FILE_SIZE: Final[int] = 50 * 1024 * 1024  # 50 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
