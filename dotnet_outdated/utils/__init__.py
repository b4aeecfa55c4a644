"""
Utility helpers for dotnet-outdated.

This package provides reusable utilities used across dotnet-outdated:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem helpers for project discovery
- Async HTTP client
- Version comparison helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from dotnet_outdated.utils.filesystem import (
    find_project_files,
    safe_read_file,
    validate_path,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from dotnet_outdated.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from dotnet_outdated.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_error,
    print_heading,
    print_note,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from dotnet_outdated.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from dotnet_outdated.utils.version_utils import get_update_type

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_heading",
    "print_note",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Filesystem
    "safe_read_file",
    "find_project_files",
    "validate_path",
    # HTTP
    "HTTPClient",
    # Version utilities
    "get_update_type",
]
