"""
dotnet-outdated version information.

Single source of truth for the package version, read by packaging,
the ``--version`` option and the registry User-Agent header.
"""

from __future__ import annotations

__version__ = "0.1.0"
