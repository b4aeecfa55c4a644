"""
Executable module for dotnet-outdated.

Running:
    python -m dotnet_outdated

is equivalent to:
    dotnet-outdated

This module simply forwards execution to the CLI entrypoint defined in
`dotnet_outdated.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("dotnet-outdated CLI could not be loaded.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from dotnet_outdated.__version__ import __version__

        sys.stderr.write(f"dotnet-outdated version: {__version__}\n")
    except ImportError:
        sys.stderr.write("dotnet-outdated version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m dotnet_outdated`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from dotnet_outdated.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    # Execute the CLI handler
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
