"""
Command-line interface for dotnet-outdated.

This module provides the CLI entry point: it loads configuration, resolves
the project to analyze, runs the comparison engine and hands the reports to
the reporter.
"""

from __future__ import annotations

import os
import sys
import asyncio
from pathlib import Path
from typing import List, Optional

import click

from dotnet_outdated import reporter
from dotnet_outdated.config import OutdatedConfig, load_config
from dotnet_outdated.__version__ import __version__
from dotnet_outdated.core import (
    ComparisonEngine,
    NuGetRegistryClient,
    PrereleaseReporting,
    ProjectAnalysisService,
    ProjectDiscoveryService,
)
from dotnet_outdated.exceptions import OutdatedError
from dotnet_outdated.models.comparison import ProjectReport
from dotnet_outdated.models.project import RawProject
from dotnet_outdated.utils.http import HTTPClient
from dotnet_outdated.utils.logger import get_logger, level_for_verbosity, setup_logging
from dotnet_outdated.utils.console import (
    print_error,
    print_warning,
    reconfigure_console,
)

logger = get_logger("cli")


@click.command(
    name="dotnet-outdated",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument(
    "path",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--pre-release",
    "-pr",
    "prerelease",
    type=click.Choice([p.value for p in PrereleaseReporting], case_sensitive=False),
    default=None,
    help="Whether to look for pre-release versions of packages "
    "(default: auto, or the configured value).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="DOTNET_OUTDATED_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DOTNET_OUTDATED_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="dotnet-outdated",
    message="%(prog)s %(version)s",
)
def cli(
    path: Optional[Path],
    prerelease: Optional[str],
    output_format: str,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """List outdated NuGet packages of a .NET solution or project.

    PATH is a .sln or project file, or a directory containing exactly one
    of them. Defaults to the current directory.

    \b
    Examples:
      dotnet-outdated
      dotnet-outdated src/App/App.csproj
      dotnet-outdated --pre-release always
      dotnet-outdated -f json > report.json
    """
    _configure_output(verbose, color)

    settings = load_config(config)

    if prerelease is not None:
        settings.prerelease = PrereleaseReporting.from_string(prerelease)

    logger.debug("dotnet-outdated v%s", __version__)
    logger.debug("Settings: %s", settings.to_log_dict())

    target = path if path is not None else Path.cwd()
    project_path = ProjectDiscoveryService().discover_project(target)
    raw_projects = ProjectAnalysisService().analyze_project(project_path)

    if not raw_projects:
        print_warning(f"No projects with package references found in {project_path.name}")
        return

    reports = asyncio.run(_compare(raw_projects, settings))
    reporter.render(reports, output_format.lower())


def _configure_output(verbose: int, color: bool) -> None:
    """Configure logging level and color handling for this invocation."""
    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    setup_logging(level=level_for_verbosity(verbose), verbose=verbose > 1)


async def _compare(
    raw_projects: List[RawProject],
    settings: OutdatedConfig,
) -> List[ProjectReport]:
    """Run the comparison engine against the configured feed."""
    async with HTTPClient(
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        max_concurrency=settings.max_concurrency,
    ) as http:
        engine = ComparisonEngine(
            NuGetRegistryClient(http, service_index=settings.source),
            prerelease=settings.prerelease,
            max_concurrency=settings.max_concurrency,
        )
        return await engine.analyze(raw_projects)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the dotnet-outdated CLI.

    Returns:
        Exit code:
            0   Success (whether or not packages are outdated)
            1   Validation or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli.main(args=argv, prog_name="dotnet-outdated", standalone_mode=False)
        return 0

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except OutdatedError as exc:
        print_error(exc.message)
        logger.debug(
            "OutdatedError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
