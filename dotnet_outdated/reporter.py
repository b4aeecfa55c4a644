"""Report rendering for dotnet-outdated.

Renders :class:`~dotnet_outdated.models.comparison.ProjectReport` objects
either as one Rich table per target framework or as a JSON document. The
comparison records are plain data; all presentation decisions live here.

Table example::

    App
    net8.0
    ┏━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━┳━━━━━━━━━┳━━━━━━━━━┓
    ┃ Status     ┃ Package         ┃ Referenced ┃ Latest  ┃ Upgrade ┃
    ┡━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━╇━━━━━━━━━╇━━━━━━━━━┩
    │ ⬆ OUTDATED │ Newtonsoft.Json │ 12.0.1     │ 13.0.3  │ major   │
    │ ✓ OK       │ Serilog         │ 3.1.1      │ 3.1.1   │ -       │
    └────────────┴─────────────────┴────────────┴─────────┴─────────┘
"""

from __future__ import annotations

import json
from typing import Any, Dict, Sequence

from rich.markup import escape

from dotnet_outdated.constants import UNKNOWN_VALUE
from dotnet_outdated.models.comparison import (
    DependencyOutcome,
    DependencyState,
    ProjectReport,
    TargetFrameworkReport,
)
from dotnet_outdated.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_error,
    print_heading,
    print_note,
    print_success,
    print_table,
    print_warning,
)

_COLUMN_STYLES: Dict[str, Dict[str, Any]] = {
    "Status": {"justify": "center", "no_wrap": True},
    "Package": {"style": "bold cyan", "no_wrap": True},
    "Referenced": {"justify": "center", "style": "dim"},
    "Latest": {"justify": "center"},
    "Upgrade": {"justify": "center"},
}


def render(reports: Sequence[ProjectReport], output_format: str = "table") -> None:
    """Render *reports* in the requested format (``table`` or ``json``)."""
    if output_format == "json":
        render_json(reports)
    else:
        render_table(reports)


def render_json(reports: Sequence[ProjectReport]) -> None:
    """Print reports as a JSON array, one object per project."""
    data = [report.to_json() for report in reports]
    print(json.dumps(data, indent=2))


def render_table(reports: Sequence[ProjectReport]) -> None:
    """Print one table per target framework, grouped by project."""
    for report in reports:
        print_heading(report.name, style="project")

        if report.error is not None:
            print_error(report.error.message)
        else:
            for framework in report.target_frameworks:
                _render_framework(framework)

        get_raw_console().print()

    _render_summary(reports)


def _render_framework(framework: TargetFrameworkReport) -> None:
    print_heading(framework.name, style="framework", indent=2)

    if not framework.outcomes:
        print_note("-- No package references --")
        return

    print_table(
        [build_row(outcome) for outcome in framework.outcomes],
        column_styles=_COLUMN_STYLES,
    )


def build_row(outcome: DependencyOutcome) -> Dict[str, str]:
    """Build the Rich-markup table row for one dependency outcome."""
    referenced = _version_cell(outcome.referenced_version)
    latest = _version_cell(outcome.latest_version)
    name = escape(outcome.name)

    if outcome.state is DependencyState.FAILED:
        return {
            "Status": "[red]✗ ERROR[/red]",
            "Package": name,
            "Referenced": referenced,
            "Latest": f"[red]{UNKNOWN_VALUE}[/red]",
            "Upgrade": f"[red]{escape(_failure_reason(outcome))}[/red]",
        }

    if outcome.latest_version is None:
        return {
            "Status": "[yellow]? UNKNOWN[/yellow]",
            "Package": name,
            "Referenced": referenced,
            "Latest": f"[dim]{UNKNOWN_VALUE}[/dim]",
            "Upgrade": "[dim]-[/dim]",
        }

    if outcome.outdated:
        return {
            "Status": "[yellow]⬆ OUTDATED[/yellow]",
            "Package": name,
            "Referenced": referenced,
            "Latest": f"[blue]{latest}[/blue]",
            "Upgrade": colorize_update_type(outcome.update_type),
        }

    return {
        "Status": "[green]✓ OK[/green]",
        "Package": name,
        "Referenced": referenced,
        "Latest": latest,
        "Upgrade": "[dim]-[/dim]",
    }


def _version_cell(version: Any) -> str:
    return escape(str(version)) if version is not None else UNKNOWN_VALUE


def _failure_reason(outcome: DependencyOutcome) -> str:
    error = outcome.error
    return error.message if error is not None else "failed"


def _render_summary(reports: Sequence[ProjectReport]) -> None:
    outdated = sum(report.outdated_count for report in reports)
    failed_projects = [report for report in reports if not report.succeeded]
    failed_dependencies = sum(
        tf.failed_count for report in reports for tf in report.target_frameworks
    )

    if failed_projects:
        print_warning(f"{len(failed_projects)} project(s) could not be analyzed")
    if failed_dependencies:
        print_warning(f"{failed_dependencies} package reference(s) could not be checked")

    if outdated:
        print_warning(f"{outdated} package reference(s) have newer versions available")
    else:
        print_success("All package references are up to date!")
