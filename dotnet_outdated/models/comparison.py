"""
Comparison output records for dotnet-outdated.

Every dependency handled by the comparison engine yields exactly one
*outcome*: a :class:`ComparisonResult` when the comparison ran to
completion, or a :class:`ComparisonFailure` when the range could not be
parsed or the registry could not be queried. Both variants expose the same
read-only surface (``name``, ``referenced_version``, ``latest_version``,
``outdated``, ``state``) so reporters can treat them uniformly.

Outcomes are collected per target framework in declaration order.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dotnet_outdated.exceptions import OutdatedError, ProjectStructureError
from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.utils.version_utils import get_update_type


class DependencyState(str, Enum):
    """Lifecycle of a single dependency comparison."""

    PENDING = "pending"
    RANGE_PARSED = "range_parsed"
    POLICY_RESOLVED = "policy_resolved"
    COMPARED = "compared"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DependencyState.COMPARED, DependencyState.FAILED)


def _version_text(version: Optional[NuGetVersion]) -> Optional[str]:
    return str(version) if version is not None else None


@dataclass(frozen=True)
class ComparisonResult:
    """Referenced versus latest version of one dependency.

    Attributes:
        name: Package id.
        referenced_version: Floor of the declared range.
        latest_version: Newest eligible registry version, or ``None`` when
            the package is unknown to the registry or nothing is eligible.
    """

    name: str
    referenced_version: Optional[NuGetVersion]
    latest_version: Optional[NuGetVersion]

    @property
    def state(self) -> DependencyState:
        return DependencyState.COMPARED

    @property
    def error(self) -> Optional[OutdatedError]:
        return None

    @property
    def outdated(self) -> bool:
        """True when latest is strictly newer than referenced."""
        if self.referenced_version is None or self.latest_version is None:
            return False
        return self.latest_version > self.referenced_version

    @property
    def update_type(self) -> str:
        if self.referenced_version is None:
            return "unknown"
        return get_update_type(self.referenced_version, self.latest_version)

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.state.value,
            "referenced_version": _version_text(self.referenced_version),
            "latest_version": _version_text(self.latest_version),
            "outdated": self.outdated,
            "update_type": self.update_type,
        }


@dataclass(frozen=True)
class ComparisonFailure:
    """A dependency whose comparison could not be completed.

    Attributes:
        name: Package id.
        range_spec: Declared range text.
        error: The per-dependency error that stopped the comparison.
        referenced_version: Floor of the range when parsing got that far.
    """

    name: str
    range_spec: Optional[str]
    error: OutdatedError
    referenced_version: Optional[NuGetVersion] = None

    @property
    def state(self) -> DependencyState:
        return DependencyState.FAILED

    @property
    def latest_version(self) -> Optional[NuGetVersion]:
        return None

    @property
    def outdated(self) -> bool:
        return False

    @property
    def update_type(self) -> str:
        return "unknown"

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.state.value,
            "referenced_version": _version_text(self.referenced_version),
            "latest_version": None,
            "outdated": False,
            "range": self.range_spec,
            "error": {
                "type": type(self.error).__name__,
                "message": self.error.message,
            },
        }


DependencyOutcome = Union[ComparisonResult, ComparisonFailure]


@dataclass(frozen=True)
class TargetFrameworkReport:
    """Ordered outcomes for one target framework."""

    name: str
    outcomes: Tuple[DependencyOutcome, ...] = ()

    @property
    def outdated_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.outdated)

    @property
    def failed_count(self) -> int:
        return sum(
            1 for outcome in self.outcomes if outcome.state is DependencyState.FAILED
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "dependencies": [outcome.to_json() for outcome in self.outcomes],
        }


@dataclass(frozen=True)
class ProjectReport:
    """Comparison report for one project.

    Exactly one of ``target_frameworks`` (possibly empty) or ``error`` is
    meaningful: a project that failed to build carries its
    :class:`ProjectStructureError` and no framework reports.
    """

    name: str
    path: Path
    target_frameworks: Tuple[TargetFrameworkReport, ...] = field(default_factory=tuple)
    error: Optional[ProjectStructureError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def outdated_count(self) -> int:
        return sum(tf.outdated_count for tf in self.target_frameworks)

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "path": str(self.path),
            "target_frameworks": [tf.to_json() for tf in self.target_frameworks],
        }
        if self.error is not None:
            data["error"] = self.error.message
        return data
