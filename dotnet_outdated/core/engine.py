"""Comparison engine for dotnet-outdated.

For every dependency of every target framework the engine walks the
following state machine::

    PENDING --parse range--> RANGE_PARSED --apply policy--> POLICY_RESOLVED
        --query registry--> COMPARED
    (any non-terminal state) --error--> FAILED

Parsing and policy resolution are synchronous; the registry lookup is the
only ``await``. Lookups of one target framework are dispatched
concurrently (bounded by a semaphore) and gathered back in declaration
order, so concurrency never changes the order of the emitted outcomes.

Failures are localized:

- a malformed range or a registry outage fails that dependency only
  (:class:`ComparisonFailure` in its slot);
- a project without target frameworks fails that project only
  (:class:`ProjectReport` carrying the error).

Typical usage::

    async with HTTPClient() as http:
        engine = ComparisonEngine(
            NuGetRegistryClient(http),
            prerelease=PrereleaseReporting.AUTO,
        )
        reports = await engine.analyze(raw_projects)
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Protocol

from dotnet_outdated.constants import DEFAULT_MAX_CONCURRENCY
from dotnet_outdated.core.graph_builder import DependencyGraphBuilder
from dotnet_outdated.core.prerelease import PrereleaseReporting, resolve_eligibility
from dotnet_outdated.exceptions import (
    MalformedRangeError,
    OutdatedError,
    ProjectStructureError,
    RegistryUnavailableError,
)
from dotnet_outdated.models.comparison import (
    ComparisonFailure,
    ComparisonResult,
    DependencyOutcome,
    DependencyState,
    ProjectReport,
    TargetFrameworkReport,
)
from dotnet_outdated.models.project import (
    Dependency,
    Project,
    RawProject,
    TargetFramework,
)
from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.models.version_range import VersionRange
from dotnet_outdated.utils.logger import get_logger

logger = get_logger("engine")


class RegistryClient(Protocol):
    """What the engine needs from a registry."""

    async def get_latest_version(
        self,
        package_name: str,
        include_prerelease: bool,
    ) -> Optional[NuGetVersion]: ...


class DependencyComparison:
    """Tracks one dependency through the comparison state machine.

    Each step method advances :attr:`state` and refuses to run out of order.
    Errors move the comparison to ``FAILED`` and are kept in :attr:`error`.
    """

    __slots__ = (
        "dependency",
        "state",
        "version_range",
        "include_prerelease",
        "latest_version",
        "error",
    )

    def __init__(self, dependency: Dependency) -> None:
        self.dependency = dependency
        self.state = DependencyState.PENDING
        self.version_range: Optional[VersionRange] = None
        self.include_prerelease: Optional[bool] = None
        self.latest_version: Optional[NuGetVersion] = None
        self.error: Optional[OutdatedError] = None

    @property
    def referenced_version(self) -> Optional[NuGetVersion]:
        if self.version_range is None:
            return None
        return self.version_range.min_version

    def _expect(self, state: DependencyState) -> None:
        if self.state is not state:
            raise RuntimeError(
                f"{self.dependency.name}: expected state {state.value}, "
                f"got {self.state.value}"
            )

    def parse_range(self) -> bool:
        """PENDING -> RANGE_PARSED (or FAILED). Returns True on success."""
        self._expect(DependencyState.PENDING)
        spec = self.dependency.range_spec

        try:
            if spec is None:
                raise MalformedRangeError(
                    "Package reference does not declare a version",
                    package_name=self.dependency.name,
                )
            version_range = VersionRange.parse(spec)
            if not version_range.has_lower_bound:
                raise MalformedRangeError(
                    "Version range has no minimum version",
                    range_spec=spec,
                    package_name=self.dependency.name,
                )
        except MalformedRangeError as exc:
            if exc.package_name is None:
                exc.package_name = self.dependency.name
                exc.details["package"] = self.dependency.name
            self.fail(exc)
            return False

        self.version_range = version_range
        self.state = DependencyState.RANGE_PARSED
        return True

    def resolve_policy(self, policy: PrereleaseReporting) -> None:
        """RANGE_PARSED -> POLICY_RESOLVED."""
        self._expect(DependencyState.RANGE_PARSED)
        self.include_prerelease = resolve_eligibility(policy, self.referenced_version)
        self.state = DependencyState.POLICY_RESOLVED

    def complete(self, latest_version: Optional[NuGetVersion]) -> None:
        """POLICY_RESOLVED -> COMPARED."""
        self._expect(DependencyState.POLICY_RESOLVED)
        self.latest_version = latest_version
        self.state = DependencyState.COMPARED

    def fail(self, error: OutdatedError) -> None:
        """Any non-terminal state -> FAILED."""
        if self.state.is_terminal:
            raise RuntimeError(
                f"{self.dependency.name}: cannot fail from state {self.state.value}"
            )
        self.error = error
        self.state = DependencyState.FAILED

    def outcome(self) -> DependencyOutcome:
        """Build the output record of a finished comparison."""
        if self.state is DependencyState.COMPARED:
            return ComparisonResult(
                name=self.dependency.name,
                referenced_version=self.referenced_version,
                latest_version=self.latest_version,
            )
        if self.state is DependencyState.FAILED:
            assert self.error is not None
            return ComparisonFailure(
                name=self.dependency.name,
                range_spec=self.dependency.range_spec,
                error=self.error,
                referenced_version=self.referenced_version,
            )
        raise RuntimeError(
            f"{self.dependency.name}: comparison unfinished ({self.state.value})"
        )


class ComparisonEngine:
    """Compares referenced dependency versions against a registry.

    Args:
        registry: Anything with an async ``get_latest_version(name,
            include_prerelease)``; normally a
            :class:`~dotnet_outdated.core.registry.NuGetRegistryClient`.
        prerelease: Pre-release policy applied to every dependency.
        max_concurrency: Maximum registry lookups in flight at once.
        graph_builder: Builder used by :meth:`analyze`.
    """

    def __init__(
        self,
        registry: RegistryClient,
        *,
        prerelease: PrereleaseReporting = PrereleaseReporting.AUTO,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        graph_builder: Optional[DependencyGraphBuilder] = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.registry = registry
        self.prerelease = prerelease
        self.max_concurrency = max_concurrency
        self.graph_builder = graph_builder or DependencyGraphBuilder()
        self._semaphore = asyncio.Semaphore(max_concurrency)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def analyze(self, raw_projects: Iterable[RawProject]) -> List[ProjectReport]:
        """Build and compare every project, isolating structural failures."""
        reports: List[ProjectReport] = []

        for raw in raw_projects:
            try:
                project = self.graph_builder.build_project(raw)
            except ProjectStructureError as exc:
                logger.warning("Skipping project %s: %s", raw.name, exc.message)
                reports.append(ProjectReport(name=raw.name, path=raw.path, error=exc))
                continue

            reports.append(await self.compare_project(project))

        return reports

    async def compare_projects(self, projects: Iterable[Project]) -> List[ProjectReport]:
        """Compare already-built projects, in order."""
        return [await self.compare_project(project) for project in projects]

    async def compare_project(self, project: Project) -> ProjectReport:
        """Compare every target framework of *project*, in order."""
        logger.info(
            "Analyzing %s (%d framework(s), %d dependency reference(s))",
            project.name,
            len(project.target_frameworks),
            project.dependency_count,
        )
        frameworks = []
        for framework in project.target_frameworks:
            frameworks.append(await self.compare_target_framework(framework))

        return ProjectReport(
            name=project.name,
            path=project.path,
            target_frameworks=tuple(frameworks),
        )

    async def compare_target_framework(
        self,
        framework: TargetFramework,
    ) -> TargetFrameworkReport:
        """Compare all dependencies of *framework* concurrently.

        ``asyncio.gather`` returns results positionally, so outcomes keep
        the declaration order of ``framework.dependencies``.
        """
        outcomes = await asyncio.gather(
            *(self.compare_dependency(dep) for dep in framework.dependencies)
        )
        return TargetFrameworkReport(name=framework.name, outcomes=tuple(outcomes))

    async def compare_dependency(self, dependency: Dependency) -> DependencyOutcome:
        """Run one dependency through the state machine."""
        comparison = DependencyComparison(dependency)

        if not comparison.parse_range():
            logger.warning("%s: %s", dependency.name, comparison.error)
            return comparison.outcome()

        comparison.resolve_policy(self.prerelease)

        try:
            async with self._semaphore:
                latest = await self.registry.get_latest_version(
                    dependency.name,
                    bool(comparison.include_prerelease),
                )
        except RegistryUnavailableError as exc:
            logger.error("Failed to look up %s: %s", dependency.name, exc)
            comparison.fail(exc)
            return comparison.outcome()

        comparison.complete(latest)
        return comparison.outcome()
