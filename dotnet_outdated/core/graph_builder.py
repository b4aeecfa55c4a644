"""Dependency graph construction for dotnet-outdated.

Turns the raw items reported by the build toolchain into the immutable
``Project -> TargetFramework -> Dependency`` tree consumed by the
comparison engine.

Rules:

1. Only direct package references are kept: items of type
   ``PackageReference`` that are not imported/implicit.
2. An item scoped to a target framework lands under that framework only;
   an unscoped item lands under every framework of its project.
3. Package ids are unique per framework (case-insensitive). A repeated
   declaration keeps the position of the first one and the version of the
   last one.
4. A project with no target frameworks is rejected with
   :class:`~dotnet_outdated.exceptions.ProjectStructureError`.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from dotnet_outdated.exceptions import ProjectStructureError
from dotnet_outdated.models.project import (
    Dependency,
    Project,
    ProjectItem,
    RawProject,
    TargetFramework,
    normalize_package_id,
)
from dotnet_outdated.utils.logger import get_logger

logger = get_logger("graph_builder")


class DependencyGraphBuilder:
    """Builds :class:`Project` trees from :class:`RawProject` data."""

    def build(self, raw_projects: Iterable[RawProject]) -> List[Project]:
        """Build every project, failing on the first structural error.

        Use :meth:`build_project` directly to isolate failures per project.
        """
        return [self.build_project(raw) for raw in raw_projects]

    def build_project(self, raw: RawProject) -> Project:
        """Build the dependency tree of a single project.

        Args:
            raw: Raw project data from the analysis step.

        Returns:
            An immutable :class:`Project`.

        Raises:
            ProjectStructureError: The project declares no target frameworks.
        """
        monikers = _unique_monikers(raw.target_frameworks)
        if not monikers:
            raise ProjectStructureError(
                f"Project '{raw.name}' does not declare any target frameworks",
                project_name=raw.name,
                project_path=str(raw.path),
            )

        # moniker key -> (package key -> Dependency), insertion ordered
        grouped: Dict[str, Dict[str, Dependency]] = {
            moniker.lower(): {} for moniker in monikers
        }

        direct = [item for item in raw.items if _is_direct_package_reference(item)]
        logger.debug(
            "Project %s: %d of %d item(s) are direct package references",
            raw.name,
            len(direct),
            len(raw.items),
        )

        for item in direct:
            targets = self._resolve_targets(raw, item, grouped)
            dependency = Dependency(name=item.include.strip(), range_spec=item.version)
            for target in targets:
                _add_dependency(grouped[target], dependency, raw.name, target)

        frameworks = tuple(
            TargetFramework(
                name=moniker,
                dependencies=tuple(grouped[moniker.lower()].values()),
            )
            for moniker in monikers
        )
        return Project(name=raw.name, path=raw.path, target_frameworks=frameworks)

    @staticmethod
    def _resolve_targets(
        raw: RawProject,
        item: ProjectItem,
        grouped: Dict[str, Dict[str, Dependency]],
    ) -> List[str]:
        if item.target_framework is None:
            return list(grouped)

        key = item.target_framework.strip().lower()
        if key not in grouped:
            logger.warning(
                "Project %s: %s is declared for undeclared framework %s; skipping",
                raw.name,
                item.include,
                item.target_framework,
            )
            return []
        return [key]


def _is_direct_package_reference(item: ProjectItem) -> bool:
    return item.is_package_reference and not item.is_imported and bool(item.include.strip())


def _unique_monikers(monikers: Iterable[str]) -> List[str]:
    seen: Dict[str, str] = {}
    for moniker in monikers:
        name = moniker.strip()
        if name and name.lower() not in seen:
            seen[name.lower()] = name
    return list(seen.values())


def _add_dependency(
    bucket: Dict[str, Dependency],
    dependency: Dependency,
    project_name: str,
    framework: str,
) -> None:
    existing: Optional[Dependency] = bucket.get(dependency.key)
    if existing is not None:
        logger.warning(
            "Project %s (%s): duplicate reference to %s; using %s",
            project_name,
            framework,
            dependency.name,
            dependency.range_spec,
        )
    # Re-assigning an existing key keeps its original position
    bucket[normalize_package_id(dependency.name)] = dependency
