"""
Project data model for dotnet-outdated.

Two layers live here:

- the *raw* layer (:class:`ProjectItem`, :class:`RawProject`) mirrors what
  the build toolchain reports, unfiltered;
- the *graph* layer (:class:`Project`, :class:`TargetFramework`,
  :class:`Dependency`) is what the comparison engine consumes. It is built
  by :class:`~dotnet_outdated.core.graph_builder.DependencyGraphBuilder` and
  is immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotnet_outdated.constants import PACKAGE_REFERENCE_ITEM


def normalize_package_id(name: str) -> str:
    """Return the comparison key of a NuGet package id (ids are case-insensitive)."""
    return name.strip().lower()


# ---------------------------------------------------------------------------
# Raw build-system data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectItem:
    """A single item reported by the build system for a project.

    Attributes:
        item_type: MSBuild item type (``PackageReference``, ``ProjectReference``...).
        include: Item identity; the package id for package references.
        version: Declared version range text, if any.
        is_imported: True when the item comes from an imported file or is
            added implicitly by the SDK rather than declared by the project.
        target_framework: Framework the item is scoped to, or ``None`` when
            it applies to every framework of the project.
    """

    item_type: str
    include: str
    version: Optional[str] = None
    is_imported: bool = False
    target_framework: Optional[str] = None

    @property
    def is_package_reference(self) -> bool:
        return self.item_type == PACKAGE_REFERENCE_ITEM


@dataclass(frozen=True)
class RawProject:
    """Unprocessed description of one project as reported by the toolchain."""

    name: str
    path: Path
    target_frameworks: Tuple[str, ...] = ()
    items: Tuple[ProjectItem, ...] = ()


# ---------------------------------------------------------------------------
# Dependency graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Dependency:
    """A package directly referenced by a project for one target framework.

    Attributes:
        name: Package id as declared.
        range_spec: Declared version range text (``None`` if the reference
            carries no version).
    """

    name: str
    range_spec: Optional[str]

    @property
    def key(self) -> str:
        return normalize_package_id(self.name)


@dataclass(frozen=True)
class TargetFramework:
    """A framework moniker and the dependencies declared for it."""

    name: str
    dependencies: Tuple[Dependency, ...] = ()

    def get_dependency(self, name: str) -> Optional[Dependency]:
        """Look up a dependency by package id (case-insensitive)."""
        key = normalize_package_id(name)
        for dependency in self.dependencies:
            if dependency.key == key:
                return dependency
        return None


@dataclass(frozen=True)
class Project:
    """A project with its ordered target frameworks.

    Attributes:
        name: Project name.
        path: Project file path.
        target_frameworks: Non-empty, in declaration order.
    """

    name: str
    path: Path
    target_frameworks: Tuple[TargetFramework, ...] = field(default_factory=tuple)

    @property
    def dependency_count(self) -> int:
        return sum(len(tf.dependencies) for tf in self.target_frameworks)
