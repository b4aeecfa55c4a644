"""Project discovery for dotnet-outdated.

Resolves the user-supplied path to the one solution or project file that
should be analyzed:

1. An existing file is used as-is.
2. In a directory, a single ``*.sln`` wins.
3. Otherwise a single project file (``*.csproj``, ``*.fsproj``,
   ``*.vbproj``) is used.

Anything ambiguous or empty is a validation error for the user to fix.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from dotnet_outdated.exceptions import (
    MultipleProjectsFoundError,
    NoProjectFoundError,
)
from dotnet_outdated.utils.filesystem import find_project_files, validate_path
from dotnet_outdated.utils.logger import get_logger

logger = get_logger("discovery")


class ProjectDiscoveryService:
    """Locates the solution or project file to analyze."""

    def discover_project(self, path: Union[str, Path]) -> Path:
        """Resolve *path* to a single solution or project file.

        Args:
            path: A solution/project file, or a directory containing one.

        Returns:
            Absolute path of the file to analyze.

        Raises:
            NoProjectFoundError: *path* does not exist or holds no candidates.
            MultipleProjectsFoundError: The directory is ambiguous.
        """
        resolved = validate_path(path)

        if resolved.is_file():
            logger.debug("Using project file %s", resolved)
            return resolved

        if not resolved.is_dir():
            raise NoProjectFoundError(str(path))

        solutions = find_project_files(resolved, kind="solution")
        if len(solutions) > 1:
            raise MultipleProjectsFoundError(
                str(resolved), [p.name for p in solutions], kind="solution"
            )
        if solutions:
            logger.debug("Using solution %s", solutions[0])
            return solutions[0]

        projects = find_project_files(resolved, kind="project")
        if len(projects) > 1:
            raise MultipleProjectsFoundError(
                str(resolved), [p.name for p in projects], kind="project"
            )
        if projects:
            logger.debug("Using project %s", projects[0])
            return projects[0]

        raise NoProjectFoundError(str(resolved))
