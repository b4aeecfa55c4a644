"""
Filesystem utilities for dotnet-outdated.

This module provides read-only helpers for locating solution/project files
and reading generated build output. All filesystem errors are normalized
to ``FileOperationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from dotnet_outdated.utils.logger import get_logger
from dotnet_outdated.exceptions import FileOperationError
from dotnet_outdated.constants import MAX_FILE_SIZE, PROJECT_FILE_PATTERNS


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Validate and resolve an existing file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding. A UTF-8 byte order mark is tolerated.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc

    # MSBuild writes UTF-8 with BOM on some platforms
    return text.lstrip("\ufeff")


def find_project_files(
    directory: PathLike = ".",
    *,
    kind: str = "project",
) -> List[Path]:
    """Find solution or project files directly inside *directory*.

    Args:
        directory: Directory to search (not recursive).
        kind: Pattern group from ``PROJECT_FILE_PATTERNS``
            (``"solution"`` or ``"project"``).

    Returns:
        Sorted matching paths; empty if *directory* is not a directory.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        return []

    try:
        patterns = PROJECT_FILE_PATTERNS[kind]
    except KeyError:
        raise ValueError(f"Unknown project file kind: {kind!r}") from None

    matches: List[Path] = []
    for pattern in patterns:
        matches.extend(p for p in root.glob(pattern) if p.is_file())

    logger.debug("Found %d %s file(s) in %s", len(matches), kind, root)
    return sorted(set(matches))


def validate_path(
    path: PathLike,
    *,
    base_dir: Optional[PathLike] = None,
) -> Path:
    """Resolve and validate a filesystem path.

    If ``base_dir`` is provided, the resolved path must be within it.
    """
    resolved = Path(path).expanduser().resolve(strict=False)

    if base_dir:
        base = Path(base_dir).resolve(strict=False)
        try:
            resolved.relative_to(base)
        except ValueError:
            raise FileOperationError(
                f"Path outside allowed base directory: {resolved}",
                file_path=str(path),
                operation="validate",
            )

    return resolved
