"""
Custom exception hierarchy for dotnet-outdated.

This module defines structured exception types used across dotnet-outdated.
All exceptions inherit from :class:`OutdatedError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Errors fall into three scopes:

- per dependency: :class:`MalformedRangeError`, :class:`RegistryUnavailableError`
- per project: :class:`ProjectStructureError`
- per run: :class:`CommandValidationError` and its subclasses,
  :class:`ConfigError`, :class:`FileOperationError`
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence


class OutdatedError(Exception):
    """Base exception for all dotnet-outdated errors.

    All dotnet-outdated specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Dependency-scoped errors
# ---------------------------------------------------------------------------


class MalformedRangeError(OutdatedError):
    """Raised when a version or version range cannot be parsed.

    Args:
        message: Error description.
        range_spec: The raw specification that failed to parse.
        package_name: Package declaring the range, when known.
    """

    __slots__ = ("range_spec", "package_name")

    def __init__(
        self,
        message: str,
        *,
        range_spec: Optional[str] = None,
        package_name: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "range", range_spec)
        _add_if(details, "package", package_name)

        super().__init__(message, details)

        self.range_spec = range_spec
        self.package_name = package_name


class InvalidVersionError(MalformedRangeError):
    """Raised when a single version string is not a valid NuGet version."""


class NetworkError(OutdatedError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class PackageNotFoundError(NetworkError):
    """Raised when the registry answers 404 for a resource.

    Args:
        message: Error description.
        package_name: Name of the package involved.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class RegistryUnavailableError(NetworkError):
    """Raised when the package registry cannot be reached or misbehaves.

    Covers transport failures, unexpected HTTP statuses and malformed
    payloads. A missing package is *not* a registry failure.

    Args:
        message: Error description.
        package_name: Name of the package being looked up.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


# ---------------------------------------------------------------------------
# Project-scoped errors
# ---------------------------------------------------------------------------


class ProjectStructureError(OutdatedError):
    """Raised when a project cannot be turned into a dependency graph.

    Args:
        message: Error description.
        project_name: Name of the offending project.
        project_path: Path of the offending project file.
    """

    __slots__ = ("project_name", "project_path")

    def __init__(
        self,
        message: str,
        *,
        project_name: Optional[str] = None,
        project_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "project", project_name)
        _add_if(details, "path", project_path)

        super().__init__(message, details)

        self.project_name = project_name
        self.project_path = project_path


# ---------------------------------------------------------------------------
# Run-scoped errors
# ---------------------------------------------------------------------------


class CommandValidationError(OutdatedError):
    """Raised for user-facing validation failures that abort the run.

    The CLI reports these as a plain message and exits with status 1.
    """


class NoProjectFoundError(CommandValidationError):
    """Raised when no solution or project file can be found at a path."""

    __slots__ = ("path",)

    def __init__(self, path: str) -> None:
        super().__init__(
            f"The directory '{path}' does not contain any solutions or projects.",
        )
        self.path = path


class MultipleProjectsFoundError(CommandValidationError):
    """Raised when a directory holds more than one candidate file.

    Args:
        path: Directory that was searched.
        candidates: Conflicting file names.
        kind: ``"solution"`` or ``"project"``.
    """

    __slots__ = ("path", "candidates")

    def __init__(
        self,
        path: str,
        candidates: Sequence[Any],
        kind: str = "project",
    ) -> None:
        names = ", ".join(str(c) for c in candidates)
        super().__init__(
            f"The directory '{path}' contains multiple {kind}s ({names}). "
            f"Specify the {kind} to use.",
        )
        self.path = path
        self.candidates = list(candidates)


class ProjectAnalysisError(CommandValidationError):
    """Raised when the build toolchain fails to produce a dependency graph.

    Args:
        message: Error description.
        project_path: Project or solution being analyzed.
        output: Captured toolchain output, truncated for safety.
    """

    __slots__ = ("project_path", "output")

    def __init__(
        self,
        message: str,
        *,
        project_path: Optional[str] = None,
        output: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", project_path)

        if output:
            details["output"] = _truncate(output)

        super().__init__(message, details)

        self.project_path = project_path
        self.output = output


class ConfigError(OutdatedError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Offending option name, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class FileOperationError(OutdatedError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/validate).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
