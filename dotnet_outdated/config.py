"""Configuration file loader for dotnet-outdated.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``dotnet-outdated.toml``: settings under a ``[dotnet-outdated]`` table
- ``pyproject.toml``: settings under a ``[tool.dotnet-outdated]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DOTNET_OUTDATED_CONFIG``
2. ``dotnet-outdated.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.dotnet-outdated]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``dotnet-outdated.toml``)::

    [dotnet-outdated]
    prerelease = "never"
    source = "https://api.nuget.org/v3/index.json"
    max_concurrency = 8
    timeout = 20
    max_retries = 2
"""

from __future__ import annotations


import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from dotnet_outdated.exceptions import ConfigError
from dotnet_outdated.utils.logger import get_logger
from dotnet_outdated.core.prerelease import PrereleaseReporting
from dotnet_outdated.constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PRERELEASE,
    DEFAULT_TIMEOUT,
    NUGET_SERVICE_INDEX,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "dotnet-outdated.toml"
CONFIG_SECTION = "dotnet-outdated"


@dataclass
class OutdatedConfig:
    """Parsed and validated dotnet-outdated configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        prerelease: Pre-release reporting policy.
        source: NuGet v3 service index URL.
        max_concurrency: Registry lookups allowed in flight at once.
        timeout: HTTP timeout in seconds.
        max_retries: Transport retries per registry request.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    prerelease: PrereleaseReporting = PrereleaseReporting(DEFAULT_PRERELEASE)
    source: str = NUGET_SERVICE_INDEX
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "prerelease": self.prerelease.value,
            "source": self.source,
            "max_concurrency": self.max_concurrency,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    own_file = cwd / CONFIG_FILE_NAME
    if own_file.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, own_file)
        return own_file

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.%s] in pyproject.toml", CONFIG_SECTION)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.dotnet-outdated]`` table.

    Parse errors count as "no section" so a broken pyproject.toml that
    was never meant for us does not block the run.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return CONFIG_SECTION in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> OutdatedConfig:
    """Load and validate dotnet-outdated configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`OutdatedConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return OutdatedConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(CONFIG_SECTION, {})
    else:
        section = raw.get(CONFIG_SECTION, {})

    if not section:
        logger.debug("Config file found but no %s section, using defaults", CONFIG_SECTION)
        return OutdatedConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _require_int(
    section: Dict[str, Any],
    key: str,
    *,
    minimum: int,
    config_path: str,
) -> int:
    val = section[key]
    # bool is an int subclass; "true" is never a valid count
    if isinstance(val, bool) or not isinstance(val, int):
        raise ConfigError(
            f"{key} must be an integer, got {type(val).__name__}",
            config_path=config_path,
            option=key,
        )
    if val < minimum:
        raise ConfigError(
            f"{key} must be at least {minimum}, got {val}",
            config_path=config_path,
            option=key,
        )
    return val


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> OutdatedConfig:
    """Parse and validate the dotnet-outdated configuration table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = OutdatedConfig()

    known_top = {"prerelease", "source", "max_concurrency", "timeout", "max_retries"}

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "prerelease" in section:
        val = section["prerelease"]
        if not isinstance(val, str):
            raise ConfigError(
                f"prerelease must be a string, got {type(val).__name__}",
                config_path=config_path,
                option="prerelease",
            )
        try:
            config.prerelease = PrereleaseReporting.from_string(val)
        except ValueError as exc:
            raise ConfigError(
                str(exc), config_path=config_path, option="prerelease"
            ) from exc

    if "source" in section:
        val = section["source"]
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(
                "source must be a non-empty string",
                config_path=config_path,
                option="source",
            )
        config.source = val.strip()

    if "max_concurrency" in section:
        config.max_concurrency = _require_int(
            section, "max_concurrency", minimum=1, config_path=config_path
        )

    if "timeout" in section:
        config.timeout = _require_int(
            section, "timeout", minimum=1, config_path=config_path
        )

    if "max_retries" in section:
        config.max_retries = _require_int(
            section, "max_retries", minimum=0, config_path=config_path
        )

    return config
