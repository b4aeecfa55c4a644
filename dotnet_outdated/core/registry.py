"""NuGet registry access for dotnet-outdated.

:class:`NuGetRegistryClient` answers a single question: *what is the newest
published version of a package that the pre-release policy allows?*

The version list comes from the NuGet v3 ``PackageBaseAddress`` resource
(the "flat container"), whose URL is discovered from the feed's service
index on first use::

    GET {service-index}                      -> resources[@type=PackageBaseAddress/3.0.0]
    GET {base-address}/{id-lower}/index.json -> {"versions": ["1.0.0", ...]}

Selection is a pure function (:func:`select_latest_version`) so that it can
be exercised without any network access.

Typical usage::

    from dotnet_outdated.utils.http import HTTPClient
    from dotnet_outdated.core.registry import NuGetRegistryClient

    async with HTTPClient() as http:
        registry = NuGetRegistryClient(http)
        latest = await registry.get_latest_version("Newtonsoft.Json", False)
        print(latest)   # e.g. 13.0.3
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Optional

from dotnet_outdated.exceptions import (
    NetworkError,
    PackageNotFoundError,
    RegistryUnavailableError,
)
from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.utils.http import HTTPClient
from dotnet_outdated.utils.logger import get_logger
from dotnet_outdated.constants import (
    NUGET_SERVICE_INDEX,
    PACKAGE_BASE_ADDRESS_TYPE,
    PACKAGE_VERSIONS_PATH,
)

logger = get_logger("registry")

__all__ = ["NuGetRegistryClient", "select_latest_version", "parse_versions"]


# ---------------------------------------------------------------------------
# Pure selection logic
# ---------------------------------------------------------------------------


def parse_versions(raw_versions: Iterable[Any]) -> List[NuGetVersion]:
    """Parse registry version strings, skipping entries that are not versions."""
    parsed: List[NuGetVersion] = []
    for raw in raw_versions:
        version = NuGetVersion.try_parse(raw) if isinstance(raw, str) else None
        if version is None:
            logger.debug("Skipping unparsable registry version %r", raw)
            continue
        parsed.append(version)
    return parsed


def select_latest_version(
    versions: Iterable[NuGetVersion],
    include_prerelease: bool,
) -> Optional[NuGetVersion]:
    """Pick the newest eligible version.

    Stable versions are always eligible; pre-releases only when
    *include_prerelease* is set.

    Args:
        versions: Candidate versions in any order.
        include_prerelease: Whether pre-release versions may be selected.

    Returns:
        The maximum eligible version, or ``None`` if none is eligible.

    Example::

        >>> vs = [NuGetVersion.parse(v) for v in ("1.2.0", "1.3.0", "2.0.0-beta")]
        >>> str(select_latest_version(vs, include_prerelease=False))
        '1.3.0'
        >>> str(select_latest_version(vs, include_prerelease=True))
        '2.0.0-beta'
    """
    eligible = [v for v in versions if include_prerelease or not v.is_prerelease]
    if not eligible:
        return None
    return max(eligible)


# ---------------------------------------------------------------------------
# Registry client
# ---------------------------------------------------------------------------


class NuGetRegistryClient:
    """Async client for a NuGet v3 feed.

    Args:
        http_client: A pre-configured :class:`HTTPClient` (owns the
            connection pool, timeouts and transport retries).
        service_index: URL of the feed's ``index.json``.

    Lookups never mutate their inputs and keep no state across runs; the
    only thing remembered is the outcome of resolving the feed's base
    address, whether it succeeded or failed.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        service_index: str = NUGET_SERVICE_INDEX,
    ) -> None:
        self.http_client = http_client
        self.service_index = service_index
        self._base_address: Optional[str] = None
        self._base_address_error: Optional[RegistryUnavailableError] = None
        self._base_address_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_latest_version(
        self,
        package_name: str,
        include_prerelease: bool,
    ) -> Optional[NuGetVersion]:
        """Return the newest eligible version of *package_name*.

        Args:
            package_name: NuGet package id (case-insensitive).
            include_prerelease: Whether pre-release versions are eligible.

        Returns:
            The newest eligible version, or ``None`` when the package does
            not exist on the feed or has no eligible version.

        Raises:
            RegistryUnavailableError: The feed could not be reached or
                returned something unusable.
        """
        versions = await self.get_all_versions(package_name)
        if versions is None:
            logger.info("Package '%s' not found in registry", package_name)
            return None

        latest = select_latest_version(versions, include_prerelease)
        logger.debug(
            "Latest version of %s (prerelease=%s): %s",
            package_name,
            include_prerelease,
            latest,
        )
        return latest

    async def get_all_versions(self, package_name: str) -> Optional[List[NuGetVersion]]:
        """Fetch every published version of *package_name*.

        Returns:
            Parsed versions, or ``None`` if the feed does not know the package.

        Raises:
            RegistryUnavailableError: Transport failure or malformed payload.
        """
        base_address = await self._get_base_address()
        url = base_address + PACKAGE_VERSIONS_PATH.format(
            package=package_name.strip().lower()
        )

        try:
            data = await self.http_client.get_json(url)
        except PackageNotFoundError:
            return None
        except NetworkError as exc:
            raise RegistryUnavailableError(
                f"Failed to fetch versions of {package_name}: {exc.message}",
                package_name=package_name,
                url=url,
                status_code=exc.status_code,
            ) from exc

        raw_versions = data.get("versions")
        if not isinstance(raw_versions, list):
            raise RegistryUnavailableError(
                f"Malformed version listing for {package_name}",
                package_name=package_name,
                url=url,
            )

        return parse_versions(raw_versions)

    # ------------------------------------------------------------------
    # Service index (private)
    # ------------------------------------------------------------------

    async def _get_base_address(self) -> str:
        """Resolve the feed's package base address once, then reuse it.

        A failed lookup is remembered too: every later query of the run
        fails with the same error instead of fetching the index again.
        """
        if self._base_address is not None:
            return self._base_address

        async with self._base_address_lock:
            if self._base_address_error is not None:
                raise self._base_address_error
            if self._base_address is None:
                try:
                    self._base_address = await self._fetch_base_address()
                except RegistryUnavailableError as exc:
                    self._base_address_error = exc
                    raise
            return self._base_address

    async def _fetch_base_address(self) -> str:
        try:
            index = await self.http_client.get_json(self.service_index)
        except NetworkError as exc:
            raise RegistryUnavailableError(
                f"Cannot load service index: {exc.message}",
                url=self.service_index,
                status_code=exc.status_code,
            ) from exc

        address = _find_resource(index, PACKAGE_BASE_ADDRESS_TYPE)
        if address is None:
            raise RegistryUnavailableError(
                f"Service index does not expose {PACKAGE_BASE_ADDRESS_TYPE}",
                url=self.service_index,
            )

        if not address.endswith("/"):
            address += "/"
        logger.debug("Using package base address %s", address)
        return address


def _find_resource(index: Dict[str, Any], resource_type: str) -> Optional[str]:
    resources = index.get("resources")
    if not isinstance(resources, list):
        return None

    for resource in resources:
        if not isinstance(resource, dict):
            continue
        if resource.get("@type") == resource_type:
            address = resource.get("@id")
            if isinstance(address, str) and address:
                return address
    return None
