"""
HTTP client utilities for dotnet-outdated.

One :class:`HTTPClient` is shared by every registry query of a run. It
owns the ``httpx.AsyncClient`` connection pool, caps the number of
requests in flight and retries transient failures:

* timeouts, transport errors and 5xx answers are retried with
  exponential backoff, up to ``max_retries`` extra attempts;
* 429 answers wait for ``Retry-After`` and do not consume that budget;
* 404 becomes :class:`PackageNotFoundError` and any other 4xx a plain
  :class:`NetworkError`, neither retried.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Optional, Dict, cast

from dotnet_outdated.utils.logger import get_logger
from dotnet_outdated.__version__ import __version__
from dotnet_outdated.exceptions import NetworkError, PackageNotFoundError
from dotnet_outdated.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_CONCURRENCY,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")

MAX_RATE_LIMIT_RETRIES = 5


class HTTPClient:
    """Asynchronous HTTP client for NuGet feeds.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Extra attempts after a transient failure.
        user_agent: User-Agent header, ``dotnet-outdated/<version>`` by default.
        max_concurrency: Requests allowed in flight at once.

    Example:
        >>> async with HTTPClient(max_concurrency=4) as http:
        ...     index = await http.get_json("https://api.nuget.org/v3/index.json")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: Optional[str] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency
        self.max_rate_limit_retries = MAX_RATE_LIMIT_RETRIES

        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        self._open()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _open(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the connection pool. Safe to call more than once."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = self._open()
        async with self._semaphore:
            return await client.request(method, url, **kwargs)

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        last_exc: Optional[Exception] = None
        rate_limited = 0
        attempt = 0

        while True:
            try:
                response = await self._send(method, url, **kwargs)

                if response.status_code == 429:
                    rate_limited += 1
                    if rate_limited > self.max_rate_limit_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self.max_rate_limit_retries} retries",
                            url=url,
                            status_code=429,
                        )
                    wait = _retry_after_seconds(response)
                    logger.warning("Rate limited by %s, waiting %ds", response.url.host, wait)
                    await asyncio.sleep(wait)
                    continue

                _check_status(response, url)
                return response

            except (httpx.TimeoutException, httpx.TransportError) as exc:
                last_exc = exc
                logger.warning(
                    "%s (%d/%d): %s",
                    "Request timeout" if isinstance(exc, httpx.TimeoutException) else "Network error",
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            except httpx.HTTPStatusError as exc:
                last_exc = exc
                logger.warning(
                    "HTTP %d (%d/%d): %s",
                    exc.response.status_code,
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            if attempt >= self.max_retries:
                break

            await asyncio.sleep(_backoff(attempt))
            attempt += 1

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempts: {url}",
            url=url,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url`` with retries."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """GET ``url`` and decode the body as a JSON object.

        Raises:
            PackageNotFoundError: The server answered 404.
            NetworkError: The request failed or the body is not a JSON object.
        """
        response = await self.get(url, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)


def _check_status(response: httpx.Response, url: str) -> None:
    """Raise for error statuses; only 5xx escapes as retryable ``HTTPStatusError``."""
    status = response.status_code
    if status < 400:
        return
    if status == 404:
        raise PackageNotFoundError(f"Resource not found: {url}", url=url, status_code=404)
    if status < 500:
        raise NetworkError(
            f"HTTP {status} error for {url}",
            url=url,
            status_code=status,
            response_body=response.text,
        )
    response.raise_for_status()


def _backoff(attempt: int) -> float:
    delay = (2**attempt) + random.uniform(0.0, 0.3)
    logger.debug("Retrying in %.2fs", delay)
    return delay


def _retry_after_seconds(response: httpx.Response) -> int:
    # Retry-After may also be an HTTP date; fall back to one second then
    try:
        return max(0, int(response.headers.get("Retry-After", "1")))
    except ValueError:
        return 1
