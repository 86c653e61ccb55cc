"""Contest vote-count API client.

This module provides the ContestClient class which handles:
- A single GET of the contest vote-count endpoint per invocation
- An explicit request timeout
- Mapping transport, status and decoding failures onto typed errors

There are no retries; the scheduler that launches the process re-runs it
on the next tick.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from votetracker import __version__

logger = logging.getLogger(__name__)

# Default HTTP timeout in seconds
DEFAULT_TIMEOUT = 30.0


class ContestError(Exception):
    """Base class for failures fetching or decoding a snapshot."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        """Initialize contest error.

        Args:
            message: Error description.
            url: Endpoint that was queried.
        """
        super().__init__(message)
        self.url = url


class ContestUnavailableError(ContestError):
    """Raised when the endpoint cannot be reached (network error, timeout)."""


class ContestAPIError(ContestError):
    """Raised when the endpoint answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code


class SnapshotParseError(ContestError):
    """Raised when a response body is not a valid vote-count snapshot."""


class ContestClient:
    """Async client for the contest vote-count endpoint.

    The client supports both context manager and standalone usage. An
    ``httpx.AsyncClient`` may be injected (e.g. one built on
    ``httpx.MockTransport`` in tests); an injected client is not closed by
    this class.

    Example:
        >>> async with ContestClient(url) as client:
        ...     payload = await client.fetch_vote_counts()
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = f"votetracker/{__version__}",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize contest client.

        Args:
            url: Vote-count endpoint URL.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header value.
            client: Optional pre-built httpx client.
        """
        self._url = url
        self._timeout = timeout
        self._user_agent = user_agent
        self._client = client
        self._owns_client = client is None

    @property
    def url(self) -> str:
        """Get the endpoint URL."""
        return self._url

    @property
    def headers(self) -> dict[str, str]:
        """Get default request headers."""
        return {
            "Accept": "application/json",
            "User-Agent": self._user_agent,
        }

    async def __aenter__(self) -> ContestClient:
        """Enter async context."""
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=self._timeout,
            )
            self._owns_client = True
        return self._client

    async def fetch_vote_counts(self) -> dict[str, Any]:
        """Fetch the current vote counts.

        Returns:
            Decoded JSON object from the endpoint.

        Raises:
            ContestUnavailableError: On network errors and timeouts.
            ContestAPIError: On a non-2xx response.
            SnapshotParseError: If the body is not a JSON object.
        """
        client = self._ensure_client()
        logger.debug("Fetching vote counts from %s", self._url)

        try:
            response = await client.get(self._url, headers=self.headers)
        except httpx.TimeoutException as e:
            msg = f"Timed out after {self._timeout:g}s fetching vote counts"
            raise ContestUnavailableError(msg, url=self._url) from e
        except httpx.HTTPError as e:
            msg = f"Cannot reach contest endpoint: {e}"
            raise ContestUnavailableError(msg, url=self._url) from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        """Check the status and decode the body.

        Args:
            response: HTTP response.

        Returns:
            Parsed JSON object.
        """
        if not response.is_success:
            raise ContestAPIError(
                f"HTTP {response.status_code}",
                url=self._url,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            msg = f"Response is not valid JSON: {e}"
            raise SnapshotParseError(msg, url=self._url) from e

        if not isinstance(body, dict):
            msg = f"Expected a JSON object, got {type(body).__name__}"
            raise SnapshotParseError(msg, url=self._url)

        return body
