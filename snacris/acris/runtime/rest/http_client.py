"""HTTP client helper."""

from __future__ import annotations

from typing import Any

import aiohttp
from yarl import URL

from ...config import DEFAULT_TIMEOUT, get_app_token


class HTTPClient:
    """Async HTTP client wrapper for the open-data API.

    Every request carries `Content-Type: application/json` and, when a
    token is configured, the `X-App-Token` header.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, app_token: str | None = None) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.app_token = app_token if app_token is not None else get_app_token()
        self._session: aiohttp.ClientSession | None = None

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.app_token:
            headers["X-App-Token"] = self.app_token
        return headers

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def get(self, url: str) -> Any:
        """GET a fully rendered URL and decode the JSON body.

        The URL is sent as-is; query parameters are already encoded.

        Raises:
            aiohttp.ClientResponseError: On a non-2xx status
        """
        async with self.session.get(URL(url, encoded=True)) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
