"""JSON-over-HTTP client used for introspection and value suggestions.

Requests are issued with ``requests`` in a worker thread so the event loop
driving the completion engine is never blocked.
"""

import asyncio
from typing import Any, Mapping, Optional

import requests

from djangoql_completion.errors import FetchError
from djangoql_completion.logger import get_logger

logger = get_logger("http")


class RequestsJsonClient:
    """Fetches JSON documents with a shared ``requests.Session``."""

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        """
        Initialize the client.

        Args:
            timeout: Request timeout in seconds
            session: Optional pre-configured session (auth headers, cookies)
        """
        self.timeout = timeout
        self._session = session or requests.Session()

    def get_json_sync(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        """Blocking GET returning the decoded JSON body.

        ``params`` are encoded into the query string by requests, next to any
        parameters already present in ``url``.
        """
        logger.debug(f"GET {url} params={params}")
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if response.status_code != 200:
            raise FetchError(url, f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(url, f"invalid JSON body: {e}") from e

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        """Non-blocking GET returning the decoded JSON body.

        Raises:
            FetchError: On transport failure, non-200 status or invalid JSON
        """
        return await asyncio.to_thread(self.get_json_sync, url, params)

    def close(self) -> None:
        self._session.close()
