"""
Shared aiohttp session handling for the remote storage adapters.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from product_ingest.utils.exceptions import StorageError
from product_ingest.utils.logger import get_logger

logger = get_logger(__name__)


class AiohttpAdapter:
    """
    Base class owning one lazily created aiohttp.ClientSession.

    Every request gets the configured total timeout and, when set, a
    bearer token. Transport errors and non-2xx responses surface as
    StorageError.
    """

    def __init__(
        self,
        auth_token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.auth_token = auth_token
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = dict(extra or {})
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def _request_json(
        self,
        method: str,
        url: str,
        action: str,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """Send a request and decode the JSON body.

        Raises:
            StorageError: On timeout, connection failure or HTTP status >= 400
        """
        session = self._get_session()
        try:
            async with session.request(method, url, timeout=self.timeout, **kwargs) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise StorageError(
                        f"{action} failed: HTTP {response.status}",
                        status_code=response.status,
                        context={"url": url, "body": body[:500]},
                    )
                if response.content_type == "application/json":
                    return await response.json()
                return {}
        except StorageError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise StorageError(f"{action} failed: {e!r}", context={"url": url}) from e

    async def close(self) -> None:
        """Close the HTTP session if this adapter created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug(f"{self.__class__.__name__} session closed")
