"""Asynchronous httpx request function -- mirrors :class:`~quickrest.transport.sync_transport.HttpxTransport`.

Calling an :class:`AsyncHttpxTransport` returns a coroutine.  quickrest
schedules it on the running event loop, so clients using it must make their
verb calls from inside that loop::

    async with AsyncHttpxTransport() as transport:
        api = quickrest(root=..., endpoints=[...], request=transport)
        result = await api.users(9000).get()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx

from quickrest.exceptions import ConnectionError_
from quickrest.models import Result
from quickrest.transport.response import request_kwargs, response_error, to_result

logger = logging.getLogger(__name__)


class AsyncHttpxTransport:
    """Request function backed by :class:`httpx.AsyncClient`.

    Args:
        client: An existing async client.  When ``None`` one is created
            lazily and closed by :meth:`aclose`.
        timeout: Request timeout in seconds for a created client.
        verify_ssl: Verify TLS certificates for a created client.
        max_retries: Retry attempts on 5xx responses and network errors.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        max_retries: int = 0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._max_retries = max_retries

    async def __aenter__(self) -> AsyncHttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __call__(
        self,
        url: str,
        method: str,
        properties: Optional[dict[str, Any]] = None,
        query: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        callback: Optional[Callable[..., Any]] = None,
    ) -> Optional[Result]:
        """Send one request; same reporting rules as the synchronous transport."""
        result: Optional[Result] = None
        try:
            response = await self._execute_with_retry(
                request_kwargs(url, method, properties, query, headers)
            )
            result = to_result(response)
            error = response_error(result)
            if error is not None:
                raise error
        except Exception as exc:
            if callback is None:
                raise
            callback(exc, result)
            return None

        if callback is not None:
            callback(None, result)
        return result

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify_ssl,
                follow_redirects=True,
            )
        return self._client

    async def _execute_with_retry(self, kwargs: dict[str, Any]) -> httpx.Response:
        client = self._ensure_client()
        max_retries = self._max_retries

        for attempt in range(max_retries + 1):
            try:
                response = await client.request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Connection error: %s, retrying in %ss (attempt %d/%d)",
                        exc, delay, attempt + 1, max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                logger.debug(
                    "Server error %d, retrying in %ss (attempt %d/%d)",
                    response.status_code, delay, attempt + 1, max_retries,
                )
                await asyncio.sleep(delay)
                continue

            return response

        raise AssertionError("unreachable")  # pragma: no cover
