"""Synchronous httpx request function with optional retry.

:class:`HttpxTransport` is a ready-made request function for quickrest
clients running in ordinary blocking code::

    with HttpxTransport(timeout=10) as transport:
        api = quickrest(root=..., endpoints=[...], request=transport)
        future = api.users.list({"page": 2})
        result = future.result()

It reports every outcome through the callback quickrest hands it, and
returns the :class:`~quickrest.models.Result` as well so it can be used on
its own.  Non-2xx responses are errors (see
:func:`~quickrest.transport.response.response_error`); network failures
become :class:`~quickrest.exceptions.ConnectionError_`.

Retries are off by default.  With ``max_retries`` > 0, 5xx responses and
network errors are retried with exponential delay (1 s, 2 s, 4 s, ...).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import httpx

from quickrest.exceptions import ConnectionError_
from quickrest.models import Result
from quickrest.transport.response import request_kwargs, response_error, to_result

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Request function backed by :class:`httpx.Client`.

    Args:
        client: An existing client to use.  When ``None`` one is created
            lazily and closed by :meth:`close`.
        timeout: Request timeout in seconds for a created client.
        verify_ssl: Verify TLS certificates for a created client.
        max_retries: Retry attempts on 5xx responses and network errors.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        max_retries: int = 0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._max_retries = max_retries

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Request function
    # ------------------------------------------------------------------ #

    def __call__(
        self,
        url: str,
        method: str,
        properties: Optional[dict[str, Any]] = None,
        query: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        callback: Optional[Callable[..., Any]] = None,
    ) -> Optional[Result]:
        """Send one request.

        With *callback*, the outcome is reported as ``callback(None, result)``
        or ``callback(error, result_or_none)`` and the result (or ``None`` on
        failure) is returned.  Without one, errors are raised.
        """
        result: Optional[Result] = None
        try:
            response = self._execute_with_retry(
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

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout,
                verify=self._verify_ssl,
                follow_redirects=True,
            )
        return self._client

    def _execute_with_retry(self, kwargs: dict[str, Any]) -> httpx.Response:
        """Execute the request, retrying 5xx and network errors with backoff."""
        client = self._ensure_client()
        max_retries = self._max_retries

        for attempt in range(max_retries + 1):
            try:
                response = client.request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Connection error: %s, retrying in %ss (attempt %d/%d)",
                        exc, delay, attempt + 1, max_retries,
                    )
                    time.sleep(delay)
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
                time.sleep(delay)
                continue

            return response

        raise AssertionError("unreachable")  # pragma: no cover
