"""Tests for the asynchronous httpx transport."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from quickrest import quickrest
from quickrest.exceptions import ConnectionError_, ServerError
from quickrest.transport import AsyncHttpxTransport

ROOT = "https://api.example.com"


def _transport(handler, **kwargs) -> AsyncHttpxTransport:
    return AsyncHttpxTransport(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)), **kwargs
    )


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"method": request.method, "url": str(request.url)})


class TestAsyncTransport:
    def test_returns_result(self) -> None:
        result = asyncio.run(_transport(_ok)(f"{ROOT}/users", "get", {}, {"q": "a"}, {}))
        assert result.status == 200
        assert result.model == {"method": "GET", "url": f"{ROOT}/users?q=a"}

    def test_callback(self) -> None:
        callback = MagicMock()
        result = asyncio.run(_transport(_ok)(f"{ROOT}/users", "get", {}, {}, {}, callback))
        callback.assert_called_once_with(None, result)

    def test_error_raised_without_callback(self) -> None:
        transport = _transport(lambda request: httpx.Response(500))
        with pytest.raises(ServerError):
            asyncio.run(transport(f"{ROOT}/users", "get", {}, {}, {}))

    def test_context_manager_closes_owned_client(self) -> None:
        async def main() -> AsyncHttpxTransport:
            async with AsyncHttpxTransport() as transport:
                assert transport._client is not None
            return transport

        assert asyncio.run(main())._client is None

    @patch("quickrest.transport.async_transport.asyncio.sleep", new_callable=AsyncMock)
    def test_retries_connection_errors(self, sleep: AsyncMock) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        transport = _transport(handler, max_retries=2)
        with pytest.raises(ConnectionError_, match="after 3 attempts"):
            asyncio.run(transport(f"{ROOT}/users", "get", {}, {}, {}))
        assert sleep.await_count == 2


class TestWithClient:
    def test_awaitable_verbs(self) -> None:
        async def main():
            transport = _transport(_ok)
            api = quickrest(root=ROOT, endpoints=["users/posts"], request=transport)
            try:
                return await asyncio.gather(
                    api.users(1).posts.list(), api.users(2).posts(5).delete()
                )
            finally:
                await transport.aclose()

        listed, deleted = asyncio.run(main())
        assert listed.model == {"method": "GET", "url": f"{ROOT}/users/1/posts"}
        assert deleted.model == {"method": "DELETE", "url": f"{ROOT}/users/2/posts/5"}

    def test_error_rejects(self) -> None:
        async def main():
            transport = _transport(lambda request: httpx.Response(503))
            api = quickrest(root=ROOT, endpoints=["users"], request=transport)
            await api.users.list()

        with pytest.raises(ServerError, match="HTTP 503"):
            asyncio.run(main())
