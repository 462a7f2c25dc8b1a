"""Shared test fixtures for quickrest.

Provides a recording request function, the endpoint list used across the
suite, and a ready-built client.  These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from quickrest import Client, quickrest
from quickrest.models import Result

ROOT = "https://api.example.com"

ENDPOINTS = [
    "users",
    "users/posts",
    "users/posts/comments",
    "posts",
    "posts/comments",
    "comments",
]


class RecordingRequest:
    """Request function that records calls and answers through the callback.

    Attributes:
        calls: One dict per call with the arguments received.
        result: Result handed to the callback.
        error: When set, reported instead of *result*.
    """

    def __init__(self, result: Any = None, error: Any = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.result = result if result is not None else Result(status=200, model={"ok": True})
        self.error = error

    def __call__(self, url, method, properties, query, headers, callback=None):
        self.calls.append(
            {
                "url": url,
                "method": method,
                "properties": properties,
                "query": query,
                "headers": headers,
            }
        )
        if callback is not None:
            if self.error is not None:
                callback(self.error, None)
            else:
                callback(None, self.result)
        return None

    @property
    def last(self) -> dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def root() -> str:
    return ROOT


@pytest.fixture
def endpoints() -> list[str]:
    return list(ENDPOINTS)


@pytest.fixture
def spy() -> MagicMock:
    """A request function that never completes; only records its arguments."""
    return MagicMock(return_value=None)


@pytest.fixture
def recorder() -> RecordingRequest:
    return RecordingRequest()


@pytest.fixture
def api(spy: MagicMock) -> Client:
    """Client over :data:`ENDPOINTS` whose request function is *spy*."""
    return quickrest(root=ROOT, endpoints=ENDPOINTS, request=spy)


@pytest.fixture
def recorded_api(recorder: RecordingRequest) -> Client:
    """Client over :data:`ENDPOINTS` whose request function is *recorder*."""
    return quickrest(root=ROOT, endpoints=ENDPOINTS, request=recorder)
