"""Map :class:`httpx.Response` objects to quickrest results and errors.

Shared by :class:`~quickrest.transport.sync_transport.HttpxTransport` and
:class:`~quickrest.transport.async_transport.AsyncHttpxTransport`.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from quickrest.exceptions import AuthError, NotFoundError, ResponseError, ServerError
from quickrest.models import Result

# Methods whose properties travel as a JSON body.  The rest send none.
BODY_METHODS = frozenset({"post", "put", "patch"})


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first.  If that fails (e.g. the
    response is HTML or plain text), returns the raw text.  Returns
    ``None`` for responses with no content.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text


def to_result(response: httpx.Response) -> Result:
    """Wrap *response* into a :class:`~quickrest.models.Result`."""
    return Result(status=response.status_code, model=extract_response_data(response))


def response_error(result: Result) -> Optional[ResponseError]:
    """Return the typed error for a non-2xx *result*, or ``None`` on success."""
    status = result.status
    if 200 <= status < 300:
        return None

    detail = result.model
    if isinstance(detail, dict):
        msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
    elif detail is None:
        msg = ""
    else:
        msg = str(detail)[:200]

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    if status in (401, 403):
        return AuthError(full_msg, result)
    if status == 404:
        return NotFoundError(full_msg, result)
    if status >= 500:
        return ServerError(full_msg, result)
    return ResponseError(full_msg, result)


def request_kwargs(
    url: str,
    method: str,
    properties: Optional[dict[str, Any]],
    query: Optional[dict[str, Any]],
    headers: Optional[dict[str, str]],
) -> dict[str, Any]:
    """Build the keyword arguments for ``httpx.Client.request``."""
    kwargs: dict[str, Any] = {
        "method": method.upper(),
        "url": url,
        "headers": dict(headers or {}),
        "params": dict(query or {}),
    }
    if method.lower() in BODY_METHODS:
        kwargs["json"] = dict(properties or {})
    return kwargs
