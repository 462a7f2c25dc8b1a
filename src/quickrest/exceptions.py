"""Exception hierarchy for quickrest.

All exceptions inherit from :class:`QuickrestError`.  Configuration problems
are raised synchronously while the client is being constructed; everything
that happens during a verb call is delivered through the verb's callback or
its returned promise instead of being raised.

Subclass hierarchy::

    QuickrestError
    +-- ConfigError          bad construction options (fatal)
    +-- TransportError       non-exception error value reported by a transport
    +-- ConnectionError_     network-level failure in a shipped transport
    +-- ResponseError        non-2xx HTTP response
        +-- AuthError        401 / 403
        +-- NotFoundError    404
        +-- ServerError      5xx
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from quickrest.models import Result


class QuickrestError(Exception):
    """Base exception for all quickrest errors."""


class ConfigError(QuickrestError):
    """Raised at construction time for invalid client configuration.

    Missing or blank ``root``, an empty ``endpoints`` list, a missing request
    function, malformed endpoint declarations, conflicting method aliases and
    resource trees deeper than ``max_depth`` all end up here.  The caller has
    to fix the configuration and build a new client.
    """


class TransportError(QuickrestError):
    """Wraps an error value that is not an exception.

    Request functions may report arbitrary error values through their
    callback.  Promises can only be rejected with exceptions, so such values
    are wrapped and kept on :attr:`error`.
    """

    def __init__(self, error: Any):
        super().__init__(f"request failed: {error!r}")
        self.error = error


class ConnectionError_(QuickrestError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """


class ResponseError(QuickrestError):
    """Raised by the shipped transports for a non-2xx response.

    Args:
        message: Human-readable error description.
        result: The decoded :class:`~quickrest.models.Result` of the response.
    """

    def __init__(self, message: str, result: Result | None = None):
        super().__init__(message)
        self.result = result

    @property
    def status(self) -> int | None:
        """HTTP status code of the failed response, if one was received."""
        return self.result.status if self.result is not None else None


class AuthError(ResponseError):
    """Raised when the API returns HTTP 401 or 403."""


class NotFoundError(ResponseError):
    """Raised when the API returns HTTP 404 (resource not found)."""


class ServerError(ResponseError):
    """Raised when the API returns an HTTP 5xx server error."""
