"""Executor-based promise factories.

Verbs called without a callback hand an *executor* to the configured promise
factory and return whatever the factory produces.  An executor is a callable
taking ``(resolve, reject)``; it starts the work and eventually calls
exactly one of the two.

Two factories are provided:

* :func:`future_promise` -- a :class:`concurrent.futures.Future`, usable from
  plain synchronous code and from worker threads (``future.result()``).
* :func:`asyncio_promise` -- an :class:`asyncio.Future` bound to the running
  event loop, so the verb's return value can be awaited.

:func:`default_promise` picks the asyncio flavour when called inside a
running loop and falls back to :mod:`concurrent.futures` otherwise.  Any
callable with the same ``factory(executor)`` shape can be passed as the
client's ``promise`` option instead.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from typing import Any, Callable

from quickrest.exceptions import TransportError

Resolve = Callable[[Any], None]
Reject = Callable[[Any], None]
Executor = Callable[[Resolve, Reject], None]


def as_exception(error: Any) -> BaseException:
    """Return *error* itself if it is an exception, else wrap it in :class:`TransportError`."""
    if isinstance(error, BaseException):
        return error
    return TransportError(error)


def future_promise(executor: Executor) -> concurrent.futures.Future:
    """Run *executor* and return a :class:`concurrent.futures.Future` for its outcome.

    Settling an already settled future is ignored, so only the first call to
    ``resolve`` or ``reject`` counts.  An exception raised by the executor
    itself rejects the future.
    """
    future: concurrent.futures.Future = concurrent.futures.Future()

    def resolve(value: Any) -> None:
        try:
            future.set_result(value)
        except concurrent.futures.InvalidStateError:
            pass

    def reject(error: Any) -> None:
        try:
            future.set_exception(as_exception(error))
        except concurrent.futures.InvalidStateError:
            pass

    try:
        executor(resolve, reject)
    except Exception as exc:
        reject(exc)
    return future


def asyncio_promise(executor: Executor) -> asyncio.Future:
    """Run *executor* and return an :class:`asyncio.Future` on the running loop.

    ``resolve`` and ``reject`` may be called from any thread; the future is
    always settled on the loop thread.

    Raises:
        RuntimeError: If no event loop is running in the current thread.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _settle(value: Any, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)

    def resolve(value: Any) -> None:
        loop.call_soon_threadsafe(_settle, value, None)

    def reject(error: Any) -> None:
        loop.call_soon_threadsafe(_settle, None, as_exception(error))

    try:
        executor(resolve, reject)
    except Exception as exc:
        reject(exc)
    return future


def default_promise(executor: Executor) -> Any:
    """Use :func:`asyncio_promise` inside a running loop, :func:`future_promise` elsewhere."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return future_promise(executor)
    return asyncio_promise(executor)
