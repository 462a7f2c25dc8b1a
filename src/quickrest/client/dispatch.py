"""Request dispatch: before-each hook, transport call, outcome delivery.

:class:`Dispatcher` is shared by every resource node of a client.  Each verb
call goes through :meth:`Dispatcher.dispatch`, which

1. runs the optional before-each hook and merges its modification over the
   original properties, query and headers,
2. calls the request function with a completion callback,
3. delivers the single outcome either to the caller's callback or, when no
   callback was given, through a promise from the configured factory.

Both the hook and the request function may complete in several ways
(invoking their callback, returning a value, returning an awaitable or a
:class:`concurrent.futures.Future`).  Whichever settles first is
authoritative; every later completion is dropped and logged at debug level,
so the caller always sees exactly one outcome.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from quickrest.exceptions import QuickrestError
from quickrest.models import Modification

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]

# Strong references to transport/hook tasks scheduled on the running loop.
_background_tasks: set[asyncio.Future] = set()


class _Once:
    """Wrap a completion callback so only its first invocation goes through."""

    def __init__(self, callback: Callback, label: str) -> None:
        self._callback = callback
        self._label = label
        self.called = False

    def __call__(self, error: Any = None, value: Any = None) -> None:
        if self.called:
            logger.debug("Ignoring repeated %s completion", self._label)
            return
        self.called = True
        self._callback(error, value)


def _settle_later(outcome: Any, done: Callback) -> None:
    """Feed the eventual result of a future or awaitable into *done*."""
    if isinstance(outcome, concurrent.futures.Future):

        def _from_future(future: concurrent.futures.Future) -> None:
            if future.cancelled():
                done(concurrent.futures.CancelledError(), None)
                return
            error = future.exception()
            done(error, None if error is not None else future.result())

        outcome.add_done_callback(_from_future)
        return

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(outcome):
            outcome.close()
        done(QuickrestError("awaitable outcome needs a running event loop"), None)
        return

    task = asyncio.ensure_future(outcome, loop=loop)

    def _from_task(task: asyncio.Future) -> None:
        _background_tasks.discard(task)
        if task.cancelled():
            done(asyncio.CancelledError(), None)
            return
        error = task.exception()
        done(error, None if error is not None else task.result())

    _background_tasks.add(task)
    task.add_done_callback(_from_task)


def _is_pending(outcome: Any) -> bool:
    return isinstance(outcome, concurrent.futures.Future) or inspect.isawaitable(outcome)


def _as_modification(value: Any) -> Modification:
    if value is None:
        return Modification()
    if isinstance(value, Modification):
        return value
    return Modification.model_validate(value)


class Dispatcher:
    """Runs verb calls against the configured request function.

    Args:
        request: The request function,
            ``request(url, method, properties, query, headers, callback)``.
        promise: Promise factory, ``promise(executor)``.
        before_each: Optional hook,
            ``before_each(properties, query, headers, done)``.
        log: Logger receiving per-request debug lines.
    """

    def __init__(
        self,
        request: Callable[..., Any],
        promise: Callable[..., Any],
        before_each: Optional[Callable[..., Any]] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._request = request
        self._promise = promise
        self._before_each = before_each
        self._log = log or logger

    def dispatch(
        self,
        url: str,
        method: str,
        properties: Mapping[str, Any],
        query: Mapping[str, Any],
        headers: Mapping[str, str],
        callback: Optional[Callback] = None,
    ) -> Any:
        """Perform one verb call.

        Returns:
            ``None`` when *callback* is given, otherwise the promise produced
            by the promise factory.
        """
        properties = dict(properties)
        query = dict(query)
        headers = dict(headers)

        if callback is not None:
            self._run(url, method, properties, query, headers, _Once(callback, "request"))
            return None

        def executor(resolve: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
            def finish(error: Any = None, result: Any = None) -> None:
                if error is not None:
                    reject(error)
                else:
                    resolve(result)

            self._run(url, method, properties, query, headers, _Once(finish, "request"))

        return self._promise(executor)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _run(
        self,
        url: str,
        method: str,
        properties: dict[str, Any],
        query: dict[str, Any],
        headers: dict[str, str],
        finish: _Once,
    ) -> None:
        if self._before_each is None:
            self._send(url, method, properties, query, headers, finish)
            return

        def after_hook(error: Any = None, mod: Any = None) -> None:
            if error is not None:
                self._log.debug("before_each rejected %s %s: %r", method.upper(), url, error)
                finish(error, None)
                return
            try:
                modification = _as_modification(mod)
            except ValidationError as exc:
                finish(exc, None)
                return
            self._send(
                url,
                method,
                {**properties, **(modification.properties or {})},
                {**query, **(modification.query or {})},
                {**headers, **(modification.headers or {})},
                finish,
            )

        done = _Once(after_hook, "before_each")

        try:
            out = self._before_each(dict(properties), dict(query), dict(headers), done)
        except Exception as exc:
            if done.called:
                raise
            done(exc, None)
            return

        # None means the hook completes through ``done``.
        if out is None:
            return
        if _is_pending(out):
            _settle_later(out, done)
        else:
            done(None, out)

    def _send(
        self,
        url: str,
        method: str,
        properties: dict[str, Any],
        query: dict[str, Any],
        headers: dict[str, str],
        finish: _Once,
    ) -> None:
        self._log.debug("%s %s", method.upper(), url)
        try:
            outcome = self._request(url, method, properties, query, headers, finish)
        except Exception as exc:
            # Raised from inside an already delivered callback.
            if finish.called:
                raise
            finish(exc, None)
            return

        if outcome is None:
            return
        if _is_pending(outcome):
            _settle_later(outcome, finish)
        else:
            finish(None, outcome)
