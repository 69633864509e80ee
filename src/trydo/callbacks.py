"""Adapter for legacy completion-callback APIs.

Some APIs report completion by calling a function passed as their last
argument, ``callback(error, *values)``. ``from_callback`` appends such a
callback and awaits the first completion as an ``Outcome``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from types import MethodType
from typing import TYPE_CHECKING, Any

from trydo.config import current_config
from trydo.outcome import Outcome

if TYPE_CHECKING:
    from collections.abc import Callable

    from trydo.config import Config

log = logging.getLogger(__name__)


def callback_outcome(*results: Any) -> Outcome[Any, Any]:
    """Convert the arguments of a completion callback into an ``Outcome``.

    Rules, in order:

    1. A single argument that is neither ``None`` nor an exception is the
       result itself. Some APIs report their value as the only argument.
    2. A truthy exception as the first argument is the failure.
    3. Otherwise the first argument is dropped. No remaining values gives
       ``Outcome(None, None)``, one gives that value, several give a tuple.
    """
    if len(results) == 1 and results[0] is not None and not _is_error(results[0]):
        return Outcome(None, results[0])

    first, values = (results[0], results[1:]) if results else (None, ())
    if first and _is_error(first):
        return Outcome(first, None)
    if not values:
        return Outcome(None, None)
    if len(values) == 1:
        return Outcome(None, values[0])
    return Outcome(None, tuple(values))


def _is_error(value: object) -> bool:
    return isinstance(value, BaseException)


async def from_callback(
    fn: Callable[..., Any],
    /,
    *args: Any,
    receiver: Any = None,
    config: Config | None = None,
) -> Outcome[Any, Any]:
    """Call ``fn(*args, callback)`` and await the callback as an ``Outcome``.

    The callback may run on any thread; completion is handed to the awaiting
    event loop. Only the first completion counts. If ``fn`` raises before
    completing, the exception is the outcome's error; a raise after the
    callback has fired is ignored.

    Args:
        fn: Function following the callback-last convention.
        *args: Arguments passed before the appended callback.
        receiver: Object to bind ``fn`` to for a method-style call.
        config: Explicit configuration; defaults to the ambient one.

    Example:
        err, data = await from_callback(legacy_client.fetch, "users/1")
    """
    cfg = config if config is not None else current_config()
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Outcome[Any, Any]] = loop.create_future()

    # Claimed by the first completion, on whichever thread it happens.
    claim = threading.Lock()

    def _settle(outcome: Outcome[Any, Any]) -> None:
        if not future.done():
            future.set_result(outcome)

    def callback(*results: Any) -> None:
        if not claim.acquire(blocking=False):
            log.debug("Ignoring repeated completion of %s", name)
            return
        loop.call_soon_threadsafe(_settle, callback_outcome(*results))

    name = getattr(fn, "__qualname__", type(fn).__name__)
    try:
        target = fn if receiver is None else MethodType(fn, receiver)
        target(*args, callback)
    except cfg.catch as exc:
        if claim.acquire(blocking=False):
            log.debug("Call to %s raised %s", name, type(exc).__name__)
            return Outcome(exc, None)
        log.debug(
            "Ignoring %s raised by %s after completion", type(exc).__name__, name
        )

    return await future


__all__ = ["callback_outcome", "from_callback"]
