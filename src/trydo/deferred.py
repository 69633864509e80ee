"""Conversion of awaitables into outcome tuples."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import TYPE_CHECKING, Any

from trydo.outcome import Outcome

if TYPE_CHECKING:
    from collections.abc import Awaitable

log = logging.getLogger(__name__)


async def settle[T](
    deferred: Awaitable[T] | concurrent.futures.Future[T],
    *,
    catch: tuple[type[BaseException], ...] = (Exception,),
) -> Outcome[Any, T]:
    """Await ``deferred`` and report how it settled.

    Resolves to ``Outcome(None, value)`` or ``Outcome(exc, None)``; captured
    exceptions are never raised. Thread-pool futures are bridged onto the
    running loop first.

    Args:
        deferred: A coroutine, task, future or any other awaitable.
        catch: Exception types converted into failed outcomes. Anything else,
            ``asyncio.CancelledError`` included by default, propagates.
    """
    if isinstance(deferred, concurrent.futures.Future):
        deferred = asyncio.wrap_future(deferred)
    try:
        value = await deferred
    except catch as exc:
        log.debug("Deferred value failed with %s", type(exc).__name__)
        return Outcome(exc, None)
    return Outcome(None, value)


__all__ = ["settle"]
