"""The outcome adapter: call anything, get ``(error, value)`` back.

``invoke`` calls the target once, classifies what it returned and hands
back the matching outcome carrier:

=================  ===========================================
Returned object    Carrier
=================  ===========================================
async generator    ``AsyncOutcomeIterator``
generator          ``OutcomeIterator``
awaitable/future   coroutine resolving to ``Outcome``
anything else      ``Outcome(None, value)``
raised exception   ``Outcome(exc, None)``
=================  ===========================================

The carrier kind is decided once per call. Exceptions outside the configured
``catch`` types (by default anything not derived from ``Exception``)
propagate unchanged.
"""

from __future__ import annotations

import functools
import logging
from types import MethodType
from typing import TYPE_CHECKING, Any, overload

from trydo.config import current_config
from trydo.deferred import settle
from trydo.kinds import ResultKind, classify
from trydo.outcome import Outcome
from trydo.sequences import AsyncOutcomeIterator, OutcomeIterator

if TYPE_CHECKING:
    from collections.abc import (
        AsyncGenerator,
        Awaitable,
        Callable,
        Coroutine,
        Generator,
        Mapping,
        Sequence,
    )

    from trydo.config import Config

log = logging.getLogger(__name__)

type OutcomeCarrier = (
    Outcome[Any, Any]
    | Coroutine[Any, Any, Outcome[Any, Any]]
    | OutcomeIterator
    | AsyncOutcomeIterator
)


def invoke(
    fn: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    receiver: Any = None,
    config: Config | None = None,
) -> OutcomeCarrier:
    """Call ``fn`` and re-shape its result into outcome tuples.

    Args:
        fn: Any callable.
        args: Positional arguments for the call.
        kwargs: Keyword arguments for the call.
        receiver: Object to bind ``fn`` to for a method-style call.
        config: Explicit configuration; defaults to the ambient one.

    Returns:
        An ``Outcome`` for plain values and synchronous failures, a coroutine
        resolving to an ``Outcome`` for awaitables, or an outcome-yielding
        wrapper of the same synchronicity for generators.
    """
    cfg = config if config is not None else current_config()
    name = getattr(fn, "__qualname__", type(fn).__name__)
    try:
        target = fn if receiver is None else MethodType(fn, receiver)
        result = target(*args, **(kwargs or {}))
    except cfg.catch as exc:
        log.debug("Call to %s raised %s", name, type(exc).__name__)
        return Outcome(exc, None)

    kind = classify(result)
    log.debug("Call to %s returned %s", name, kind.value)

    match kind:
        case ResultKind.ASYNC_SEQUENCE:
            return AsyncOutcomeIterator(
                result, catch=cfg.catch, forward_first_send=cfg.forward_first_send
            )
        case ResultKind.SYNC_SEQUENCE:
            return OutcomeIterator(
                result, catch=cfg.catch, forward_first_send=cfg.forward_first_send
            )
        case ResultKind.DEFERRED:
            return settle(result, catch=cfg.catch)
        case _:
            return Outcome(None, result)


# Overloads run from the most complex return shape to the simplest.


@overload
def trydo[**P](
    fn: Callable[P, AsyncGenerator[Any, Any]], /, *args: P.args, **kwargs: P.kwargs
) -> AsyncOutcomeIterator: ...


@overload
def trydo[**P](
    fn: Callable[P, Generator[Any, Any, Any]], /, *args: P.args, **kwargs: P.kwargs
) -> OutcomeIterator: ...


@overload
def trydo[**P, R](
    fn: Callable[P, Awaitable[R]], /, *args: P.args, **kwargs: P.kwargs
) -> Coroutine[Any, Any, Outcome[Any, R]]: ...


@overload
def trydo[**P, R](
    fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs
) -> Outcome[Any, R]: ...


def trydo(fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> OutcomeCarrier:
    """Call ``fn(*args, **kwargs)`` through the adapter.

    Example:
        err, value = trydo(int, "42")
        err, value = await trydo(fetch_user, user_id)
        for err, line in trydo(read_lines, path):
            ...
    """
    return invoke(fn, args, kwargs)


def wrap[**P](fn: Callable[P, Any]) -> Callable[P, OutcomeCarrier]:
    """Decorate ``fn`` so every call returns an outcome carrier.

    Methods work as usual: the instance arrives as the first positional
    argument.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> OutcomeCarrier:
        return invoke(fn, args, kwargs)

    return wrapper


__all__ = ["OutcomeCarrier", "invoke", "trydo", "wrap"]
