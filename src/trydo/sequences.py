"""Outcome-producing wrappers around generators and async generators.

Both wrappers are two-state machines (running, done) with one transition per
step. Every element of the wrapped sequence becomes ``Outcome(None, element)``.
Completion and failure both finish the wrapper and are delivered as the done
payload rather than as another element:

- the sequence's return value arrives as ``Outcome(None, value)``;
- an exception raised while advancing arrives as ``Outcome(exc, None)`` and
  the underlying sequence is never resumed again.

Values passed to ``send``/``asend``/``step`` are forwarded to the underlying
sequence, so code consuming values at its ``yield`` points behaves the same
wrapped or not.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
import inspect
import logging
from types import AsyncGeneratorType, GeneratorType
from typing import TYPE_CHECKING, Any

from trydo.outcome import Outcome, Step

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

log = logging.getLogger(__name__)

_FINISHED = Step(None, True)


class _OutcomeSequence:
    """State shared by the sync and async wrappers."""

    __slots__ = (
        "_catch",
        "_done",
        "_forward_first_send",
        "_outcome",
        "_source",
        "_started",
    )

    def __init__(
        self,
        source: Any,
        *,
        catch: tuple[type[BaseException], ...] = (Exception,),
        forward_first_send: bool = False,
    ) -> None:
        self._source = source
        self._catch = catch
        self._forward_first_send = forward_first_send
        self._started = False
        self._done = False
        self._outcome: Outcome[Any, Any] | None = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def outcome(self) -> Outcome[Any, Any] | None:
        """Terminal outcome once finished: the return value or the failure."""
        return self._outcome

    def _input(self, value: Any) -> Any:
        # The first resumption has no paused ``yield`` to receive a value.
        first = not self._started
        self._started = True
        if first and not (self._forward_first_send and self._accepts_first()):
            return None
        return value

    def _accepts_first(self) -> bool:
        return True

    def _emit(self, element: Any) -> Step:
        return Step(Outcome(None, element), False)

    def _finish(self, outcome: Outcome[Any, Any]) -> Step:
        self._done = True
        self._outcome = outcome
        self._source = None
        return Step(outcome, True)

    def _fail(self, exc: BaseException) -> Step:
        log.debug("%s finished after %s", type(self).__name__, type(exc).__name__)
        return self._finish(Outcome(exc, None))

    def _abandon(self) -> None:
        # An uncaptured exception escaped; the source is no longer usable.
        self._done = True
        self._source = None

    def __repr__(self) -> str:
        state = "done" if self._done else "running"
        return f"<{type(self).__name__} {state}>"


def _as_exception(
    typ: type[BaseException] | BaseException,
    val: object = None,
    tb: TracebackType | None = None,
) -> BaseException:
    if isinstance(typ, BaseException):
        exc = typ
    elif isinstance(val, BaseException):
        exc = val
    elif val is None:
        exc = typ()
    else:
        exc = typ(val)
    if tb is not None:
        exc = exc.with_traceback(tb)
    return exc


class OutcomeIterator(_OutcomeSequence, Generator):
    """Synchronous wrapper yielding ``Outcome`` tuples.

    Usable as a regular generator (``for``, ``next``, ``send``, ``yield from``)
    or stepped explicitly with ``step()``::

        seq = trydo(read_rows, path)
        for err, row in seq:
            handle(row)
        err, summary = seq.outcome
    """

    __slots__ = ()

    def _accepts_first(self) -> bool:
        # A just-started native generator rejects any value but None.
        source = self._source
        return not (
            isinstance(source, GeneratorType)
            and inspect.getgeneratorstate(source) == inspect.GEN_CREATED
        )

    def step(self, value: Any = None) -> Step:
        """Advance the underlying generator once, sending ``value``."""
        if self._done:
            return _FINISHED
        return self._advance(self._source.send, self._input(value))

    def send(self, value: Any) -> Outcome[Any, Any]:
        if self._done:
            raise StopIteration
        return self._deliver(self.step(value))

    def throw(
        self,
        typ: type[BaseException] | BaseException,
        val: object = None,
        tb: TracebackType | None = None,
    ) -> Outcome[Any, Any]:
        """Raise an exception at the underlying generator's paused ``yield``."""
        exc = _as_exception(typ, val, tb)
        if self._done:
            raise exc
        self._started = True
        return self._deliver(self._advance(self._source.throw, exc))

    def close(self) -> None:
        source, self._source = self._source, None
        self._done = True
        if source is not None:
            source.close()

    def _advance(self, resume: Callable[[Any], Any], arg: Any) -> Step:
        try:
            element = resume(arg)
        except StopIteration as stop:
            return self._finish(Outcome(None, stop.value))
        except self._catch as exc:
            return self._fail(exc)
        except BaseException:
            self._abandon()
            raise
        return self._emit(element)

    @staticmethod
    def _deliver(step: Step) -> Outcome[Any, Any]:
        if step.done:
            raise StopIteration(step.value)
        return step.value  # type: ignore[return-value]


class AsyncOutcomeIterator(_OutcomeSequence, AsyncGenerator):
    """Asynchronous wrapper yielding ``Outcome`` tuples.

    Native async generators cannot return a value, so their terminal outcome
    is ``Outcome(None, None)``. Custom async generators may carry a value as
    ``StopAsyncIteration(value)``; the wrapper reports its own terminal
    outcome the same way::

        seq = trydo(stream_events, url)
        async for err, event in seq:
            handle(event)
        if seq.outcome.failed:
            ...
    """

    __slots__ = ()

    def _accepts_first(self) -> bool:
        source = self._source
        return not (
            isinstance(source, AsyncGeneratorType)
            and inspect.getasyncgenstate(source) == inspect.AGEN_CREATED
        )

    async def step(self, value: Any = None) -> Step:
        """Advance the underlying async generator once, sending ``value``."""
        if self._done:
            return _FINISHED
        return await self._advance(self._source.asend, self._input(value))

    async def asend(self, value: Any) -> Outcome[Any, Any]:
        if self._done:
            raise StopAsyncIteration
        return self._deliver(await self.step(value))

    async def athrow(
        self,
        typ: type[BaseException] | BaseException,
        val: object = None,
        tb: TracebackType | None = None,
    ) -> Outcome[Any, Any]:
        """Raise an exception at the underlying generator's paused ``yield``."""
        exc = _as_exception(typ, val, tb)
        if self._done:
            raise exc
        self._started = True
        return self._deliver(await self._advance(self._source.athrow, exc))

    async def aclose(self) -> None:
        source, self._source = self._source, None
        self._done = True
        if source is not None:
            await source.aclose()

    async def _advance(
        self, resume: Callable[[Any], Awaitable[Any]], arg: Any
    ) -> Step:
        try:
            element = await resume(arg)
        except StopAsyncIteration as stop:
            return self._finish(Outcome(None, stop.args[0] if stop.args else None))
        except self._catch as exc:
            return self._fail(exc)
        except BaseException:
            self._abandon()
            raise
        return self._emit(element)

    @staticmethod
    def _deliver(step: Step) -> Outcome[Any, Any]:
        if step.done:
            raise StopAsyncIteration(step.value)
        return step.value  # type: ignore[return-value]


__all__ = ["AsyncOutcomeIterator", "OutcomeIterator"]
