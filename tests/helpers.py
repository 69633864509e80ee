"""Sample callables shared by the test suite."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Generator
from typing import Any


class Boom(Exception):
    """Marker exception raised by the sample callables."""


EMPTY = Boom("the string must not be empty")


def check(text: str) -> str:
    if not text:
        raise EMPTY
    return text


async def check_async(text: str) -> str:
    await asyncio.sleep(0)
    if not text:
        raise EMPTY
    return text


def chars(text: str):
    if not text:
        raise EMPTY
    for c in text:
        yield c
    return "OK"


async def chars_async(text: str):
    if not text:
        raise EMPTY
    for c in text:
        await asyncio.sleep(0)
        yield c


def counting(text: str):
    """Add every sent value; return the total as a string."""
    count = 0
    for c in text:
        count += yield c
    return str(count)


async def counting_async(text: str, totals: list[int]):
    """Async twin of ``counting``; async generators cannot return, so append."""
    count = 0
    for c in text:
        count += yield c
    totals.append(count)


class Resumable(Generator):
    """Generator-like source that raises at ``fail_index`` but stays resumable.

    Each resumption produces the next value; the one at ``fail_index`` is
    replaced by a ``Boom``. ``resumptions`` counts how often it was advanced.
    """

    def __init__(self, values: list[Any], fail_index: int, ret: Any = None) -> None:
        self.values = values
        self.fail_index = fail_index
        self.ret = ret
        self.resumptions = 0
        self.received: list[Any] = []

    def send(self, value: Any) -> Any:
        i = self.resumptions
        self.resumptions += 1
        self.received.append(value)
        if i == self.fail_index:
            raise Boom(f"failed at {i}")
        if i >= len(self.values):
            raise StopIteration(self.ret)
        return self.values[i]

    def throw(self, typ: Any, val: Any = None, tb: Any = None) -> Any:
        raise typ if val is None else val


class AsyncResumable(AsyncGenerator):
    """Async twin of ``Resumable``; the return value rides on StopAsyncIteration."""

    def __init__(self, values: list[Any], fail_index: int, ret: Any = None) -> None:
        self.sync = Resumable(values, fail_index, ret)

    @property
    def resumptions(self) -> int:
        return self.sync.resumptions

    async def asend(self, value: Any) -> Any:
        await asyncio.sleep(0)
        try:
            return self.sync.send(value)
        except StopIteration as stop:
            raise StopAsyncIteration(stop.value) from None

    async def athrow(self, typ: Any, val: Any = None, tb: Any = None) -> Any:
        raise typ if val is None else val


def drain(seq: Any) -> tuple[list[Any], Any]:
    """Step a sync wrapper to completion; return (outcomes, terminal outcome)."""
    outcomes = []
    while True:
        step = seq.step()
        if step.done:
            return outcomes, step.value
        outcomes.append(step.value)


async def adrain(seq: Any) -> tuple[list[Any], Any]:
    """Async twin of ``drain``."""
    outcomes = []
    while True:
        step = await seq.step()
        if step.done:
            return outcomes, step.value
        outcomes.append(step.value)
