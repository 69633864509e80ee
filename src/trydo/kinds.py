"""Result classification by capability probing."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
import concurrent.futures
from enum import Enum
import inspect


class ResultKind(Enum):
    """Shape of the object returned by an adapted callable."""

    ASYNC_SEQUENCE = "async_sequence"
    SYNC_SEQUENCE = "sync_sequence"
    DEFERRED = "deferred"
    IMMEDIATE = "immediate"


def classify(result: object) -> ResultKind:
    """Return the kind of ``result``; the first matching capability wins.

    Sequences are probed before awaitables: generator-based coroutines are
    both generators and awaitables, and must be driven as sequences.
    Plain iterators and iterables (lists, ``map`` objects, files) cannot
    receive sent values and are treated as immediate values.
    """
    if isinstance(result, AsyncGenerator):
        return ResultKind.ASYNC_SEQUENCE
    if isinstance(result, Generator):
        return ResultKind.SYNC_SEQUENCE
    if inspect.isawaitable(result) or isinstance(result, concurrent.futures.Future):
        return ResultKind.DEFERRED
    return ResultKind.IMMEDIATE


__all__ = ["ResultKind", "classify"]
