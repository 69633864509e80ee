"""Outcome tuple and step record.

An ``Outcome`` is the ``(error, value)`` pair every adapted call produces. It
is a plain ``NamedTuple`` so it destructures like any two-element tuple::

    err, value = trydo(parse, text)
    if err is not None:
        ...
"""

from __future__ import annotations

from typing import Any, Generic, NamedTuple, NoReturn, TypeVar

E = TypeVar("E")
V = TypeVar("V")


class Outcome(NamedTuple, Generic[E, V]):
    """Result of an adapted call: exactly one side is meaningful.

    On success ``error`` is ``None``; on failure ``value`` is ``None``.
    """

    error: E | None = None
    value: V | None = None

    @classmethod
    def success(cls, value: V | None = None) -> Outcome[Any, V]:
        return cls(None, value)

    @classmethod
    def failure(cls, error: E) -> Outcome[E, Any]:
        return cls(error, None)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> V | None:
        """Return the value, or re-raise the captured exception.

        Non-exception errors (possible only with hand-built outcomes) are
        raised inside a ``RuntimeError``.
        """
        if self.error is None:
            return self.value
        _reraise(self.error)


def _reraise(error: object) -> NoReturn:
    if isinstance(error, BaseException):
        raise error
    raise RuntimeError(f"Outcome carries a non-exception error: {error!r}")


class Step(NamedTuple):
    """One transition of a sequence wrapper.

    ``value`` holds the outcome produced by the step. It is ``None`` only for
    steps requested after the wrapper has already finished.
    """

    value: Outcome[Any, Any] | None
    done: bool


__all__ = ["Outcome", "Step"]
