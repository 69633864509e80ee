"""Exception hierarchy for trydo.

Captured user exceptions are never wrapped in these types; they travel
verbatim inside an ``Outcome``. The classes below only describe failures of
trydo itself, such as an invalid configuration.
"""

from __future__ import annotations


class TrydoError(Exception):
    """Base exception for all trydo errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(TrydoError):
    """Configuration validation or resolution failed."""
