"""trydo: call anything, get ``(error, value)`` back.

Public API:
    - trydo(): Call a function through the outcome adapter
    - invoke(): Explicit form with receiver and configuration
    - wrap(): Decorator form of the adapter
    - from_callback(): Await a callback-last API as an outcome
    - Outcome: The ``(error, value)`` tuple
    - config_scope(): Ambient configuration for a block
"""

from __future__ import annotations

import logging

from trydo.adapter import OutcomeCarrier, invoke, trydo, wrap
from trydo.callbacks import callback_outcome, from_callback
from trydo.config import (
    Config,
    config_scope,
    current_config,
    default_config,
    resolve_config,
)
from trydo.deferred import settle
from trydo.errors import ConfigurationError, TrydoError
from trydo.kinds import ResultKind, classify
from trydo.outcome import Outcome, Step
from trydo.sequences import AsyncOutcomeIterator, OutcomeIterator

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("trydo")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("trydo").addHandler(logging.NullHandler())

__all__ = [
    "AsyncOutcomeIterator",
    "Config",
    "ConfigurationError",
    "Outcome",
    "OutcomeCarrier",
    "OutcomeIterator",
    "ResultKind",
    "Step",
    "TrydoError",
    "callback_outcome",
    "classify",
    "config_scope",
    "current_config",
    "default_config",
    "from_callback",
    "invoke",
    "resolve_config",
    "settle",
    "trydo",
    "wrap",
]
