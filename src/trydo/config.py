"""Configuration schema, resolution and ambient scope.

Resolution follows ``defaults < environment < overrides``. Environment
variables use the ``TRYDO_`` prefix (``TRYDO_CATCH``,
``TRYDO_FORWARD_FIRST_SEND``). Explicit resolution (``resolve_config``,
``config_scope``) first loads a project ``.env`` file once; the default used
outside any scope reads the process environment only, once per process.

The resolved ``Config`` is frozen. ``config_scope`` installs one as the
ambient configuration for the current context (thread- and task-safe)::

    with config_scope(catch=(ValueError, OSError)):
        err, value = trydo(parse, text)
"""

from __future__ import annotations

import builtins
from collections.abc import Iterable
from contextlib import contextmanager
import contextvars
import importlib
import os
from typing import TYPE_CHECKING, Any
import warnings

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trydo.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

ENV_PREFIX = "TRYDO_"


class Config(BaseModel):
    """Frozen runtime configuration for the adapter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    #: Exception types converted into failed outcomes; others propagate.
    catch: tuple[type[BaseException], ...] = Field(
        default=(Exception,), min_length=1
    )
    #: Forward the value given to a sequence's first step instead of dropping it.
    forward_first_send: bool = False

    @field_validator("catch", mode="before")
    @classmethod
    def normalize_catch(cls, v: Any) -> Any:
        """Accept a type, an iterable of types or names, or a comma-separated string."""
        if isinstance(v, type):
            return (v,)
        if isinstance(v, str):
            v = [part for part in (p.strip() for p in v.split(",")) if part]
        if isinstance(v, Iterable):
            return tuple(
                _import_exception_type(item) if isinstance(item, str) else item
                for item in v
            )
        return v  # Let Pydantic raise with a precise error message


def _import_exception_type(name: str) -> type[BaseException]:
    """Resolve ``ValueError`` or ``package.module.Error`` to a class."""
    if "." in name:
        module_name, _, attr = name.rpartition(".")
        try:
            obj = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"cannot import exception type {name!r}") from e
    else:
        obj = getattr(builtins, name, None)
    if not (isinstance(obj, type) and issubclass(obj, BaseException)):
        raise ValueError(f"{name!r} is not an exception type")
    return obj


# --- Loaders ---

_DOTENV_LOADED: bool = False


def _coerce_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import find_dotenv, load_dotenv

    load_dotenv(find_dotenv(usecwd=True))
    _DOTENV_LOADED = True


def load_env() -> dict[str, Any]:
    """Read ``TRYDO_*`` variables that name known fields.

    Booleans are coerced here; everything else is left to the schema.
    """
    out: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        info = Config.model_fields.get(field_name)
        if info is None:
            continue
        out[field_name] = _coerce_bool(value) if info.annotation is bool else value
    return out


# --- Resolution ---


def resolve_config(
    overrides: Mapping[str, Any] | None = None, *, dotenv: bool = True
) -> Config:
    """Resolve configuration from defaults, environment and overrides.

    Args:
        overrides: Values that take precedence over the environment.
        dotenv: Load a project ``.env`` file (once) before reading the
            environment.

    Raises:
        ConfigurationError: If the merged values fail validation.
    """
    if dotenv:
        _load_dotenv_once()
    merged = {**load_env(), **(overrides or {})}
    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "config"
        msg = err.get("msg", "invalid value")
        # Remove "Value error, " prefix if present (Pydantic standard wrapper)
        if msg.startswith("Value error, "):
            msg = msg[13:]
        env_key = f"{ENV_PREFIX}{field.split('.')[0].upper()}"
        raise ConfigurationError(
            f"Configuration validation failed for {field}: {msg}",
            hint=f"Check {env_key} or the override passed in code.",
        ) from e


# --- Ambient scope ---

_AMBIENT: contextvars.ContextVar[Config | None] = contextvars.ContextVar(
    "trydo_ambient_config", default=None
)
_DEFAULT: Config | None = None


@contextmanager
def config_scope(
    cfg_or_overrides: Config | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Generator[Config]:
    """Run a block with ``cfg_or_overrides`` as the ambient configuration.

    Args:
        cfg_or_overrides: A ``Config`` to use directly, or a mapping of
            overrides applied on top of the environment.
        **overrides: Additional overrides, merged with a mapping argument.

    Yields:
        The ``Config`` active in this scope.
    """
    if isinstance(cfg_or_overrides, Config):
        cfg = (
            resolve_config({**cfg_or_overrides.model_dump(), **overrides})
            if overrides
            else cfg_or_overrides
        )
    else:
        cfg = resolve_config({**(cfg_or_overrides or {}), **overrides})

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)


def default_config() -> Config:
    """Return the configuration used outside any scope.

    Resolved from the process environment on first use and cached. No
    ``.env`` file is loaded. An invalid environment value is reported as a
    ``UserWarning`` and the built-in defaults are used instead, so calls made
    through the adapter never raise on account of configuration.
    """
    global _DEFAULT
    if _DEFAULT is None:
        try:
            _DEFAULT = resolve_config(dotenv=False)
        except ConfigurationError as e:
            warnings.warn(
                f"Configuration: {e}; using defaults", UserWarning, stacklevel=3
            )
            _DEFAULT = Config()
    return _DEFAULT


def current_config() -> Config:
    """Return the ambient configuration, or the cached default when unset."""
    cfg = _AMBIENT.get()
    return cfg if cfg is not None else default_config()


__all__ = [
    "ENV_PREFIX",
    "Config",
    "config_scope",
    "current_config",
    "default_config",
    "load_env",
    "resolve_config",
]
