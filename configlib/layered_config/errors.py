"""
Error types raised by the layered configuration store.

Allocation failures are not wrapped: they surface as the builtin MemoryError.
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Union


class ConfigError(Exception):
    """Base class for every configuration failure."""

    def __init__(self, message: str, *, name: Optional[str] = None,
                 path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.name = name
        self.path = Path(path) if path is not None else None


class InvalidArgumentError(ConfigError, ValueError):
    """Operation not possible with the given arguments (e.g. no backends registered)."""


class NotFoundError(ConfigError, LookupError):
    """Variable absent from the consulted backend, or environment variable unset."""


class ConfigIOError(ConfigError):
    """A backend could not be created or its file could not be read/written."""


class ConfigParseError(ConfigError):
    """A backend's persisted content is not understood."""


class ConfigTypeError(ConfigError, TypeError):
    """A raw string value cannot be coerced to the requested type."""


class ConfigNotFoundError(ConfigError):
    """The location of a configuration scope could not be resolved."""
