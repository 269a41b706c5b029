"""
layered_config package
----------------------
Layered configuration store: string key/value pairs from several prioritized
backends (system, global, local, in-memory), with typed accessors for
strings, integers (k/m/g suffixes) and booleans.
"""

from .backends import ConfigBackend, FileBackend, MemoryBackend
from .coercion import parse_bool, parse_integer
from .env import get_env_bool
from .errors import (
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigTypeError,
    InvalidArgumentError,
    NotFoundError,
)
from .store import BackendEntry, LayeredStore

__version__ = "0.1.0"

__all__ = [
    "BackendEntry",
    "ConfigBackend",
    "ConfigError",
    "ConfigIOError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigTypeError",
    "FileBackend",
    "InvalidArgumentError",
    "LayeredStore",
    "MemoryBackend",
    "NotFoundError",
    "get_env_bool",
    "parse_bool",
    "parse_integer",
]
