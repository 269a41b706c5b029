"""
Boolean switches read straight from the process environment.

Not tied to any LayeredStore; works without a single backend registered.
"""

from __future__ import annotations
import os
from typing import Mapping, Optional

from .coercion import parse_bool
from .errors import NotFoundError


def get_env_bool(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """
    Read ``name`` from ``environ`` (default: os.environ) as a boolean.

    Raises:
        NotFoundError: the variable is not set
        ConfigTypeError: the value is neither a boolean token nor an integer
    """
    env = os.environ if environ is None else environ
    value = env.get(name)
    if value is None:
        raise NotFoundError(f"Environment variable {name} is not set", name=name)
    return parse_bool(value, name)
