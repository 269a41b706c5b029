"""
Backend ohne Persistierung: die Werte leben nur in einem Dict.
"""

from __future__ import annotations
from typing import Dict, Mapping, Optional

from .base import ConfigBackend, T, Visitor
from ..errors import InvalidArgumentError, NotFoundError
from ..logging_setup import get_logger

log = get_logger("layered_config.backend.memory")


class MemoryBackend(ConfigBackend):
    """Dict-basiertes Backend (Tests, In-Process Overlays). open() ist ein No-Op."""

    def __init__(self, values: Optional[Mapping[str, Optional[str]]] = None):
        super().__init__()
        self._values: Optional[Dict[str, Optional[str]]] = dict(values or {})

    def __repr__(self) -> str:
        count = len(self._values) if self._values is not None else 0
        return f"{type(self).__name__}(keys={count})"

    def _loaded(self) -> Dict[str, Optional[str]]:
        if self._values is None:
            raise InvalidArgumentError(f"{self!r} has not been opened")
        return self._values

    def open(self) -> None:
        log.debug(f"Opened {self!r}")

    def get(self, name: str) -> Optional[str]:
        values = self._loaded()
        if name not in values:
            raise NotFoundError(f"Variable '{name}' not found", name=name)
        return values[name]

    def set(self, name: str, value: Optional[str]) -> None:
        self._loaded()[name] = value

    def foreach(self, callback: Visitor[T], payload: T = None) -> int:
        # Kopie der Schlüssel: callback darf das Backend verändern
        for name in list(self._loaded()):
            ret = callback(name, payload)
            if ret:
                return ret
        return 0

    def free(self) -> None:
        self._values = None
        super().free()
