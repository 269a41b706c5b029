"""
Schnittstelle für Konfigurations-Backends.

Ein Backend ist genau eine Quelle von Schlüssel/Wert-Paaren (eine Datei,
ein Dict im Speicher, ...). Der LayeredStore spricht Backends nur über
diese Methoden an.
"""

from __future__ import annotations
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

from ..errors import InvalidArgumentError

if TYPE_CHECKING:
    from ..store import LayeredStore

T = TypeVar("T")

# callback(name, payload) -> 0 to continue, anything else stops the iteration
Visitor = Callable[[str, T], int]


class ConfigBackend(ABC):
    """
    Basisklasse aller Backends.

    Lebenszyklus:
        backend = SomeBackend(...)
        store.add_backend(backend, priority)   # Store übernimmt Ownership
        backend.open()
        ...
        store.free()                           # ruft backend.free()
    """

    def __init__(self) -> None:
        self._owner: Optional[weakref.ReferenceType] = None

    @property
    def owner(self) -> Optional["LayeredStore"]:
        """Der Store, bei dem das Backend registriert ist (schwache Referenz)."""
        return self._owner() if self._owner is not None else None

    def bind(self, store: "LayeredStore") -> None:
        """Wird von LayeredStore.add_backend aufgerufen."""
        self.check_unbound(store)
        self._owner = weakref.ref(store)

    def check_unbound(self, store: "LayeredStore") -> None:
        current = self.owner
        if current is store:
            raise InvalidArgumentError(f"{self!r} is already registered in this store")
        if current is not None:
            raise InvalidArgumentError(f"{self!r} is already registered in another store")

    @abstractmethod
    def open(self) -> None:
        """Lädt den persistierten Inhalt. ConfigIOError / ConfigParseError bei Fehlern."""

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Wert in diesem Backend; None = Schlüssel ohne Wert. NotFoundError wenn nicht vorhanden."""

    @abstractmethod
    def set(self, name: str, value: Optional[str]) -> None:
        """Setzt (und persistiert) einen Wert in diesem Backend."""

    @abstractmethod
    def foreach(self, callback: Visitor[T], payload: T = None) -> int:
        """Ruft callback(name, payload) pro Schlüssel; stoppt beim ersten Rückgabewert != 0."""

    def free(self) -> None:
        """Gibt alle Ressourcen frei und löst die Bindung an den Store."""
        self._owner = None
