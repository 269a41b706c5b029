"""
Layered configuration store.

A LayeredStore holds an ordered list of backends, highest priority first.
Reads and writes go to the highest-priority backend only; foreach walks all
of them. Lower-priority backends are never consulted as a fallback.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Mapping, Optional, Tuple, Union

from .backends.base import ConfigBackend, T, Visitor
from .backends.file_backend import FileBackend
from .coercion import (
    INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN,
    check_range, format_bool, format_integer, parse_bool, parse_integer,
)
from .errors import ConfigNotFoundError, InvalidArgumentError
from .logging_setup import get_logger

if TYPE_CHECKING:
    from .layout import ConfigLayout

log = get_logger("layered_config.store")

GLOBAL_CONFIG_FILENAME = ".layered_config.json"


@dataclass(frozen=True)
class BackendEntry:
    backend: ConfigBackend
    priority: int


class LayeredStore:
    def __init__(self) -> None:
        self._entries: List[BackendEntry] = []

    def __repr__(self) -> str:
        return f"LayeredStore({[(e.backend, e.priority) for e in self._entries]!r})"

    def __enter__(self) -> "LayeredStore":
        return self

    def __exit__(self, *exc) -> None:
        self.free()

    @classmethod
    def create(cls) -> "LayeredStore":
        return cls()

    @property
    def entries(self) -> Tuple[BackendEntry, ...]:
        """Registered backends, highest priority first."""
        return tuple(self._entries)

    # ---------------- Construction ----------------
    @classmethod
    def open_from_path(
        cls,
        path: Union[str, Path],
        *,
        backend_factory: Callable[[Path], ConfigBackend] = FileBackend,
    ) -> "LayeredStore":
        """
        Open a store with a single file backend (priority 1).

        Raises ConfigIOError/ConfigParseError; on failure the store and the
        backend are freed before the error propagates.
        """
        store = cls()
        backend: Optional[ConfigBackend] = None
        try:
            backend = backend_factory(Path(path))
            store.add_backend(backend, 1)
            backend.open()
        except BaseException:
            log.warning("Failed to open config file %s", path)
            if backend is not None and backend.owner is not store:
                backend.free()
            store.free()
            raise
        return store

    @classmethod
    def open_global(cls, environ: Optional[Mapping[str, str]] = None) -> "LayeredStore":
        """Open ``$HOME/.layered_config.json``. ConfigNotFoundError if HOME is not set."""
        env = os.environ if environ is None else environ
        home = env.get("HOME")
        if home is None:
            raise ConfigNotFoundError(
                "Failed to open global config file. Cannot find $HOME variable", name="HOME"
            )
        return cls.open_from_path(Path(home) / GLOBAL_CONFIG_FILENAME)

    @classmethod
    def open_layered(cls, layout: "ConfigLayout") -> "LayeredStore":
        """
        Register one file backend per existing scope file of ``layout``.

        Each backend is opened before it is registered, so a broken file
        leaves nothing behind. Scopes without a file are skipped.
        """
        store = cls()
        try:
            for scope, path, priority in layout.scopes():
                if not path.is_file():
                    log.debug("Skipping %s scope, no file at %s", scope, path)
                    continue
                backend = FileBackend(path)
                backend.open()
                store.add_backend(backend, priority)
                log.debug("Registered %s scope %s (priority=%d)", scope, path, priority)
        except BaseException:
            store.free()
            raise
        return store

    # ---------------- Registry ----------------
    def add_backend(self, backend: ConfigBackend, priority: int) -> None:
        """
        Register ``backend``; the store owns it from now on.

        The entry list stays sorted by descending priority. The order of
        backends with equal priority is unspecified.
        """
        backend.check_unbound(self)
        entries = list(self._entries)
        entries.append(BackendEntry(backend=backend, priority=int(priority)))
        entries.sort(key=lambda e: e.priority, reverse=True)
        self._entries = entries
        backend.bind(self)
        log.debug("Added backend %r with priority %d", backend, priority)

    def free(self) -> None:
        """
        Free every backend, then drop the entries. The store must not be used afterwards.

        A failing backend does not stop the others from being freed; the
        first error is re-raised once all of them were tried.
        """
        entries, self._entries = self._entries, []
        first_error: Optional[Exception] = None
        for entry in entries:
            try:
                entry.backend.free()
            except Exception as e:
                log.error("Failed to free backend %r: %s", entry.backend, e)
                if first_error is None:
                    first_error = e
        log.debug("Store freed")
        if first_error is not None:
            raise first_error

    close = free

    def _top(self, action: str) -> ConfigBackend:
        if not self._entries:
            raise InvalidArgumentError(
                f"Cannot {action} variable value; no backends registered in the store"
            )
        return self._entries[0].backend

    # ---------------- Iteration ----------------
    def foreach(self, callback: Visitor[T], payload: T = None) -> int:
        """
        Call ``callback(name, payload)`` for every key of every backend,
        highest priority first. Returns the first nonzero callback result,
        or 0 when all keys were visited.
        """
        for entry in list(self._entries):
            ret = entry.backend.foreach(callback, payload)
            if ret:
                return ret
        return 0

    # ---------------- Setters ----------------
    def set_string(self, name: str, value: Optional[str]) -> None:
        self._top("set").set(name, value)

    def set_long(self, name: str, value: int) -> None:
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidArgumentError(f"Value {value} for {name} does not fit into 64 bits", name=name)
        self.set_string(name, format_integer(value))

    def set_int(self, name: str, value: int) -> None:
        if not INT32_MIN <= value <= INT32_MAX:
            raise InvalidArgumentError(f"Value {value} for {name} does not fit into 32 bits", name=name)
        self.set_long(name, value)

    def set_bool(self, name: str, value: bool) -> None:
        self.set_string(name, format_bool(value))

    # ---------------- Getters ----------------
    def get_string(self, name: str) -> Optional[str]:
        """
        Value of ``name`` in the highest-priority backend.

        Raises InvalidArgumentError without backends and NotFoundError if the
        top backend lacks the key, even when a lower backend has it.
        """
        return self._top("get").get(name)

    def get_long(self, name: str) -> int:
        value = parse_integer(self.get_string(name), name)
        return check_range(value, INT64_MIN, INT64_MAX, name)

    get_integer = get_long

    def get_int(self, name: str) -> int:
        value = parse_integer(self.get_string(name), name)
        return check_range(value, INT32_MIN, INT32_MAX, name)

    def get_bool(self, name: str) -> bool:
        return parse_bool(self.get_string(name), name)
