"""
Datei-Backend: eine JSON-Datei pro Scope.

Format:
    {
      "core.editor": "vim",
      "core.bare": "false",
      "color.ui": null          <- Schlüssel ohne Wert (gilt als true)
    }

Werte sind Strings oder null, alles andere ist ein Parse-Fehler.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import TypeAdapter, ValidationError

from .memory_backend import MemoryBackend
from ..errors import ConfigIOError, ConfigParseError
from ..logging_setup import get_logger

log = get_logger("layered_config.backend.file")

_VALUES = TypeAdapter(Dict[str, Optional[str]])


class FileBackend(MemoryBackend):
    """
    Persistiert ein flaches Key/Value-Dict als JSON.

    Vor open() ist das Backend nicht benutzbar; set() schreibt die Datei
    jeweils komplett und atomar neu.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._values = None

    def __repr__(self) -> str:
        return f"FileBackend({str(self.path)!r})"

    def _load_json(self) -> Dict[str, Optional[str]]:
        """Lädt die JSON-Datei mit Error-Handling."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            log.error(f"Failed to read {self.path}: {e}")
            raise ConfigIOError(f"Failed to open config file {self.path}: {e}", path=self.path) from e
        except UnicodeDecodeError as e:
            log.error(f"Failed to decode {self.path}: {e}")
            raise ConfigParseError(f"Config file {self.path} is not valid UTF-8: {e}", path=self.path) from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            log.error(f"Failed to parse {self.path}: {e}")
            raise ConfigParseError(f"Failed to parse config file {self.path}: {e}", path=self.path) from e

        # Root muss ein Objekt sein, Werte nur Strings oder null
        try:
            return _VALUES.validate_python(raw, strict=True)
        except ValidationError as e:
            loc = e.errors()[0]["loc"]
            log.error(f"Invalid config in {self.path}: {e}")
            raise ConfigParseError(
                f"Invalid config file {self.path}: values must be strings or null",
                name=str(loc[0]) if loc else None, path=self.path,
            ) from e

    def _save_json(self, data: Dict[str, Optional[str]]) -> None:
        """Speichert die JSON-Datei atomar."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Atomic write: Schreibe zu temp, dann rename
            temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            log.error(f"Failed to save {self.path}: {e}")
            raise ConfigIOError(f"Failed to write config file {self.path}: {e}", path=self.path) from e
        log.debug(f"Saved config: {self.path}")

    def open(self) -> None:
        self._values = self._load_json()
        log.info(f"Loaded config: {self.path} ({len(self._values)} keys)")

    def set(self, name: str, value: Optional[str]) -> None:
        values = self._loaded()
        updated = {**values, name: value}
        self._save_json(updated)
        values[name] = value
