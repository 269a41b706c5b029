"""
Ablageorte der Konfigurations-Scopes.

    /etc/layered_config.json              system  (priority 1)
    $HOME/.layered_config.json            global  (priority 2)
    <repo>/.layered_config/config.json    local   (priority 3)

Der spezifischste Scope hat die höchste Priorität.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from .errors import ConfigIOError, ConfigNotFoundError, InvalidArgumentError
from .logging_setup import get_logger
from .store import GLOBAL_CONFIG_FILENAME

log = get_logger("layered_config.layout")

SYSTEM_CONFIG_FILENAME = "layered_config.json"
LOCAL_CONFIG_DIR = ".layered_config"
LOCAL_CONFIG_FILENAME = "config.json"

PRIORITY_SYSTEM = 1
PRIORITY_GLOBAL = 2
PRIORITY_LOCAL = 3


class ConfigLayout:
    """Zentrale Verwaltung der Scope-Pfade."""

    def __init__(self, home: Path, system_dir: Path = Path("/etc"), repo_dir: Optional[Path] = None):
        """
        Args:
            home: Home-Verzeichnis des Benutzers
            system_dir: Verzeichnis der systemweiten Datei
            repo_dir: Arbeitsverzeichnis für den lokalen Scope (optional)
        """
        self.home = Path(home)
        self.system_dir = Path(system_dir)
        self.repo_dir = Path(repo_dir) if repo_dir is not None else None

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        system_dir: Path = Path("/etc"),
        repo_dir: Optional[Path] = None,
    ) -> "ConfigLayout":
        """Liest HOME aus dem Environment; ConfigNotFoundError wenn nicht gesetzt."""
        env = os.environ if environ is None else environ
        home = env.get("HOME")
        if home is None:
            raise ConfigNotFoundError("Cannot find $HOME variable", name="HOME")
        return cls(Path(home), system_dir=system_dir, repo_dir=repo_dir)

    # === Scopes ===
    @property
    def system_file(self) -> Path:
        """Systemweite Einstellungen."""
        return self.system_dir / SYSTEM_CONFIG_FILENAME

    @property
    def global_file(self) -> Path:
        """Benutzerweite Einstellungen."""
        return self.home / GLOBAL_CONFIG_FILENAME

    @property
    def local_file(self) -> Optional[Path]:
        """Einstellungen des Repositories, None ohne repo_dir."""
        if self.repo_dir is None:
            return None
        return self.repo_dir / LOCAL_CONFIG_DIR / LOCAL_CONFIG_FILENAME

    def scopes(self) -> List[Tuple[str, Path, int]]:
        """(scope, pfad, priorität) für alle konfigurierten Scopes."""
        result = [
            ("system", self.system_file, PRIORITY_SYSTEM),
            ("global", self.global_file, PRIORITY_GLOBAL),
        ]
        if self.local_file is not None:
            result.append(("local", self.local_file, PRIORITY_LOCAL))
        return result

    def ensure_local(self) -> Path:
        """Erstellt <repo>/.layered_config/config.json wenn nicht vorhanden."""
        path = self.local_file
        if path is None:
            raise InvalidArgumentError("ConfigLayout has no repo_dir")
        return ensure_file(path)


def ensure_file(path: Path) -> Path:
    """Erstellt eine leere Config-Datei ({}) wenn nicht vorhanden."""
    path = Path(path)
    if not path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("{}", encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(f"Failed to create config file {path}: {e}", path=path) from e
        log.info(f"Initialized: {path}")
    return path
