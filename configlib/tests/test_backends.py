"""
Unit-Tests für Backends & Scope-Layout.

Dieses Test-Modul validiert:
- backends/memory_backend.py
- backends/file_backend.py
- layout.py
"""

import pytest
import json
import tempfile
from pathlib import Path

from layered_config.backends import ConfigBackend, FileBackend, MemoryBackend
from layered_config.errors import (
    ConfigIOError,
    ConfigNotFoundError,
    ConfigParseError,
    InvalidArgumentError,
    NotFoundError,
)
from layered_config.layout import ConfigLayout, ensure_file
from layered_config.store import LayeredStore


@pytest.fixture
def temp_config_dir():
    """Erstellt temporäres Config-Verzeichnis."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(temp_config_dir):
    """Config-Datei mit ein paar Werten."""
    path = temp_config_dir / "config.json"
    path.write_text(json.dumps({"core.editor": "vim", "color.ui": None}), encoding="utf-8")
    return path


class TestMemoryBackend:
    """Tests für MemoryBackend."""

    def test_is_config_backend(self):
        assert isinstance(MemoryBackend(), ConfigBackend)

    def test_get_and_set(self):
        backend = MemoryBackend({"a": "1"})
        backend.open()
        assert backend.get("a") == "1"
        backend.set("b", "2")
        assert backend.get("b") == "2"

    def test_get_missing(self):
        with pytest.raises(NotFoundError) as exc:
            MemoryBackend().get("nope")
        assert exc.value.name == "nope"

    def test_foreach_stops_on_nonzero(self):
        backend = MemoryBackend({"a": "1", "b": "2", "c": "3"})
        seen = []

        def visit(name, acc):
            acc.append(name)
            return 5 if name == "b" else 0

        assert backend.foreach(visit, seen) == 5
        assert seen == ["a", "b"]

    def test_foreach_allows_modification(self):
        backend = MemoryBackend({"a": "1"})

        def visit(name, b):
            b.set(name + "_copy", "x")
            return 0

        assert backend.foreach(visit, backend) == 0
        assert backend.get("a_copy") == "x"

    def test_free_unusable(self):
        backend = MemoryBackend({"a": "1"})
        backend.free()
        with pytest.raises(InvalidArgumentError):
            backend.get("a")


class TestFileBackend:
    """Tests für FileBackend."""

    def test_open_and_get(self, config_file):
        backend = FileBackend(config_file)
        backend.open()
        assert backend.get("core.editor") == "vim"
        assert backend.get("color.ui") is None

    def test_use_before_open(self, config_file):
        backend = FileBackend(config_file)
        with pytest.raises(InvalidArgumentError):
            backend.get("core.editor")

    def test_missing_file(self, temp_config_dir):
        backend = FileBackend(temp_config_dir / "missing.json")
        with pytest.raises(ConfigIOError) as exc:
            backend.open()
        assert exc.value.path == temp_config_dir / "missing.json"

    def test_directory_is_io_error(self, temp_config_dir):
        with pytest.raises(ConfigIOError):
            FileBackend(temp_config_dir).open()

    @pytest.mark.parametrize("content", ["{broken", "[]", '"text"', '{"a": 1}', '{"a": {"b": "c"}}', '{"a": true}'])
    def test_parse_errors(self, temp_config_dir, content):
        path = temp_config_dir / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigParseError):
            FileBackend(path).open()

    def test_parse_error_names_bad_key(self, temp_config_dir):
        path = temp_config_dir / "bad.json"
        path.write_text('{"core.editor": "vim", "pack.threads": 4}', encoding="utf-8")
        with pytest.raises(ConfigParseError) as exc:
            FileBackend(path).open()
        assert exc.value.name == "pack.threads"
        assert exc.value.path == path

    def test_invalid_utf8_is_parse_error(self, temp_config_dir):
        """Nicht dekodierbare Bytes sind ein Parse-Fehler, kein roher UnicodeDecodeError."""
        path = temp_config_dir / "latin1.json"
        path.write_bytes(b'{"a": "\xff\xfe"}')
        with pytest.raises(ConfigParseError):
            FileBackend(path).open()

    def test_set_writes_atomically(self, config_file):
        backend = FileBackend(config_file)
        backend.open()
        backend.set("user.name", "ada")

        saved = json.loads(config_file.read_text(encoding="utf-8"))
        assert saved == {"core.editor": "vim", "color.ui": None, "user.name": "ada"}
        assert not config_file.with_suffix(".json.tmp").exists()

    def test_set_reloads(self, config_file):
        backend = FileBackend(config_file)
        backend.open()
        backend.set("core.editor", "nano")

        fresh = FileBackend(config_file)
        fresh.open()
        assert fresh.get("core.editor") == "nano"

    def test_failed_write_keeps_memory(self, config_file, monkeypatch):
        backend = FileBackend(config_file)
        backend.open()

        def boom(*args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr(Path, "write_text", boom)
        with pytest.raises(ConfigIOError):
            backend.set("user.name", "ada")
        with pytest.raises(NotFoundError):
            backend.get("user.name")

    def test_foreach_in_file_order(self, config_file):
        backend = FileBackend(config_file)
        backend.open()
        names = []
        backend.foreach(lambda name, acc: acc.append(name) or 0, names)
        assert names == ["core.editor", "color.ui"]


class TestConfigLayout:
    """Tests für Scope-Pfade."""

    def test_paths(self, temp_config_dir):
        layout = ConfigLayout(temp_config_dir / "home", system_dir=temp_config_dir / "etc",
                              repo_dir=temp_config_dir / "repo")
        assert layout.global_file == temp_config_dir / "home" / ".layered_config.json"
        assert layout.system_file == temp_config_dir / "etc" / "layered_config.json"
        assert layout.local_file == temp_config_dir / "repo" / ".layered_config" / "config.json"

    def test_scopes_priorities(self, temp_config_dir):
        layout = ConfigLayout(temp_config_dir, repo_dir=temp_config_dir / "repo")
        assert [(s, p) for s, _, p in layout.scopes()] == [("system", 1), ("global", 2), ("local", 3)]

    def test_scopes_without_repo(self, temp_config_dir):
        layout = ConfigLayout(temp_config_dir)
        assert layout.local_file is None
        assert [s for s, _, _ in layout.scopes()] == ["system", "global"]

    def test_from_environ(self, temp_config_dir):
        layout = ConfigLayout.from_environ({"HOME": str(temp_config_dir)})
        assert layout.home == temp_config_dir

    def test_from_environ_without_home(self):
        with pytest.raises(ConfigNotFoundError):
            ConfigLayout.from_environ({})

    def test_ensure_local(self, temp_config_dir):
        layout = ConfigLayout(temp_config_dir, system_dir=temp_config_dir / "etc",
                              repo_dir=temp_config_dir / "repo")
        path = layout.ensure_local()
        assert json.loads(path.read_text(encoding="utf-8")) == {}

        with LayeredStore.open_layered(layout) as store:
            store.set_string("branch.main.remote", "origin")
        assert json.loads(path.read_text(encoding="utf-8")) == {"branch.main.remote": "origin"}

    def test_ensure_local_without_repo(self, temp_config_dir):
        with pytest.raises(InvalidArgumentError):
            ConfigLayout(temp_config_dir).ensure_local()

    def test_ensure_file_keeps_existing(self, config_file):
        ensure_file(config_file)
        assert json.loads(config_file.read_text(encoding="utf-8"))["core.editor"] == "vim"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
