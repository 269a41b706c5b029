from __future__ import annotations
import argparse
import json
import sys
import uvicorn
from pathlib import Path
from typing import List, Optional
from .api import create_app
from .coercion import format_bool, format_integer, parse_bool, parse_integer
from .env import get_env_bool
from .errors import ConfigError, NotFoundError
from .layout import ConfigLayout, ensure_file
from .logging_setup import get_logger, setup_logging
from .settings import Settings
from .store import LayeredStore

log = get_logger("layered_config.cli")

TYPES = ("string", "int", "bool")

def _open_store(args, settings: Settings, *, for_write: bool = False) -> LayeredStore:
    if args.repo is not None:
        layout = ConfigLayout.from_environ(repo_dir=args.repo)
        if for_write:
            layout.ensure_local()
        return LayeredStore.open_layered(layout)

    if args.use_global:
        path = ConfigLayout.from_environ().global_file
    else:
        path = args.file or settings.config_file
        if path is None:
            path = ConfigLayout.from_environ().global_file

    if for_write:
        ensure_file(path)
    return LayeredStore.open_from_path(path)

def _render(store: LayeredStore, name: str, type_: str) -> str:
    if type_ == "bool":
        return format_bool(store.get_bool(name))
    if type_ == "int":
        return format_integer(store.get_long(name))
    value = store.get_string(name)
    return "" if value is None else value

def _store_value(store: LayeredStore, name: str, raw: str, type_: str) -> None:
    if type_ == "bool":
        store.set_bool(name, parse_bool(raw, name))
    elif type_ == "int":
        store.set_long(name, parse_integer(raw, name))
    else:
        store.set_string(name, raw)

def _collect(name: str, names: List[str]) -> int:
    names.append(name)
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="configctl")
    where = parser.add_mutually_exclusive_group()
    where.add_argument("--file", type=Path, help="Use this config file (default: $LAYERED_CONFIG_FILE or the global file)")
    where.add_argument("--global", dest="use_global", action="store_true", help="Use $HOME/.layered_config.json")
    where.add_argument("--repo", type=Path, help="Layer system + global + <repo>/.layered_config/config.json")
    sub = parser.add_subparsers(dest="cmd", required=True)

    get_p = sub.add_parser("get", help="Print the value of a variable")
    get_p.add_argument("name")
    get_p.add_argument("--type", dest="type_", choices=TYPES, default="string")

    set_p = sub.add_parser("set", help="Write a variable to the highest-priority file")
    set_p.add_argument("name")
    set_p.add_argument("value")
    set_p.add_argument("--type", dest="type_", choices=TYPES, default="string")

    sub.add_parser("list", help="Print every variable name, highest priority file first")

    env_p = sub.add_parser("env-bool", help="Print an environment variable as true/false")
    env_p.add_argument("name")

    api_p = sub.add_parser("serve", help="Run REST API (FastAPI)")
    api_p.add_argument("--host", default="127.0.0.1")
    api_p.add_argument("--port", type=int, default=8000)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging(settings)

    try:
        if args.cmd == "env-bool":
            print(format_bool(get_env_bool(args.name)))
            return 0

        if args.cmd == "get":
            with _open_store(args, settings) as store:
                print(_render(store, args.name, args.type_))
            return 0

        if args.cmd == "set":
            with _open_store(args, settings, for_write=True) as store:
                _store_value(store, args.name, args.value, args.type_)
            return 0

        if args.cmd == "list":
            names: List[str] = []
            with _open_store(args, settings) as store:
                store.foreach(_collect, names)
            for name in names:
                print(name)
            return 0

        if args.cmd == "serve":
            store = _open_store(args, settings, for_write=True)
            app = create_app(settings, store=store)
            try:
                uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
            finally:
                store.free()
            return 0
    except NotFoundError as e:
        log.debug("%s", e)
        return 1
    except ConfigError as e:
        sys.stderr.write(json.dumps({"ok": False, "error": type(e).__name__, "detail": str(e)}) + "\n")
        return 2

    return 2
