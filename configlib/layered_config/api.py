from __future__ import annotations
from contextlib import asynccontextmanager
from typing import List, Literal, Optional, Union
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel
from . import __version__
from .coercion import INT64_MAX, INT64_MIN, check_range, parse_bool, parse_integer
from .errors import ConfigError, ConfigTypeError, InvalidArgumentError, NotFoundError
from .logging_setup import get_logger
from .settings import Settings
from .store import LayeredStore

log = get_logger("layered_config.api")

ValueType = Literal["string", "int", "bool"]

class ActionResult(BaseModel):
    ok: bool
    detail: str | None = None
    data: dict | None = None

class SetValueRequest(BaseModel):
    value: Union[bool, int, str, None] = None
    type: ValueType = "string"

def _open_default(settings: Settings) -> LayeredStore:
    if settings.config_file is not None:
        return LayeredStore.open_from_path(settings.config_file)
    return LayeredStore.open_global()

def _http_error(e: ConfigError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConfigTypeError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, InvalidArgumentError):
        return HTTPException(status_code=409, detail=str(e))
    log.error("Config operation failed: %s", e)
    return HTTPException(status_code=500, detail=str(e))

def _read(store: LayeredStore, name: str, type_: ValueType):
    if type_ == "bool":
        return store.get_bool(name)
    if type_ == "int":
        return store.get_long(name)
    return store.get_string(name)

def _write(store: LayeredStore, name: str, req: SetValueRequest) -> None:
    raw = None if req.value is None else str(req.value)
    if req.type == "bool":
        store.set_bool(name, req.value if isinstance(req.value, bool) else parse_bool(raw, name))
    elif req.type == "int":
        if isinstance(req.value, int) and not isinstance(req.value, bool):
            store.set_long(name, check_range(req.value, INT64_MIN, INT64_MAX, name))
        else:
            store.set_long(name, parse_integer(raw, name))
    else:
        store.set_string(name, raw)

def _collect(name: str, names: List[str]) -> int:
    names.append(name)
    return 0

def create_app(settings: Settings, store: Optional[LayeredStore] = None) -> FastAPI:
    owns_store = store is None
    if store is None:
        store = _open_default(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_store:
            store.free()

    app = FastAPI(title="Layered Config API", version=__version__, lifespan=lifespan)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/config", response_model=ActionResult)
    def list_names():
        names: List[str] = []
        store.foreach(_collect, names)
        return ActionResult(ok=True, data={"names": names})

    @app.get("/config/{name}", response_model=ActionResult)
    def get_value(name: str, type: ValueType = Query(default="string")):
        try:
            value = _read(store, name, type)
        except ConfigError as e:
            raise _http_error(e)
        return ActionResult(ok=True, data={"name": name, "type": type, "value": value})

    @app.put("/config/{name}", response_model=ActionResult)
    def set_value(name: str, req: SetValueRequest):
        try:
            _write(store, name, req)
            value = store.get_string(name)
        except ConfigError as e:
            raise _http_error(e)
        log.info("Set %s via API", name)
        return ActionResult(ok=True, detail="saved", data={"name": name, "value": value})

    return app
