from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .data import load_catalog
from .engine import UnknownOptionError
from .log import setup_logger
from .schemas import (
    BudgetRequest,
    CategoryRequest,
    ConfigurationSnapshot,
    ExtraKey,
    MemorySizeRequest,
    SessionResponse,
    UseCaseRequest,
)
from .service import ConfiguratorService, SessionNotFoundError

ROOT = Path(__file__).resolve().parents[2]

load_dotenv(ROOT / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_absolute() else ROOT / path


CATALOG_PATH = _env_path("PCBUILDER_CATALOG_PATH")
SESSION_TTL_SECONDS = _env_int("SESSION_TTL_SECONDS", 86400)
SESSION_CLEANUP_INTERVAL_SECONDS = _env_int("SESSION_CLEANUP_INTERVAL_SECONDS", 600)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip()
LOG_FORMAT = os.getenv("LOG_FORMAT", "text").strip().lower()

logger = setup_logger("pcbuilder", LOG_LEVEL, LOG_FORMAT)

# 参考目录不合法时直接启动失败
catalog = load_catalog(CATALOG_PATH)
logger.info(
    "catalog loaded: %d use cases, %d parts, %d categories",
    len(catalog.use_cases),
    len(catalog.parts),
    len(catalog.categories),
)

service = ConfiguratorService(
    catalog,
    session_ttl_seconds=SESSION_TTL_SECONDS,
    session_cleanup_interval_seconds=SESSION_CLEANUP_INTERVAL_SECONDS,
)

app = FastAPI(title="PC Builder")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"session not found: {session_id}")


def _respond(session_id: str, snapshot: ConfigurationSnapshot) -> dict:
    return SessionResponse(session_id=session_id, configuration=snapshot).model_dump()


@app.get("/api/catalog")
def get_catalog():
    return catalog.model_dump()


@app.post("/api/sessions")
def create_session():
    session_id = service.create_session()
    return _respond(session_id, service.snapshot(session_id))


@app.get("/api/sessions/{session_id}")
def get_session(session_id: str):
    try:
        return _respond(session_id, service.snapshot(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@app.delete("/api/sessions/{session_id}", status_code=204)
def end_session(session_id: str):
    try:
        service.end_session(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)


@app.post("/api/sessions/{session_id}/budget")
def set_budget(session_id: str, payload: BudgetRequest):
    try:
        return _respond(session_id, service.set_budget(session_id, payload.value))
    except SessionNotFoundError:
        raise _not_found(session_id)


@app.post("/api/sessions/{session_id}/category")
def select_category(session_id: str, payload: CategoryRequest):
    try:
        return _respond(session_id, service.select_category(session_id, payload.category_id))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except UnknownOptionError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@app.post("/api/sessions/{session_id}/use-case")
def set_use_case(session_id: str, payload: UseCaseRequest):
    try:
        return _respond(session_id, service.set_use_case(session_id, payload.use_case))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except UnknownOptionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.post("/api/sessions/{session_id}/extras/{key}/toggle")
def toggle_extra(session_id: str, key: ExtraKey):
    try:
        return _respond(session_id, service.toggle_extra(session_id, key))
    except SessionNotFoundError:
        raise _not_found(session_id)


@app.post("/api/sessions/{session_id}/memory-size")
def set_memory_size(session_id: str, payload: MemorySizeRequest):
    try:
        return _respond(session_id, service.set_memory_size(session_id, payload.memory_size))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except UnknownOptionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.get("/api/metrics")
def metrics():
    return service.metrics()
