"""FastAPI application exposing a query session over HTTP."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from symfinder import __version__
from symfinder.errors import QueryFailed, ValidationError
from symfinder.models import Location, Operation, QueryRecord, ResultSet
from symfinder.query.results import printable
from symfinder.query.session import QuerySession
from symfinder.ui.navigation import open_file_at_line

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="SymFinder Web", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_query_lock = asyncio.Lock()


class DirectoryPayload(BaseModel):
    path: str


class QueryPayload(BaseModel):
    symbol: str
    operation: int = 0
    index_dir: str | None = None


class SelectPayload(BaseModel):
    index: int
    generation: int | None = None


def get_session() -> QuerySession:
    session = getattr(app.state, "session", None)
    if session is None:
        session = QuerySession()
        app.state.session = session
    return session


def _serialize_results(results: ResultSet | None) -> dict[str, Any]:
    if results is None:
        return {"generation": 0, "count": 0, "records": []}
    return {
        "generation": results.generation,
        "count": len(results.records),
        "index_dir": printable(str(results.index_directory)) if results.index_directory else None,
        "records": [_serialize_record(record) for record in results.records],
    }


def _serialize_record(record: QueryRecord) -> dict[str, Any]:
    data = asdict(record)
    for key in ("file", "scope", "context"):
        data[key] = printable(data[key])
    return data


def _serialize_location(location: Location | None) -> dict[str, Any] | None:
    if location is None:
        return None
    return {"path": printable(str(location.path)), "line": location.line}


def _set_directory(session: QuerySession, candidate: str) -> None:
    try:
        session.set_index_directory(candidate)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/directory")
async def set_directory(payload: DirectoryPayload) -> dict[str, str]:
    session = get_session()
    _set_directory(session, payload.path)
    return {"status": "ok", "index_dir": str(session.index_directory)}


@app.post("/query")
async def run_query(payload: QueryPayload) -> dict[str, Any]:
    symbol = payload.symbol.strip()
    if not symbol:
        raise HTTPException(status_code=400, detail="Empty symbol")
    try:
        operation = Operation.from_code(payload.operation)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    session = get_session()
    if payload.index_dir is not None:
        _set_directory(session, payload.index_dir)
    if session.index_directory is None:
        raise HTTPException(status_code=400, detail="Symbol directory is not set")

    async with _query_lock:
        try:
            results = await asyncio.to_thread(session.execute_query, symbol, operation)
        except QueryFailed as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _serialize_results(results)


@app.get("/results")
async def current_results() -> dict[str, Any]:
    return _serialize_results(get_session().results)


@app.post("/select")
async def select_record(payload: SelectPayload) -> dict[str, Any]:
    location = get_session().select_record(payload.index, generation=payload.generation)
    return {"location": _serialize_location(location)}


@app.post("/open")
async def open_record(payload: SelectPayload) -> dict[str, Any]:
    session = get_session()
    location = session.select_record(payload.index, generation=payload.generation)
    if location is None:
        raise HTTPException(status_code=404, detail=f"No entry {payload.index}")

    try:
        open_file_at_line(location.path, location.line, session.config.editor, wait=False)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=printable(str(exc))) from exc
    except OSError as exc:  # pragma: no cover - defensive
        LOGGER.error("Unable to open %s: %s", location.path, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"status": "ok", "location": _serialize_location(location)}
