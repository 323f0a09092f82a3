"""FastAPI application serving directory browse and search."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from phonedir.config import AppConfig
from phonedir.directory.cache import DirectoryCache
from phonedir.directory.search import search_directory
from phonedir.errors import DirectoryError
from phonedir.ingestion.source import open_source
from phonedir.models import PersonnelRecord
from phonedir.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="phonedir", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)


class PersonnelOut(BaseModel):
    id: str
    name: str
    department: str
    extension: str
    search_score: int | None = None
    search_terms: List[str] = []


class DepartmentGroupOut(BaseModel):
    department: str
    personnel: List[PersonnelOut]


class DirectoryResponse(BaseModel):
    count: int
    personnel: List[PersonnelOut]


class SearchResponse(BaseModel):
    query: str
    total: int
    groups: List[DepartmentGroupOut]


class ReloadResponse(BaseModel):
    status: str
    count: int


def _person_out(record: PersonnelRecord) -> PersonnelOut:
    return PersonnelOut(**record.public_fields())


def configure(config: AppConfig) -> DirectoryCache:
    """Build the directory cache for ``config`` and attach it to the app."""
    location = config.resolve_source(Path.cwd())
    cache = DirectoryCache(open_source(location, timeout=config.http_timeout))
    app.state.cache = cache
    LOGGER.info("Serving directory from %s", location)
    return cache


def _get_cache() -> DirectoryCache:
    cache = getattr(app.state, "cache", None)
    if cache is None:
        cache = configure(AppConfig())
    return cache


@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError) -> JSONResponse:
    LOGGER.error("Directory request %s failed: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.user_message, "retryable": exc.retryable},
    )


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    await _get_cache().warm()


@app.get("/api/directory", response_model=DirectoryResponse)
async def list_directory() -> DirectoryResponse:
    """Flat record list for browse mode."""
    records = await _get_cache().get_records()
    return DirectoryResponse(count=len(records), personnel=[_person_out(r) for r in records])


@app.get("/api/directory/search", response_model=SearchResponse)
async def search(q: str = Query("")) -> SearchResponse:
    records = await _get_cache().get_records()
    outcome = search_directory(q, records)
    return SearchResponse(
        query=outcome.query,
        total=outcome.total,
        groups=[
            DepartmentGroupOut(
                department=group.department,
                personnel=[_person_out(person) for person in group.personnel],
            )
            for group in outcome.groups
        ],
    )


@app.post("/api/directory/reload", response_model=ReloadResponse)
async def reload_directory() -> ReloadResponse:
    cache = _get_cache()
    records = await cache.get_records(force_reload=True)
    if cache.error is not None:
        LOGGER.warning("Reload failed, serving %d stale records", len(records))
        return ReloadResponse(status="stale", count=len(records))
    return ReloadResponse(status="ok", count=len(records))


@app.get("/health.html", response_class=PlainTextResponse)
async def health() -> str:
    return "ok"
