"""
Author API endpoints.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from core import db, settings
from core.responses import to_response

from . import service
from .repository import AuthorRepository

router = APIRouter()


def get_repository(conn: asyncpg.Connection = Depends(db.get_connection)) -> AuthorRepository:
    return AuthorRepository(conn)


@router.get("/authors")
async def list_authors(
    store: AuthorRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.list_authors(store)
    return to_response(outcome, production=production)


@router.post("/authors")
async def create_author(
    body: Any = Body(default=None),
    store: AuthorRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.create_author(store, body)
    return to_response(outcome, production=production)


@router.get("/authors/{author_id}")
async def get_author(
    author_id: str,
    store: AuthorRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.get_author(store, author_id)
    return to_response(outcome, production=production)


@router.api_route("/authors/{author_id}", methods=["PATCH", "PUT"])
async def update_author(
    author_id: str,
    body: Any = Body(default=None),
    store: AuthorRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.update_author(store, author_id, body)
    return to_response(outcome, production=production)


@router.delete("/authors/{author_id}")
async def delete_author(
    author_id: str,
    store: AuthorRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.delete_author(store, author_id)
    return to_response(outcome, production=production)
