"""
Post API endpoints.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from core import db, settings
from core.responses import to_response

from . import service
from .repository import PostRepository

router = APIRouter()


def get_repository(conn: asyncpg.Connection = Depends(db.get_connection)) -> PostRepository:
    return PostRepository(conn)


@router.get("/posts")
async def list_posts(
    store: PostRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.list_posts(store)
    return to_response(outcome, production=production)


@router.post("/posts")
async def create_post(
    body: Any = Body(default=None),
    store: PostRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.create_post(store, body)
    return to_response(outcome, production=production)


@router.get("/posts/{post_id}")
async def get_post(
    post_id: str,
    store: PostRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.get_post(store, post_id)
    return to_response(outcome, production=production)


@router.api_route("/posts/{post_id}", methods=["PATCH", "PUT"])
async def update_post(
    post_id: str,
    body: Any = Body(default=None),
    store: PostRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.update_post(store, post_id, body)
    return to_response(outcome, production=production)


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: str,
    store: PostRepository = Depends(get_repository),
    production: bool = Depends(settings.is_production),
) -> JSONResponse:
    outcome = await service.delete_post(store, post_id)
    return to_response(outcome, production=production)
