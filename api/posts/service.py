"""
Post operations.

Flow per call:
1) normalize the request body through PostDTO
2) one round trip to the store (author populated on reads and updates)
3) normalize the stored record through PostDTO
4) return an outcome mapping for the response envelope

No operation raises: not-found is a 404 outcome, bad input a 400, and
everything else a 500 carrying the error.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from core import ids
from core.errors import ValidationFailedError, not_found
from core.responses import fail, ok

from .repository import PostRepository
from .schemas import PostDTO

logger = logging.getLogger(__name__)

REQUIRED_ON_CREATE = ("title", "content", "author")


def _draft_from_body(body: Any) -> dict[str, Any]:
    """
    Reduce a request body to the columns the store writes.
    Unknown, empty and server-managed fields are dropped.
    """
    if not isinstance(body, Mapping):
        raise ValidationFailedError("Request body must be a JSON object.")

    dto = PostDTO.from_record(body)
    invalid = [
        field
        for field in ("title", "content")
        if getattr(dto, field) is not None and not isinstance(getattr(dto, field), str)
    ]
    if invalid:
        raise ValidationFailedError(f"Fields must be strings: {', '.join(invalid)}", fields=invalid)

    draft: dict[str, Any] = {}
    if dto.title:
        draft["title"] = dto.title
    if dto.content:
        draft["content"] = dto.content
    # An author that does not resolve to an id is dropped, like in PostDTO.
    if dto.author is not None and ids.is_valid_object_id(dto.author.id):
        draft["author"] = ids.to_object_id(dto.author.id)
    return draft


async def list_posts(store: PostRepository) -> dict[str, Any]:
    try:
        posts = await store.find(populate_author=True)
        return ok([PostDTO.from_record(post).to_dict() for post in posts])
    except Exception as exc:
        logger.exception("posts_list_failed")
        return fail(exc)


async def create_post(store: PostRepository, body: Any) -> dict[str, Any]:
    """
    The created post is returned without expanding its author; the author
    comes back as `{"_id": ...}` only.
    """
    try:
        draft = _draft_from_body(body)
        missing = [field for field in REQUIRED_ON_CREATE if field not in draft]
        if missing:
            raise ValidationFailedError(
                f"Missing required fields: {', '.join(missing)}",
                fields=missing,
            )
        post = await store.create(draft)
        logger.info("post_created id=%s", post.get("_id"))
        return ok(PostDTO.from_record(post).to_dict())
    except ValidationFailedError as exc:
        logger.warning("post_create_rejected reason=%s", exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("post_create_failed")
        return fail(exc)


async def get_post(store: PostRepository, post_id: str) -> dict[str, Any]:
    try:
        post = await store.find_by_id(ids.to_object_id(post_id), populate_author=True)
        if post is None:
            logger.warning("post_not_found id=%s", post_id)
            return fail(not_found("Post", post_id))
        return ok(PostDTO.from_record(post).to_dict())
    except ValidationFailedError as exc:
        logger.warning("post_get_rejected id=%s reason=%s", post_id, exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("post_get_failed id=%s", post_id)
        return fail(exc)


async def update_post(store: PostRepository, post_id: str, body: Any) -> dict[str, Any]:
    try:
        object_id = ids.to_object_id(post_id)
        changes = _draft_from_body(body)
        post = await store.find_by_id_and_update(object_id, changes, populate_author=True)
        if post is None:
            logger.warning("post_not_found id=%s", post_id)
            return fail(not_found("Post", post_id))
        return ok(PostDTO.from_record(post).to_dict())
    except ValidationFailedError as exc:
        logger.warning("post_update_rejected id=%s reason=%s", post_id, exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("post_update_failed id=%s", post_id)
        return fail(exc)


async def delete_post(store: PostRepository, post_id: str) -> dict[str, Any]:
    try:
        post = await store.find_by_id_and_delete(ids.to_object_id(post_id))
        if post is None:
            logger.warning("post_not_found id=%s", post_id)
            return fail(not_found("Post", post_id))
        logger.info("post_deleted id=%s", post_id)
        return ok(True)
    except ValidationFailedError as exc:
        logger.warning("post_delete_rejected id=%s reason=%s", post_id, exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("post_delete_failed id=%s", post_id)
        return fail(exc)
