"""
Author operations.

Every operation returns an outcome mapping (`{status, result}` or
`{status, error}`) and never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from core import ids
from core.errors import ValidationFailedError, not_found
from core.responses import fail, ok

from .repository import AuthorRepository
from .schemas import AuthorDTO

logger = logging.getLogger(__name__)


def _draft_from_body(body: Any, *, require_name: bool) -> dict[str, Any]:
    if not isinstance(body, Mapping):
        raise ValidationFailedError("Request body must be a JSON object.")

    dto = AuthorDTO.from_record(body)
    invalid = [
        field
        for field in ("name", "email")
        if getattr(dto, field) is not None and not isinstance(getattr(dto, field), str)
    ]
    if invalid:
        raise ValidationFailedError(f"Fields must be strings: {', '.join(invalid)}", fields=invalid)
    if require_name and not dto.name:
        raise ValidationFailedError("Missing required fields: name", fields=["name"])

    return {field: getattr(dto, field) for field in ("name", "email") if getattr(dto, field)}


async def list_authors(store: AuthorRepository) -> dict[str, Any]:
    try:
        rows = await store.find()
        return ok([AuthorDTO.from_record(row).to_dict() for row in rows])
    except Exception as exc:
        logger.exception("authors_list_failed")
        return fail(exc)


async def create_author(store: AuthorRepository, body: Any) -> dict[str, Any]:
    try:
        draft = _draft_from_body(body, require_name=True)
        row = await store.create(draft)
        logger.info("author_created id=%s", row.get("_id"))
        return ok(AuthorDTO.from_record(row).to_dict())
    except ValidationFailedError as exc:
        logger.warning("author_create_rejected reason=%s", exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("author_create_failed")
        return fail(exc)


async def get_author(store: AuthorRepository, author_id: str) -> dict[str, Any]:
    try:
        row = await store.find_by_id(ids.to_object_id(author_id))
        if row is None:
            logger.warning("author_not_found id=%s", author_id)
            return fail(not_found("Author", author_id))
        return ok(AuthorDTO.from_record(row).to_dict())
    except ValidationFailedError as exc:
        logger.warning("author_get_rejected id=%s reason=%s", author_id, exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("author_get_failed id=%s", author_id)
        return fail(exc)


async def update_author(store: AuthorRepository, author_id: str, body: Any) -> dict[str, Any]:
    try:
        object_id = ids.to_object_id(author_id)
        changes = _draft_from_body(body, require_name=False)
        row = await store.find_by_id_and_update(object_id, changes)
        if row is None:
            logger.warning("author_not_found id=%s", author_id)
            return fail(not_found("Author", author_id))
        return ok(AuthorDTO.from_record(row).to_dict())
    except ValidationFailedError as exc:
        logger.warning("author_update_rejected id=%s reason=%s", author_id, exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("author_update_failed id=%s", author_id)
        return fail(exc)


async def delete_author(store: AuthorRepository, author_id: str) -> dict[str, Any]:
    try:
        row = await store.find_by_id_and_delete(ids.to_object_id(author_id))
        if row is None:
            logger.warning("author_not_found id=%s", author_id)
            return fail(not_found("Author", author_id))
        logger.info("author_deleted id=%s", author_id)
        return ok(True)
    except ValidationFailedError as exc:
        logger.warning("author_delete_rejected id=%s reason=%s", author_id, exc.message)
        return fail(exc)
    except Exception as exc:
        logger.exception("author_delete_failed id=%s", author_id)
        return fail(exc)
