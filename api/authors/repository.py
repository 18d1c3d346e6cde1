"""
Author persistence (raw SQL).

Rows come back as plain dicts keyed the way the API exposes them
(`_id` instead of `id`).
"""

from __future__ import annotations

import uuid
from typing import Any

from core import db

AUTHOR_COLUMNS = "id, name, email, created_at, updated_at"


def _to_record(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    record = dict(row)
    record["_id"] = record.pop("id")
    return record


class AuthorRepository:
    def __init__(self, conn: db.Executor) -> None:
        self._conn = conn

    async def create(self, draft: dict[str, Any]) -> dict[str, Any]:
        row = await db.fetch_one(
            self._conn,
            f"""
            INSERT INTO authors (name, email)
            VALUES ($1, $2)
            RETURNING {AUTHOR_COLUMNS}
            """,
            draft.get("name"),
            draft.get("email"),
        )
        if row is None:
            raise RuntimeError("Failed to create author.")
        return _to_record(row)

    async def find(self) -> list[dict[str, Any]]:
        rows = await db.fetch_all(
            self._conn,
            f"""
            SELECT {AUTHOR_COLUMNS}
            FROM authors
            ORDER BY created_at DESC, id
            """,
        )
        return [_to_record(row) for row in rows]

    async def find_by_id(self, author_id: uuid.UUID) -> dict[str, Any] | None:
        row = await db.fetch_one(
            self._conn,
            f"""
            SELECT {AUTHOR_COLUMNS}
            FROM authors
            WHERE id = $1
            """,
            author_id,
        )
        return _to_record(row)

    async def find_by_id_and_update(
        self,
        author_id: uuid.UUID,
        changes: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Only keys present in `changes` are written; `updated_at` is always bumped.
        """
        row = await db.fetch_one(
            self._conn,
            f"""
            UPDATE authors
            SET name = COALESCE($2, name),
                email = COALESCE($3, email),
                updated_at = now()
            WHERE id = $1
            RETURNING {AUTHOR_COLUMNS}
            """,
            author_id,
            changes.get("name"),
            changes.get("email"),
        )
        return _to_record(row)

    async def find_by_id_and_delete(self, author_id: uuid.UUID) -> dict[str, Any] | None:
        row = await db.fetch_one(
            self._conn,
            f"""
            DELETE FROM authors
            WHERE id = $1
            RETURNING {AUTHOR_COLUMNS}
            """,
            author_id,
        )
        return _to_record(row)
