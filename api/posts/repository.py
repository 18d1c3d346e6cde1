"""
Post persistence (raw SQL).

Records are plain dicts: `_id, title, content, author, created_at, updated_at`.
`author` is the stored author id, or the full author dict when the query
was asked to populate it (None if the reference no longer resolves).
"""

from __future__ import annotations

import uuid
from typing import Any

from core import db

POST_COLUMNS = "p.id, p.title, p.content, p.author_id, p.created_at, p.updated_at"

AUTHOR_JOIN_COLUMNS = """
    a.id AS author__id,
    a.name AS author__name,
    a.email AS author__email,
    a.created_at AS author__created_at,
    a.updated_at AS author__updated_at
"""

AUTHOR_JOIN = "LEFT JOIN authors a ON a.id = p.author_id"


def _select_columns(populate_author: bool) -> str:
    if populate_author:
        return f"{POST_COLUMNS}, {AUTHOR_JOIN_COLUMNS}"
    return POST_COLUMNS


def _join(populate_author: bool) -> str:
    return AUTHOR_JOIN if populate_author else ""


def _author_from_row(row: dict[str, Any]) -> dict[str, Any] | None:
    if row.get("author__id") is None:
        return None
    return {
        "_id": row["author__id"],
        "name": row.get("author__name"),
        "email": row.get("author__email"),
        "created_at": row.get("author__created_at"),
        "updated_at": row.get("author__updated_at"),
    }


def _to_record(row: dict[str, Any] | None, *, populate_author: bool) -> dict[str, Any] | None:
    if row is None:
        return None
    return {
        "_id": row["id"],
        "title": row.get("title"),
        "content": row.get("content"),
        "author": _author_from_row(row) if populate_author else row.get("author_id"),
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }


class PostRepository:
    def __init__(self, conn: db.Executor) -> None:
        self._conn = conn

    async def create(self, draft: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a post. The returned author is the stored id, not expanded.
        """
        row = await db.fetch_one(
            self._conn,
            """
            INSERT INTO posts AS p (title, content, author_id)
            VALUES ($1, $2, $3)
            RETURNING p.id, p.title, p.content, p.author_id, p.created_at, p.updated_at
            """,
            draft.get("title"),
            draft.get("content"),
            draft.get("author"),
        )
        if row is None:
            raise RuntimeError("Failed to create post.")
        return _to_record(row, populate_author=False)

    async def find(self, *, populate_author: bool = False) -> list[dict[str, Any]]:
        rows = await db.fetch_all(
            self._conn,
            f"""
            SELECT {_select_columns(populate_author)}
            FROM posts p
            {_join(populate_author)}
            ORDER BY p.created_at DESC, p.id
            """,
        )
        return [_to_record(row, populate_author=populate_author) for row in rows]

    async def find_by_id(
        self,
        post_id: uuid.UUID,
        *,
        populate_author: bool = False,
    ) -> dict[str, Any] | None:
        row = await db.fetch_one(
            self._conn,
            f"""
            SELECT {_select_columns(populate_author)}
            FROM posts p
            {_join(populate_author)}
            WHERE p.id = $1
            """,
            post_id,
        )
        return _to_record(row, populate_author=populate_author)

    async def find_by_id_and_update(
        self,
        post_id: uuid.UUID,
        changes: dict[str, Any],
        *,
        populate_author: bool = False,
    ) -> dict[str, Any] | None:
        """
        Only keys present in `changes` are written; `updated_at` is always bumped.
        Returns the post as it is after the update.
        """
        row = await db.fetch_one(
            self._conn,
            f"""
            WITH p AS (
                UPDATE posts
                SET title = COALESCE($2, title),
                    content = COALESCE($3, content),
                    author_id = COALESCE($4, author_id),
                    updated_at = now()
                WHERE id = $1
                RETURNING id, title, content, author_id, created_at, updated_at
            )
            SELECT {_select_columns(populate_author)}
            FROM p
            {_join(populate_author)}
            """,
            post_id,
            changes.get("title"),
            changes.get("content"),
            changes.get("author"),
        )
        return _to_record(row, populate_author=populate_author)

    async def find_by_id_and_delete(self, post_id: uuid.UUID) -> dict[str, Any] | None:
        row = await db.fetch_one(
            self._conn,
            """
            DELETE FROM posts AS p
            WHERE p.id = $1
            RETURNING p.id, p.title, p.content, p.author_id, p.created_at, p.updated_at
            """,
            post_id,
        )
        return _to_record(row, populate_author=False)
