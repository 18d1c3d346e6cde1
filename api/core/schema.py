"""
Table layout for authors and posts.

`ensure_schema` only creates what is missing. Column changes need a real
migration; this is not one.
"""

from __future__ import annotations

from . import db

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS authors (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    name text NOT NULL,
    email text,
    created_at timestamptz NOT NULL DEFAULT now(),
    updated_at timestamptz NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS posts (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    title text NOT NULL,
    content text NOT NULL,
    author_id uuid REFERENCES authors (id) ON DELETE SET NULL,
    created_at timestamptz NOT NULL DEFAULT now(),
    updated_at timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS posts_author_id_idx ON posts (author_id);
"""


async def ensure_schema(conn: db.Executor) -> None:
    await db.execute(conn, SCHEMA_SQL)
