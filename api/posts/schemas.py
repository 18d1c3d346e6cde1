"""
Post transfer objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from authors.schemas import AuthorDTO
from core import ids

POST_FIELDS = ("title", "content", "created_at", "updated_at")


def _resolve_author(value: Any) -> AuthorDTO | None:
    # A bare id becomes {"_id": id}; an embedded author must carry its own _id.
    if ids.is_valid_object_id(value):
        return AuthorDTO.model_construct(id=str(ids.to_object_id(value)))
    if isinstance(value, Mapping) and value.get("_id"):
        return AuthorDTO.from_record(value)
    return None


class PostDTO(BaseModel):
    """
    Normalized post shape.

    Only present, truthy source fields are copied and `_id` is always a
    string. The author is either embedded (`{"_id": ...}` at minimum) or
    left out entirely; malformed input degrades by omission and never
    raises.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, alias="_id")
    title: str | None = None
    content: str | None = None
    author: AuthorDTO | None = None
    created_at: Any = None
    updated_at: Any = None

    @classmethod
    def from_record(cls, data: Any) -> "PostDTO":
        if not isinstance(data, Mapping):
            return cls.model_construct()

        values: dict[str, Any] = {}
        if data.get("_id"):
            values["id"] = str(data["_id"])
        for field in POST_FIELDS:
            if data.get(field):
                values[field] = data[field]
        if data.get("author"):
            author = _resolve_author(data["author"])
            if author is not None:
                values["author"] = author
        return cls.model_construct(**values)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
