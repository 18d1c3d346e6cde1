"""
Author transfer objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

AUTHOR_FIELDS = ("name", "email", "created_at", "updated_at")


class AuthorDTO(BaseModel):
    """
    Normalized author shape. Absent or falsy source fields stay unset and
    are omitted from `to_dict()`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    email: str | None = None
    created_at: Any = None
    updated_at: Any = None

    @classmethod
    def from_record(cls, data: Any) -> "AuthorDTO":
        if not isinstance(data, Mapping):
            return cls.model_construct()

        values: dict[str, Any] = {}
        if data.get("_id"):
            values["id"] = str(data["_id"])
        for field in AUTHOR_FIELDS:
            if data.get(field):
                values[field] = data[field]
        return cls.model_construct(**values)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
