"""
Record identifiers.

The store generates UUIDs. Anything that is a UUID, or a string that
parses as one, counts as a valid identifier.
"""

from __future__ import annotations

import uuid
from typing import Any

from .errors import ValidationFailedError


def is_valid_object_id(value: Any) -> bool:
    if isinstance(value, uuid.UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value.strip())
    except ValueError:
        return False
    return True


def to_object_id(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if not is_valid_object_id(value):
        raise ValidationFailedError(f"Invalid id: {value}", fields=["_id"])
    return uuid.UUID(value.strip())
