"""
API error variants.

Services never let these escape: they are returned inside the outcome
mapping and reduced to `{message, stack?, trace?}` by `core.responses`.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class NotFoundError(ApiError):
    status_code = 404


class ValidationFailedError(ApiError):
    status_code = 400

    def __init__(
        self,
        message: str,
        *,
        fields: list[str] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.fields = list(fields or [])


# Driver failures are explicit and separable from other runtime errors.
class PersistenceError(ApiError):
    status_code = 500


def not_found(kind: str, resource_id: Any) -> NotFoundError:
    return NotFoundError(f"{kind} with id {resource_id} not found")
