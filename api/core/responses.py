"""
Uniform response envelope: `{status, result?, error?, message?}`.

Every service outcome goes through `ResponseDTO.build` before it leaves the
API. When `error` is an object, it is reduced to `{message, stack?, trace?}`:

- message: first string among `message`, `code`, `error`, `name`
- stack / trace: only outside production

Scalars and sequences are passed through untouched.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .errors import ApiError

MESSAGE_FIELDS = ("message", "code", "error", "name")
DEBUG_FIELDS = ("stack", "trace")

_UNPROBED_TYPES = (str, bytes, int, float, bool, list, tuple, set, frozenset)


def _exception_field(error: BaseException, name: str) -> Any:
    value = getattr(error, name, None)
    if isinstance(value, str) and (value or name != "message"):
        return value

    if name == "message":
        text = str(error)
        return text or None
    if name == "name":
        return type(error).__name__
    if name == "stack" and error.__traceback__ is not None:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return value


def _field(error: Any, name: str) -> Any:
    if isinstance(error, Mapping):
        return error.get(name)
    if isinstance(error, BaseException):
        return _exception_field(error, name)
    try:
        return getattr(error, name, None)
    except Exception:
        # Properties on arbitrary objects may raise; treat as absent.
        return None


def error_details(error: Any, *, production: bool) -> dict[str, str]:
    """
    Derive `{message, stack?, trace?}` from an arbitrary error value.
    Returns an empty dict when nothing usable was found.
    """
    if error is None or isinstance(error, _UNPROBED_TYPES):
        return {}

    details: dict[str, str] = {}
    for name in MESSAGE_FIELDS:
        value = _field(error, name)
        if isinstance(value, str):
            details["message"] = value
            break

    if not production:
        for name in DEBUG_FIELDS:
            value = _field(error, name)
            if isinstance(value, str):
                details[name] = value

    return details


class ResponseDTO(BaseModel):
    status: int | None = None
    result: Any = None
    error: Any = None
    message: str | None = None

    @classmethod
    def build(
        cls,
        *,
        status: int | None = None,
        result: Any = None,
        error: Any = None,
        message: str | None = None,
        production: bool = False,
    ) -> "ResponseDTO":
        envelope = cls(status=status, result=result, error=error, message=message)
        details = error_details(error, production=production)
        if details:
            envelope.error = details
        return envelope

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.status is not None:
            data["status"] = self.status
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        if self.message is not None:
            data["message"] = self.message
        return data


def ok(result: Any) -> dict[str, Any]:
    return {"status": 200, "result": result}


def fail(error: BaseException) -> dict[str, Any]:
    """
    Outcome for a caught error. Typed API errors carry their own status;
    anything else is a 500 with the raw error attached.
    """
    if isinstance(error, ApiError):
        return {"status": error.status_code, "error": error}
    return {"status": 500, "error": error}


def to_response(outcome: Mapping[str, Any], *, production: bool) -> JSONResponse:
    """
    Wrap a service outcome and serialize it with the envelope status as the
    HTTP status code.
    """
    envelope = ResponseDTO.build(
        status=outcome.get("status"),
        result=outcome.get("result"),
        error=outcome.get("error"),
        message=outcome.get("message"),
        production=production,
    )
    return JSONResponse(
        status_code=envelope.status or 200,
        content=jsonable_encoder(envelope.to_dict()),
    )
