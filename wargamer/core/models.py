"""wargamer.core.models

The JSON envelope, as dictated by the remote API.

Success: ``{"status": "ok", "meta": {...}, "data": ...}``
Failure: ``{"status": "error", "error": {"code", "message", "field", "value"}}``
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ErrorPayload(BaseModel):
    code: int | str | None = None
    message: str = "UNKNOWN_ERROR"
    field: str | None = None
    value: Any = None

    model_config = {"frozen": True}


class Envelope(BaseModel):
    status: str | None = None
    meta: Any = None
    data: Any = None
    error: ErrorPayload | None = None

    model_config = {"frozen": True, "extra": "allow"}

    @property
    def failed(self) -> bool:
        return self.error is not None or self.status == "error"
