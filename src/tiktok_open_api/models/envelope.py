"""Response envelope shared by nearly every TikTok Open API endpoint.

Responses arrive as ``{"data": {...}, "error": {...}}``. Error-only
responses may omit ``data`` or send it empty; it then decodes to the
data model's zero values instead of failing.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, model_validator

DataT = TypeVar("DataT", bound=BaseModel)

OK_CODE = "ok"


class ErrorEnvelope(BaseModel):
    """Business error block attached to every response."""

    code: str = ""
    message: str = ""
    log_id: str = ""

    def is_ok(self) -> bool:
        return self.code == OK_CODE


class Envelope(BaseModel, Generic[DataT]):
    data: DataT
    error: ErrorEnvelope

    @model_validator(mode="before")
    @classmethod
    def default_missing_data(cls, values: Any) -> Any:
        if isinstance(values, dict) and values.get("data") is None:
            return {**values, "data": {}}
        return values
