"""Uniform success/data/error wrapper for cross-boundary replies.

A reply is exactly one of::

    {"success": true, "data": ...}
    {"success": true}
    {"success": false, "error": "..."}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        to_wire = getattr(data, "to_wire", None)
        if callable(to_wire):
            return to_wire()
        return data.model_dump(mode="json")
    if isinstance(data, list | tuple):
        return [_to_jsonable(item) for item in data]
    return data


class Envelope(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    data: Any = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> Envelope:
        if self.success and self.error is not None:
            raise ValueError("a successful envelope cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("a failed envelope needs an error message")
        if not self.success and "data" in self.model_fields_set:
            raise ValueError("a failed envelope cannot carry data")
        return self

    @classmethod
    def ok(cls, data: Any) -> Envelope:
        return cls(success=True, data=_to_jsonable(data))

    @classmethod
    def ok_void(cls) -> Envelope:
        return cls(success=True)

    @classmethod
    def fail(cls, error: str) -> Envelope:
        return cls(success=False, error=error)

    def to_wire(self) -> dict[str, Any]:
        """Dump only the keys that belong to this shape."""
        if not self.success:
            return {"success": False, "error": self.error}
        if "data" in self.model_fields_set:
            return {"success": True, "data": self.data}
        return {"success": True}
