"""Shared response envelopes."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """Outcome of a state-changing operation.

    Mutating endpoints return this envelope so clients can show ``message``
    directly; ``data`` carries the affected record when there is one.
    """

    success: bool = Field(description="Whether the operation succeeded")
    message: str = Field(description="Human-readable outcome", examples=["Weekly report successfully approved"])
    data: Optional[Any] = Field(default=None, description="The affected record, if any")

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(success=True, message=message, data=data)
