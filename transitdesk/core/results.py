"""
Uniform result envelope returned by service entry points.

    ActionSuccess(data=...)            -> {"success": true, "data": ...}
    ActionFailure(error=..., code=...) -> {"success": false, "error": ..., "code": ..., "field": ...}

Routers render failures with `status_code`; services never let a domain
failure escape as an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class ActionSuccess(Generic[T]):
    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class ActionFailure:
    error: str
    code: str
    field: str | None = None
    status_code: int = 400
    success: Literal[False] = False

    def to_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {
            "success": False,
            "error": self.error,
            "code": self.code,
        }
        if self.field:
            envelope["field"] = self.field
        return envelope


ActionResult = Union[ActionSuccess[T], ActionFailure]
