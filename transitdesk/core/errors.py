from __future__ import annotations

from dataclasses import dataclass

from transitdesk.core.results import ActionFailure

INVALID_TRANSITION = "INVALID_TRANSITION"
MISSING_FIELD = "MISSING_FIELD"
REASON_TOO_SHORT = "REASON_TOO_SHORT"
NOT_FOUND = "NOT_FOUND"
VERSION_CONFLICT = "VERSION_CONFLICT"
VALIDATION_ERROR = "VALIDATION_ERROR"
TARIFF_NOT_FOUND = "TARIFF_NOT_FOUND"
DUPLICATE_TARIFF = "DUPLICATE_TARIFF"
FORBIDDEN = "FORBIDDEN"


@dataclass
class ServiceFailure(Exception):
    code: str
    message: str
    field: str | None = None
    status_code: int = 400

    def __str__(self) -> str:
        return self.message

    def to_detail(self) -> dict:
        detail = {"code": self.code, "message": self.message}
        if self.field:
            detail["field"] = self.field
        return detail

    def to_result(self) -> ActionFailure:
        return ActionFailure(
            error=self.message,
            code=self.code,
            field=self.field,
            status_code=self.status_code,
        )


class WorkflowFailure(ServiceFailure):
    """Rejected status transition or unknown workflow document."""


class PricingFailure(ServiceFailure):
    """Invalid quote input or unconfigured tariff."""
