from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from .base import BaseSchema


class StatusTransitionRequest(BaseModel):
    """
    Requested status change. Only the fields the target status needs are
    read; the rest are ignored.
    """
    to_status: str = Field(min_length=1, max_length=30)
    notes: str | None = Field(default=None, max_length=500)
    reason: str | None = Field(default=None, max_length=1000)

    scheduled_date: datetime | None = None
    actual_pickup_date: datetime | None = None
    actual_delivery_date: datetime | None = None

    # Purchase settlement (LIVRE)
    actual_product_cost: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    delivery_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    service_fee: Decimal | None = Field(default=None, gt=0, decimal_places=2)

    # Optimistic concurrency: when given, must match the current row version.
    expected_version: int | None = Field(default=None, ge=1)

    @field_validator("to_status")
    @classmethod
    def uppercase_status(cls, v: str) -> str:
        return v.strip().upper()


class HistoryEntryRead(BaseSchema):
    id: int
    event_type: str
    old_status: str | None = None
    new_status: str
    performed_by: str
    notes: str | None = None
    created_at: datetime


class AllowedTransitionsRead(BaseModel):
    current_status: str
    is_terminal: bool
    allowed_targets: list[str]
