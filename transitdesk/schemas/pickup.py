from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .base import BaseSchema, normalize_country_code


class PickupRequestCreate(BaseModel):
    shipment_id: Optional[int] = Field(default=None, ge=1)
    pickup_address: str = Field(min_length=3, max_length=255)
    pickup_country_code: str
    contact_name: str = Field(min_length=2, max_length=120)
    contact_phone: str = Field(min_length=6, max_length=40)
    special_instructions: Optional[str] = Field(default=None, max_length=500)

    @field_validator("pickup_country_code")
    @classmethod
    def iso_country(cls, v: str) -> str:
        return normalize_country_code(v)


class PickupRequestRead(BaseSchema):
    id: int
    request_number: str
    shipment_id: Optional[int] = None
    pickup_address: str
    pickup_country_code: str
    contact_name: str
    contact_phone: str
    special_instructions: Optional[str] = None
    status: str
    scheduled_date: Optional[datetime] = None
    actual_pickup_date: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime
