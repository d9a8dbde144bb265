from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .base import BaseSchema, normalize_country_code


class PurchaseRequestCreate(BaseModel):
    product_name: str = Field(min_length=2, max_length=255)
    product_url: Optional[str] = Field(default=None, max_length=1000)
    quantity: int = Field(default=1, ge=1, le=10000)
    delivery_address: str = Field(min_length=3, max_length=255)
    delivery_country_code: str

    # Client-side estimate; settled on delivery.
    product_cost: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    delivery_cost: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    currency: str = Field(default="EUR", min_length=3, max_length=3)

    @field_validator("delivery_country_code")
    @classmethod
    def iso_country(cls, v: str) -> str:
        return normalize_country_code(v)

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.upper()


class PurchaseRequestRead(BaseSchema):
    id: int
    request_number: str
    product_name: str
    product_url: Optional[str] = None
    quantity: int
    delivery_address: str
    delivery_country_code: str
    product_cost: Optional[Decimal] = None
    delivery_cost: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None
    total_cost: Optional[Decimal] = None
    currency: str
    status: str
    actual_delivery_date: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime


class PurchaseCostBreakdown(BaseModel):
    product_cost: Decimal
    delivery_cost: Decimal
    service_fee: Decimal
    total_cost: Decimal
