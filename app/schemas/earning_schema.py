# app/schemas/earning_schema.py

from pydantic import BaseModel, Field, field_validator
from datetime import date
from decimal import Decimal
from typing import Optional


def _float_to_decimal(v):
    if isinstance(v, float):
        return Decimal(str(v))
    return v


class EarningSet(BaseModel):
    # sign is checked in the router so a bad amount is a 400, not a 422
    amount: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    month: Optional[date] = None  # any day of the month; defaults to today

    @field_validator("amount", mode="before")
    def parse_decimal(cls, v):
        return _float_to_decimal(v)

    class Config:
        extra = "forbid"


class EarningUpdate(BaseModel):
    amount: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)

    @field_validator("amount", mode="before")
    def parse_decimal(cls, v):
        return _float_to_decimal(v)

    class Config:
        extra = "forbid"


class EarningOut(BaseModel):
    earning_id: Optional[int] = None
    amount: float
    month: date

    class Config:
        from_attributes = True
