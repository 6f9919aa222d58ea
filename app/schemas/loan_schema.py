from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List, Literal

MAX_TERM_MONTHS = 600


def _blank_to_none(v):
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def _float_to_decimal(v):
    # 60.1 must arrive as Decimal("60.1"), not its binary expansion
    if isinstance(v, float):
        return Decimal(str(v))
    return v


class LoanCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    due_date: date

    category: Optional[str] = None
    recurrence: str = "monthly"

    # optional; principal defaults to amount, remaining_balance to principal
    principal: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    interest_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=6, decimal_places=3)
    term_months: Optional[int] = Field(default=None, ge=1, le=MAX_TERM_MONTHS)
    remaining_balance: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)

    provider: Optional[str] = None
    account_number: Optional[str] = None

    @field_validator("category", "provider", "account_number", mode="before")
    def empty_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("amount", "principal", "interest_rate", "remaining_balance", mode="before")
    def parse_decimal(cls, v):
        return _float_to_decimal(v)


class LoanUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    due_date: Optional[date] = None
    category: Optional[str] = None
    recurrence: Optional[str] = None
    status: Optional[Literal["unpaid", "paid"]] = None

    principal: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    interest_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=6, decimal_places=3)
    term_months: Optional[int] = Field(default=None, ge=1, le=MAX_TERM_MONTHS)
    remaining_balance: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)

    provider: Optional[str] = None
    account_number: Optional[str] = None

    @field_validator("category", "provider", "account_number", mode="before")
    def empty_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("amount", "principal", "interest_rate", "remaining_balance", mode="before")
    def parse_decimal(cls, v):
        return _float_to_decimal(v)

    class Config:
        extra = "forbid"


class LoanOut(BaseModel):
    loan_id: int
    name: str
    category: Optional[str] = None
    amount: float
    due_date: date
    recurrence: str
    status: str

    principal: float
    interest_rate: Optional[float] = None
    term_months: Optional[int] = None
    remaining_balance: Optional[float] = None

    provider: Optional[str] = None
    account_number: Optional[str] = None
    last_paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentCreate(BaseModel):
    # range and precision are checked by apply_payment so a bad amount is a 400, not a 422
    amount: Optional[Decimal] = None
    payment_date: Optional[datetime] = None
    spending_entry_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    def empty_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("amount", mode="before")
    def parse_decimal(cls, v):
        return _float_to_decimal(v)


class PaymentOut(BaseModel):
    payment_id: int
    loan_id: int
    amount: float
    payment_date: datetime
    payment_month: date
    balance_after: float
    spending_entry_id: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    payment: PaymentOut
    loan: LoanOut


class ScheduleRowOut(BaseModel):
    month: int
    payment: float
    principal_paid: float
    interest: float
    balance_after: float


class AmortizationOut(BaseModel):
    loan_id: int
    loan_name: str
    principal: float
    annual_interest_rate: float
    term_months: int
    monthly_payment: float
    total_paid: float
    total_interest: float
    schedule: List[ScheduleRowOut]
