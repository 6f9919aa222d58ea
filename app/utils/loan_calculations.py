from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from app.core.errors import InvalidInputError, InvalidPaymentError

LOAN_STATUS_UNPAID = "unpaid"
LOAN_STATUS_PAID = "paid"

ZERO = Decimal("0")
CENT = Decimal("0.01")

# largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")
MAX_TERM_MONTHS = 600


def money(x) -> Decimal:
    """Always return 2-decimal Decimal with HALF_UP rounding."""
    if x is None:
        x = 0
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_decimal(x) -> Decimal:
    """Exact Decimal parse, no rounding. Floats go through str() first."""
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


# -------------------------------------------------
# Amortization
# -------------------------------------------------
@dataclass(frozen=True)
class ScheduleRow:
    month: int
    payment: Decimal
    principal_paid: Decimal
    interest: Decimal
    balance_after: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int
    monthly_rate: Decimal
    monthly_payment: Decimal
    total_paid: Decimal
    total_interest: Decimal
    rows: list[ScheduleRow] = field(default_factory=list)


def _parse_amortization_inputs(principal, annual_rate_percent, term_months):
    if annual_rate_percent is None or term_months is None:
        raise InvalidInputError(
            "Loan amortization requires interest_rate and term_months"
        )
    if principal is None:
        raise InvalidInputError("Loan amortization requires a principal")

    try:
        p = to_decimal(principal)
        rate = to_decimal(annual_rate_percent)
        term = to_decimal(term_months)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError("principal, interest_rate and term_months must be numeric")

    if not p.is_finite() or p <= 0:
        raise InvalidInputError("principal must be > 0")
    if not rate.is_finite() or rate < 0:
        raise InvalidInputError("interest_rate must be >= 0")
    if not term.is_finite() or term != term.to_integral_value() or term < 1:
        raise InvalidInputError("term_months must be a whole number >= 1")
    if term > MAX_TERM_MONTHS:
        raise InvalidInputError(f"term_months must be <= {MAX_TERM_MONTHS}")

    return p, rate, int(term)


def compute_amortization_schedule(
        principal,
        annual_rate_percent,
        term_months,
) -> AmortizationSchedule:
    """
    Fixed-payment monthly schedule (annuity formula):

      r       = rate% / 100 / 12
      payment = P * r * (1+r)^n / ((1+r)^n - 1)      (P / n when r == 0)

    Each month: interest = balance * r, principal_paid = payment - interest,
    balance = max(0, balance - principal_paid).

    Values keep full Decimal precision between months; round with money()
    only when presenting.

    Example:
      principal=1200, rate=12, term=12 => payment 106.62, interest 79.42
    """
    p, rate, term = _parse_amortization_inputs(principal, annual_rate_percent, term_months)

    monthly_rate = rate / Decimal("100") / Decimal("12")

    if monthly_rate == 0:
        payment = p / Decimal(term)
    else:
        growth = (Decimal("1") + monthly_rate) ** term
        payment = p * monthly_rate * growth / (growth - Decimal("1"))

    rows = []
    balance = p
    for month in range(1, term + 1):
        interest = balance * monthly_rate
        principal_paid = payment - interest
        balance = max(ZERO, balance - principal_paid)
        rows.append(
            ScheduleRow(
                month=month,
                payment=payment,
                principal_paid=principal_paid,
                interest=interest,
                balance_after=balance,
            )
        )

    total_paid = payment * Decimal(term)

    return AmortizationSchedule(
        principal=p,
        annual_rate_percent=rate,
        term_months=term,
        monthly_rate=monthly_rate,
        monthly_payment=payment,
        total_paid=total_paid,
        total_interest=total_paid - p,
        rows=rows,
    )


# -------------------------------------------------
# Payments
# -------------------------------------------------
@dataclass(frozen=True)
class LoanUpdate:
    remaining_balance: Decimal
    status: str
    last_paid_at: datetime


@dataclass(frozen=True)
class PaymentEntry:
    amount: Decimal
    payment_date: datetime
    payment_month: date
    balance_after: Decimal
    notes: Optional[str] = None
    spending_entry_id: Optional[int] = None


@dataclass(frozen=True)
class PaymentOutcome:
    """Loan fields and payment record that must be written together."""

    updated_loan: LoanUpdate
    payment: PaymentEntry


def apply_payment(
        loan,
        amount,
        payment_date: Optional[datetime] = None,
        notes: Optional[str] = None,
        spending_entry_id: Optional[int] = None,
) -> PaymentOutcome:
    """
    Apply a payment to a loan without touching the loan object.

      current     = remaining_balance (or principal when unset)
      new_balance = max(0, current - amount)
      status      = "paid" if new_balance <= 0 else unchanged

    A partial payment never flips a paid loan back to unpaid.
    """
    if amount is None:
        raise InvalidPaymentError("Valid payment amount required")
    try:
        amt = to_decimal(amount)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPaymentError("Valid payment amount required")
    if not amt.is_finite() or amt <= 0:
        raise InvalidPaymentError("Valid payment amount required")
    if amt > MAX_AMOUNT:
        raise InvalidPaymentError(f"Payment amount must not exceed {MAX_AMOUNT}")
    if amt != amt.quantize(CENT):
        raise InvalidPaymentError("Payment amount cannot include fractions of a cent")

    current = loan.remaining_balance
    if current is None:
        current = loan.principal
    current = to_decimal(current)

    new_balance = max(ZERO, current - amt)
    new_status = LOAN_STATUS_PAID if new_balance <= 0 else loan.status

    paid_at = payment_date or datetime.now()

    return PaymentOutcome(
        updated_loan=LoanUpdate(
            remaining_balance=new_balance,
            status=new_status,
            last_paid_at=paid_at,
        ),
        payment=PaymentEntry(
            amount=amt,
            payment_date=paid_at,
            payment_month=date(paid_at.year, paid_at.month, 1),
            balance_after=new_balance,
            notes=notes,
            spending_entry_id=spending_entry_id,
        ),
    )


# -------------------------------------------------
# Manual status changes
# -------------------------------------------------
def mark_paid(now: Optional[datetime] = None) -> dict:
    """Explicit mark-paid: status=paid, last_paid_at=now. Balance untouched."""
    return {"status": LOAN_STATUS_PAID, "last_paid_at": now or datetime.now()}


def mark_unpaid() -> dict:
    """Explicit mark-unpaid: status=unpaid, last_paid_at cleared."""
    return {"status": LOAN_STATUS_UNPAID, "last_paid_at": None}
