import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import case
from sqlalchemy.orm import Session
from starlette import status

from app.core.errors import InvalidInputError, InvalidPaymentError
from app.utils.database import get_db
from app.utils.loan_calculations import (
    LOAN_STATUS_PAID,
    LOAN_STATUS_UNPAID,
    apply_payment,
    compute_amortization_schedule,
    mark_paid,
    mark_unpaid,
    money,
)
from app.models.loan_model import Loan
from app.models.loan_payment_model import LoanPayment

from app.schemas.loan_schema import (
    LoanCreate,
    LoanUpdate,
    LoanOut,
    PaymentCreate,
    PaymentOut,
    PaymentResult,
    ScheduleRowOut,
    AmortizationOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/loans", tags=["Loans"])


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def get_loan_or_404(db: Session, loan_id: int, for_update: bool = False) -> Loan:
    q = db.query(Loan).filter(Loan.loan_id == loan_id)
    if for_update:
        # serialises concurrent payments on the same loan row
        q = q.with_for_update()
    loan = q.first()
    if not loan:
        raise HTTPException(404, "Loan not found")
    return loan


# =================================================
# 🔹 STATIC ROUTES (ALWAYS FIRST)
# =================================================
@router.get("", response_model=list[LoanOut])
def list_loans(db: Session = Depends(get_db)):
    unpaid_first = case((Loan.status == LOAN_STATUS_UNPAID, 0), else_=1)
    return (
        db.query(Loan)
        .order_by(unpaid_first, Loan.due_date.asc(), Loan.loan_id.asc())
        .all()
    )


@router.get("/active", response_model=list[LoanOut])
def list_active_loans(db: Session = Depends(get_db)):
    return (
        db.query(Loan)
        .filter(Loan.status == LOAN_STATUS_UNPAID)
        .order_by(Loan.due_date.asc(), Loan.loan_id.asc())
        .all()
    )


@router.get("/paid", response_model=list[LoanOut])
def list_paid_loans(db: Session = Depends(get_db)):
    return (
        db.query(Loan)
        .filter(Loan.status == LOAN_STATUS_PAID)
        .order_by(Loan.last_paid_at.desc(), Loan.loan_id.desc())
        .all()
    )


@router.post("", response_model=LoanOut, status_code=status.HTTP_201_CREATED)
def create_loan(payload: LoanCreate, db: Session = Depends(get_db)):
    if payload.amount <= 0:
        raise HTTPException(400, "Amount must be greater than 0")

    amount = money(payload.amount)
    principal = money(payload.principal) if payload.principal is not None else amount
    remaining = (
        money(payload.remaining_balance)
        if payload.remaining_balance is not None
        else principal
    )

    loan = Loan(
        name=payload.name.strip(),
        category=payload.category,
        amount=amount,
        due_date=payload.due_date,
        recurrence=payload.recurrence,
        status=LOAN_STATUS_UNPAID,
        principal=principal,
        interest_rate=payload.interest_rate,
        term_months=payload.term_months,
        remaining_balance=remaining,
        provider=payload.provider,
        account_number=payload.account_number,
    )

    db.add(loan)
    db.commit()
    db.refresh(loan)

    logger.info("Created loan %s (%s), principal=%s", loan.loan_id, loan.name, principal)
    return loan


# =================================================
# 🔹 DYNAMIC ROUTES (LAST)
# =================================================
@router.get("/{loan_id}", response_model=LoanOut)
def get_loan(loan_id: int, db: Session = Depends(get_db)):
    return get_loan_or_404(db, loan_id)


@router.put("/{loan_id}", response_model=LoanOut)
def update_loan(loan_id: int, payload: LoanUpdate, db: Session = Depends(get_db)):
    loan = get_loan_or_404(db, loan_id)

    # only supplied, non-null fields change
    changes = payload.model_dump(exclude_none=True)
    for key in ("amount", "principal", "remaining_balance"):
        if key in changes:
            changes[key] = money(changes[key])
    if "name" in changes:
        changes["name"] = changes["name"].strip()

    for key, value in changes.items():
        setattr(loan, key, value)

    db.commit()
    db.refresh(loan)
    return loan


@router.delete("/{loan_id}")
def delete_loan(loan_id: int, db: Session = Depends(get_db)):
    loan = get_loan_or_404(db, loan_id)

    # payments go with it (cascade)
    db.delete(loan)
    db.commit()

    logger.info("Deleted loan %s", loan_id)
    return {"message": "Loan deleted successfully", "loan_id": loan_id}


# =================================================
# ✅ PAYMENTS
# =================================================
@router.post(
    "/{loan_id}/payments",
    response_model=PaymentResult,
    status_code=status.HTTP_201_CREATED,
)
def record_payment(loan_id: int, payload: PaymentCreate, db: Session = Depends(get_db)):
    try:
        loan = get_loan_or_404(db, loan_id, for_update=True)

        try:
            outcome = apply_payment(
                loan,
                payload.amount,
                payment_date=payload.payment_date,
                notes=payload.notes,
                spending_entry_id=payload.spending_entry_id,
            )
        except InvalidPaymentError as e:
            raise HTTPException(400, str(e))

        entry = outcome.payment
        payment = LoanPayment(
            loan_id=loan.loan_id,
            amount=money(entry.amount),
            payment_date=entry.payment_date,
            payment_month=entry.payment_month,
            balance_after=money(entry.balance_after),
            spending_entry_id=entry.spending_entry_id,
            notes=entry.notes,
        )
        db.add(payment)

        previous_status = loan.status
        loan.remaining_balance = money(outcome.updated_loan.remaining_balance)
        loan.status = outcome.updated_loan.status
        loan.last_paid_at = outcome.updated_loan.last_paid_at

        # payment row and loan row land in the same commit
        db.commit()

    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("Error recording payment for loan %s", loan_id)
        raise HTTPException(500, "Failed to record loan payment")

    db.refresh(payment)
    db.refresh(loan)

    logger.info(
        "Recorded payment %s on loan %s: amount=%s balance_after=%s",
        payment.payment_id, loan.loan_id, payment.amount, payment.balance_after,
        extra={"extra": {
            "loan_id": loan.loan_id,
            "payment_id": payment.payment_id,
            "amount": str(payment.amount),
            "balance_after": str(payment.balance_after),
        }},
    )
    if previous_status != loan.status:
        logger.info("Loan %s status %s -> %s", loan.loan_id, previous_status, loan.status)

    return PaymentResult(
        payment=PaymentOut.model_validate(payment),
        loan=LoanOut.model_validate(loan),
    )


@router.get("/{loan_id}/payments", response_model=list[PaymentOut])
def list_payments(loan_id: int, db: Session = Depends(get_db)):
    get_loan_or_404(db, loan_id)

    return (
        db.query(LoanPayment)
        .filter(LoanPayment.loan_id == loan_id)
        .order_by(LoanPayment.payment_date.desc(), LoanPayment.payment_id.desc())
        .all()
    )


# =================================================
# ✅ MANUAL STATUS
# =================================================
@router.put("/{loan_id}/paid", response_model=LoanOut)
def mark_loan_paid(loan_id: int, db: Session = Depends(get_db)):
    loan = get_loan_or_404(db, loan_id)

    for key, value in mark_paid().items():
        setattr(loan, key, value)

    db.commit()
    db.refresh(loan)

    logger.info("Loan %s marked paid", loan_id)
    return loan


@router.put("/{loan_id}/unpaid", response_model=LoanOut)
def mark_loan_unpaid(loan_id: int, db: Session = Depends(get_db)):
    loan = get_loan_or_404(db, loan_id)

    for key, value in mark_unpaid().items():
        setattr(loan, key, value)

    db.commit()
    db.refresh(loan)

    logger.info("Loan %s marked unpaid", loan_id)
    return loan


# =================================================
# ✅ AMORTIZATION (read-only projection)
# =================================================
@router.get("/{loan_id}/amortization", response_model=AmortizationOut)
def loan_amortization(loan_id: int, db: Session = Depends(get_db)):
    loan = get_loan_or_404(db, loan_id)

    try:
        sched = compute_amortization_schedule(
            loan.principal, loan.interest_rate, loan.term_months
        )
    except InvalidInputError as e:
        raise HTTPException(400, str(e))

    return AmortizationOut(
        loan_id=loan.loan_id,
        loan_name=loan.name,
        principal=float(money(sched.principal)),
        annual_interest_rate=float(sched.annual_rate_percent),
        term_months=sched.term_months,
        monthly_payment=float(money(sched.monthly_payment)),
        total_paid=float(money(sched.total_paid)),
        total_interest=float(money(sched.total_interest)),
        schedule=[
            ScheduleRowOut(
                month=r.month,
                payment=float(money(r.payment)),
                principal_paid=float(money(r.principal_paid)),
                interest=float(money(r.interest)),
                balance_after=float(money(r.balance_after)),
            )
            for r in sched.rows
        ],
    )
