import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette import status

from app.utils.database import get_db
from app.utils.loan_calculations import money
from app.models.monthly_earning_model import MonthlyEarning
from app.schemas.earning_schema import EarningSet, EarningUpdate, EarningOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/earnings", tags=["Earnings"])


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def month_start(d: Optional[date] = None) -> date:
    d = d or date.today()
    return d.replace(day=1)


def require_positive(amount):
    if amount is None or amount <= 0:
        raise HTTPException(400, "Amount must be greater than 0")
    return money(amount)


# =================================================
# 🔹 STATIC ROUTES (ALWAYS FIRST)
# =================================================
@router.get("/current", response_model=EarningOut)
def current_earning(db: Session = Depends(get_db)):
    start = month_start()
    row = db.query(MonthlyEarning).filter(MonthlyEarning.month == start).first()
    if not row:
        return EarningOut(amount=0, month=start)
    return row


@router.get("/history", response_model=list[EarningOut])
def earnings_history(db: Session = Depends(get_db)):
    return db.query(MonthlyEarning).order_by(MonthlyEarning.month.desc()).all()


@router.post("", response_model=EarningOut)
def set_monthly_earning(payload: EarningSet, db: Session = Depends(get_db)):
    amount = require_positive(payload.amount)
    start = month_start(payload.month)

    row = db.query(MonthlyEarning).filter(MonthlyEarning.month == start).first()
    if row:
        row.amount = amount
    else:
        row = MonthlyEarning(month=start, amount=amount)
        db.add(row)

    try:
        db.commit()
    except IntegrityError:
        # another request inserted the same month first
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Earning for this month was just created, retry the request",
        )

    db.refresh(row)
    logger.info("Set earning for %s to %s", start, amount)
    return row


# =================================================
# 🔹 DYNAMIC ROUTES (LAST)
# =================================================
@router.put("/{earning_id}", response_model=EarningOut)
def update_earning(earning_id: int, payload: EarningUpdate, db: Session = Depends(get_db)):
    amount = require_positive(payload.amount)

    row = db.query(MonthlyEarning).filter(MonthlyEarning.earning_id == earning_id).first()
    if not row:
        raise HTTPException(404, "Earning entry not found")

    row.amount = amount
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{earning_id}")
def delete_earning(earning_id: int, db: Session = Depends(get_db)):
    row = db.query(MonthlyEarning).filter(MonthlyEarning.earning_id == earning_id).first()
    if not row:
        raise HTTPException(404, "Earning entry not found")

    db.delete(row)
    db.commit()

    logger.info("Deleted earning %s", earning_id)
    return {"message": "Earning entry deleted successfully"}
