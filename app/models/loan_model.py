# app/models/loan_model.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    Numeric,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.utils.database import Base


class Loan(Base):
    __tablename__ = "loans"

    __table_args__ = (
        Index("ix_loans_status_due", "status", "due_date"),
    )

    loan_id = Column(Integer, primary_key=True, index=True)

    name = Column(String(120), nullable=False)
    category = Column(String(60), nullable=True)

    # scheduled monthly installment the user entered
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    recurrence = Column(String(20), nullable=False, server_default="monthly")

    # unpaid / paid
    status = Column(String(10), nullable=False, server_default="unpaid", index=True)

    principal = Column(Numeric(12, 2), nullable=False)
    interest_rate = Column(Numeric(6, 3), nullable=True)  # annual %, e.g. 4.5
    term_months = Column(Integer, nullable=True)
    remaining_balance = Column(Numeric(12, 2), nullable=True)

    provider = Column(String(120), nullable=True)
    account_number = Column(String(60), nullable=True)

    last_paid_at = Column(DateTime, nullable=True)

    created_on = Column(DateTime, server_default=func.now(), nullable=True)
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    payments = relationship(
        "LoanPayment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanPayment.payment_date.desc()",
        lazy="selectin",
    )
