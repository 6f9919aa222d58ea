from sqlalchemy import (
    Column, Integer, Date, DateTime, Numeric, Text, ForeignKey
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.utils.database import Base


class LoanPayment(Base):
    __tablename__ = "loan_payments"

    payment_id = Column(Integer, primary_key=True, index=True)

    loan_id = Column(Integer, ForeignKey("loans.loan_id", ondelete="CASCADE"), nullable=False, index=True)

    payment_date = Column(DateTime, server_default=func.now(), nullable=False)
    payment_month = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    # loan remaining_balance right after this payment
    balance_after = Column(Numeric(12, 2), nullable=False)

    # spending entries live outside this service; plain correlation id
    spending_entry_id = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    created_on = Column(DateTime, server_default=func.now())

    loan = relationship("Loan", back_populates="payments")
