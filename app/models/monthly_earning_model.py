from sqlalchemy import Column, Integer, Date, DateTime, Numeric
from sqlalchemy.sql import func
from app.utils.database import Base


class MonthlyEarning(Base):
    __tablename__ = "monthly_earnings"

    earning_id = Column(Integer, primary_key=True, index=True)

    # always the first day of the month; one row per month
    month = Column(Date, nullable=False, unique=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)

    created_on = Column(DateTime, server_default=func.now())
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now())
