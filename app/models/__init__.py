# Automatically load all models so metadata knows them
from app.models.loan_model import Loan
from app.models.loan_payment_model import LoanPayment
from app.models.monthly_earning_model import MonthlyEarning
