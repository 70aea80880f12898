from app.models.account import Account
from app.models.debt import Debt
from app.models.transaction import Transaction
from app.models.monthly_expense import MonthlyExpense
from app.models.crypto_holding import CryptoHolding
from app.models.profile import Profile
from app.models.audit_log import AuditLog
from app.models.failed_job import FailedJob

__all__ = [
    "Account",
    "Debt",
    "Transaction",
    "MonthlyExpense",
    "CryptoHolding",
    "Profile",
    "AuditLog",
    "FailedJob",
]
