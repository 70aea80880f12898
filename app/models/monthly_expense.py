from datetime import datetime
from decimal import Decimal

from pydantic import Field

from app.models.base import StoredModel, utcnow


class MonthlyExpense(StoredModel):
    description: str
    amount: Decimal
    date: datetime = Field(default_factory=utcnow)
    is_paid: bool = False

    collection = "monthly_expenses"
    indexes = [[("date", -1)]]
