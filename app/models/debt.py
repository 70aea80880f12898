from decimal import Decimal

from app.models.base import StoredModel


class Debt(StoredModel):
    name: str
    amount: Decimal
    account_id: str | None = None  # weak reference to Account, association only

    collection = "debts"
    indexes = [[("account_id", 1)]]
