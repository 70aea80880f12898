from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from app.models.base import StoredModel, utcnow

TransactionType = Literal["deposit", "withdrawal"]


class Transaction(StoredModel):
    account_id: str
    account_name: str  # snapshot at write time; not updated when the account is renamed
    amount: Decimal  # unsigned magnitude
    type: TransactionType
    date: datetime = Field(default_factory=utcnow)
    description: str | None = None

    collection = "transactions"
    indexes = [[("date", -1)], [("account_id", 1)]]
