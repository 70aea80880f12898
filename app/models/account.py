from decimal import Decimal

from app.models.base import StoredModel


class Account(StoredModel):
    name: str
    balance: Decimal = Decimal("0")  # signed; may go negative

    collection = "accounts"
