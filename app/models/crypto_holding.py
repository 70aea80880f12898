from decimal import Decimal
from typing import Literal

from app.models.base import StoredModel

CryptoSymbol = Literal["BTC", "ETH", "BNB"]


class CryptoHolding(StoredModel):
    symbol: CryptoSymbol
    amount: Decimal

    collection = "crypto_holdings"
    indexes = [[("symbol", 1)]]
