"""Crypto holdings per owner."""

from decimal import Decimal

from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.validation import parse_amount
from app.models.crypto_holding import CryptoHolding
from app.store.base import DocumentStore

log = get_logger(__name__)

SUPPORTED_SYMBOLS = ("BTC", "ETH", "BNB")


def _check_symbol(symbol: str) -> str:
    symbol = (symbol or "").strip().upper()
    if symbol not in SUPPORTED_SYMBOLS:
        raise ValidationError(
            f"Unsupported crypto symbol: {symbol or '<empty>'}",
            details={"field": "symbol", "allowed": list(SUPPORTED_SYMBOLS)},
        )
    return symbol


async def list_holdings(store: DocumentStore, owner_id: str) -> list[CryptoHolding]:
    docs = await store.list(owner_id, CryptoHolding.collection, order_by="symbol")
    return [CryptoHolding.from_document(d) for d in docs]


async def get_holding(store: DocumentStore, owner_id: str, holding_id: str) -> CryptoHolding | None:
    doc = await store.get(owner_id, CryptoHolding.collection, holding_id)
    return CryptoHolding.from_document(doc) if doc else None


async def add_holding(
    store: DocumentStore,
    owner_id: str,
    symbol: str,
    amount: Decimal | str | float | int,
) -> CryptoHolding:
    """Add units of a coin; merges into the existing holding for that symbol if there is one."""
    symbol = _check_symbol(symbol)
    value = parse_amount(amount)
    existing = await store.list(owner_id, CryptoHolding.collection, where={"symbol": symbol}, limit=1)
    if existing:
        holding = CryptoHolding.from_document(existing[0])
        holding.amount += value
    else:
        holding = CryptoHolding(id=store.new_id(), symbol=symbol, amount=value)
    await store.set(owner_id, CryptoHolding.collection, holding.id, holding.to_document())
    log.info("holding_added", holding_id=holding.id, symbol=symbol, amount=str(value))
    return holding


async def update_holding(
    store: DocumentStore,
    owner_id: str,
    holding_id: str,
    amount: Decimal | str | float | int,
) -> CryptoHolding:
    holding = await get_holding(store, owner_id, holding_id)
    if not holding:
        raise NotFoundError("Holding not found")
    holding.amount = parse_amount(amount)
    await store.set(owner_id, CryptoHolding.collection, holding_id, holding.to_document())
    return holding


async def delete_holding(store: DocumentStore, owner_id: str, holding_id: str) -> None:
    if not await get_holding(store, owner_id, holding_id):
        raise NotFoundError("Holding not found")
    await store.delete(owner_id, CryptoHolding.collection, holding_id)
    log.info("holding_deleted", holding_id=holding_id)
