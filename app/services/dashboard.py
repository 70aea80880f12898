"""Derived totals over in-memory collections. Nothing here writes."""

from decimal import Decimal
from typing import Iterable, Mapping

from pydantic import BaseModel

from app.cache.base import EphemeralCache
from app.models.account import Account
from app.models.crypto_holding import CryptoHolding
from app.models.debt import Debt
from app.models.monthly_expense import MonthlyExpense
from app.services import accounts as accounts_service
from app.services import crypto as crypto_service
from app.services import debts as debts_service
from app.services import monthly_expenses as expenses_service
from app.services.rates import cached_crypto_prices
from app.store.base import DocumentStore

ZERO = Decimal("0")


class ExpenseTotals(BaseModel):
    total: Decimal
    paid: Decimal
    pending: Decimal


class DashboardSummary(BaseModel):
    total_balance: Decimal
    total_debt: Decimal
    net_balance: Decimal
    accounts_count: int
    debts_count: int
    expenses: ExpenseTotals
    holdings_value_usd: Decimal | None = None


def total_balance(accounts: Iterable[Account]) -> Decimal:
    return sum((a.balance for a in accounts), ZERO)


def total_debt(debts: Iterable[Debt]) -> Decimal:
    return sum((d.amount for d in debts), ZERO)


def net_balance(accounts: Iterable[Account], debts: Iterable[Debt]) -> Decimal:
    return total_balance(accounts) - total_debt(debts)


def expense_totals(expenses: Iterable[MonthlyExpense]) -> ExpenseTotals:
    expenses = list(expenses)
    paid = sum((e.amount for e in expenses if e.is_paid), ZERO)
    pending = sum((e.amount for e in expenses if not e.is_paid), ZERO)
    return ExpenseTotals(total=paid + pending, paid=paid, pending=pending)


def holdings_value(holdings: Iterable[CryptoHolding], prices: Mapping[str, Decimal]) -> Decimal:
    """Holdings without a known price count as zero."""
    return sum((h.amount * prices[h.symbol] for h in holdings if h.symbol in prices), ZERO)


async def build_dashboard(store: DocumentStore, owner_id: str, cache: EphemeralCache) -> DashboardSummary:
    accounts = await accounts_service.list_accounts(store, owner_id)
    debts = await debts_service.list_debts(store, owner_id)
    expenses = await expenses_service.list_expenses(store, owner_id)
    holdings = await crypto_service.list_holdings(store, owner_id)
    prices = await cached_crypto_prices(cache)
    return DashboardSummary(
        total_balance=total_balance(accounts),
        total_debt=total_debt(debts),
        net_balance=net_balance(accounts, debts),
        accounts_count=len(accounts),
        debts_count=len(debts),
        expenses=expense_totals(expenses),
        holdings_value_usd=holdings_value(holdings, prices) if prices else None,
    )
