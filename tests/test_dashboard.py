from decimal import Decimal

import pytest

from app.models.account import Account
from app.models.crypto_holding import CryptoHolding
from app.models.debt import Debt
from app.models.monthly_expense import MonthlyExpense
from app.services import accounts as accounts_service
from app.services import debts as debts_service
from app.services.dashboard import (
    build_dashboard,
    expense_totals,
    holdings_value,
    net_balance,
    total_balance,
    total_debt,
)


def test_net_balance():
    accounts = [Account(name="A", balance=Decimal("100")), Account(name="B", balance=Decimal("50"))]
    debts = [Debt(name="Loan", amount=Decimal("30"))]
    assert total_balance(accounts) == Decimal("150")
    assert total_debt(debts) == Decimal("30")
    assert net_balance(accounts, debts) == Decimal("120")


def test_empty_collections_sum_to_zero():
    assert total_balance([]) == 0
    assert total_debt([]) == 0
    assert net_balance([], []) == 0


def test_negative_balances_count():
    accounts = [Account(name="Card", balance=Decimal("-40")), Account(name="Cash", balance=Decimal("10"))]
    assert net_balance(accounts, [Debt(name="X", amount=Decimal("5"))]) == Decimal("-35")


def test_expense_totals():
    expenses = [
        MonthlyExpense(description="Rent", amount=Decimal("500"), is_paid=True),
        MonthlyExpense(description="Gym", amount=Decimal("30")),
        MonthlyExpense(description="Phone", amount=Decimal("20")),
    ]
    totals = expense_totals(expenses)
    assert totals.total == Decimal("550")
    assert totals.paid == Decimal("500")
    assert totals.pending == Decimal("50")


def test_holdings_value_ignores_unknown_prices():
    holdings = [
        CryptoHolding(symbol="BTC", amount=Decimal("0.5")),
        CryptoHolding(symbol="ETH", amount=Decimal("2")),
    ]
    assert holdings_value(holdings, {"BTC": Decimal("60000")}) == Decimal("30000")


@pytest.mark.asyncio
async def test_build_dashboard(store, cache):
    a = await accounts_service.create_account(store, "o", "Cash", 100)
    await accounts_service.create_account(store, "o", "Bank", 50)
    await debts_service.create_debt(store, "o", "Loan", 30, account_id=a.id)
    summary = await build_dashboard(store, "o", cache)
    assert summary.net_balance == Decimal("120")
    assert summary.accounts_count == 2
    assert summary.debts_count == 1
    assert summary.holdings_value_usd is None
