"""Accounts and debts through the store client."""

from decimal import Decimal

import pytest

from app.core.exceptions import NotFoundError, ReferentialIntegrityError, ValidationError
from app.models.account import Account
from app.services import accounts as accounts_service
from app.services import debts as debts_service

pytestmark = pytest.mark.asyncio

OWNER = "owner-1"


async def test_create_and_list_account(store):
    a = await accounts_service.create_account(store, OWNER, "  Cash ", "100.50")
    assert a.id
    assert a.name == "Cash"
    assert a.balance == Decimal("100.50")
    listed = await accounts_service.list_accounts(store, OWNER)
    assert [x.id for x in listed] == [a.id]
    assert await accounts_service.list_accounts(store, "someone-else") == []


async def test_create_account_rejects_blank_name(store):
    with pytest.raises(ValidationError):
        await accounts_service.create_account(store, OWNER, "   ", 10)
    assert await accounts_service.list_accounts(store, OWNER) == []


async def test_negative_opening_balance_is_allowed(store):
    a = await accounts_service.create_account(store, OWNER, "Card", -25)
    assert a.balance == Decimal("-25")


async def test_delete_account_without_debts(store):
    a = await accounts_service.create_account(store, OWNER, "Cash", 100)
    await accounts_service.delete_account(store, OWNER, a.id)
    assert await accounts_service.list_accounts(store, OWNER) == []


async def test_delete_account_with_debt_is_refused(store):
    a = await accounts_service.create_account(store, OWNER, "Cash", 100)
    d = await debts_service.create_debt(store, OWNER, "Loan", 50, account_id=a.id)
    with pytest.raises(ReferentialIntegrityError) as exc:
        await accounts_service.delete_account(store, OWNER, a.id)
    assert exc.value.message == "Account has associated debts"
    assert exc.value.details["debt_ids"] == [d.id]
    assert [x.id for x in await accounts_service.list_accounts(store, OWNER)] == [a.id]


async def test_delete_account_after_debt_removed(store):
    a = await accounts_service.create_account(store, OWNER, "Cash", 100)
    d = await debts_service.create_debt(store, OWNER, "Loan", 50, account_id=a.id)
    await debts_service.delete_debt(store, OWNER, d.id)
    await accounts_service.delete_account(store, OWNER, a.id)
    assert await accounts_service.list_accounts(store, OWNER) == []


async def test_delete_missing_account(store):
    with pytest.raises(NotFoundError):
        await accounts_service.delete_account(store, OWNER, "nope")


async def test_update_account(store):
    a = await accounts_service.create_account(store, OWNER, "Cash", 100)
    updated = await accounts_service.update_account(store, OWNER, Account(id=a.id, name="Wallet", balance=Decimal("80")))
    assert updated.name == "Wallet"
    assert (await accounts_service.get_account(store, OWNER, a.id)).balance == Decimal("80")


async def test_update_missing_account(store):
    with pytest.raises(NotFoundError):
        await accounts_service.update_account(store, OWNER, Account(id="ghost", name="X", balance=Decimal("1")))


async def test_debt_without_account(store):
    d = await debts_service.create_debt(store, OWNER, "Friend", "30")
    assert d.account_id is None
    assert d.amount == Decimal("30")


async def test_debt_amount_must_be_positive(store):
    with pytest.raises(ValidationError):
        await debts_service.create_debt(store, OWNER, "Loan", 0)


async def test_debt_must_link_existing_account(store):
    with pytest.raises(ValidationError):
        await debts_service.create_debt(store, OWNER, "Loan", 10, account_id="missing")


async def test_deleting_debt_never_touches_account(store):
    a = await accounts_service.create_account(store, OWNER, "Cash", 100)
    d = await debts_service.create_debt(store, OWNER, "Loan", 50, account_id=a.id)
    await debts_service.delete_debt(store, OWNER, d.id)
    assert (await accounts_service.get_account(store, OWNER, a.id)).balance == Decimal("100")
