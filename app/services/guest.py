"""Pre-authentication ledger kept in the ephemeral cache, keyed by the guest client id."""

import uuid
from decimal import Decimal

from app.cache.base import EphemeralCache
from app.core.config import get_settings
from app.core.exceptions import NotFoundError, ReferentialIntegrityError, ValidationError
from app.core.validation import parse_amount, parse_decimal, validate_required_str
from app.models.account import Account
from app.models.debt import Debt


def accounts_key(guest_id: str) -> str:
    return f"guest:{guest_id}:accounts"


def debts_key(guest_id: str) -> str:
    return f"guest:{guest_id}:debts"


async def load_accounts(cache: EphemeralCache, guest_id: str) -> list[Account]:
    return [Account.model_validate(a) for a in await cache.get_json(accounts_key(guest_id), [])]


async def load_debts(cache: EphemeralCache, guest_id: str) -> list[Debt]:
    return [Debt.model_validate(d) for d in await cache.get_json(debts_key(guest_id), [])]


async def _save(cache: EphemeralCache, key: str, items: list[Account] | list[Debt]) -> None:
    await cache.set_json(
        key,
        [i.model_dump(mode="json") for i in items],
        ttl_seconds=get_settings().guest_data_ttl_seconds,
    )


async def create_account(cache: EphemeralCache, guest_id: str, name: str, balance: Decimal | str | int | float = 0) -> Account:
    accounts = await load_accounts(cache, guest_id)
    account = Account(
        id=uuid.uuid4().hex,
        name=validate_required_str(name, "name"),
        balance=parse_decimal(balance, "balance"),
    )
    accounts.append(account)
    await _save(cache, accounts_key(guest_id), accounts)
    return account


async def update_account(cache: EphemeralCache, guest_id: str, account: Account) -> Account:
    accounts = await load_accounts(cache, guest_id)
    for i, existing in enumerate(accounts):
        if existing.id == account.id:
            accounts[i] = Account(
                id=existing.id,
                name=validate_required_str(account.name, "name"),
                balance=parse_decimal(account.balance, "balance"),
            )
            await _save(cache, accounts_key(guest_id), accounts)
            return accounts[i]
    raise NotFoundError("Account not found")


async def delete_account(cache: EphemeralCache, guest_id: str, account_id: str) -> None:
    if any(d.account_id == account_id for d in await load_debts(cache, guest_id)):
        raise ReferentialIntegrityError("Account has associated debts", details={"account_id": account_id})
    accounts = await load_accounts(cache, guest_id)
    remaining = [a for a in accounts if a.id != account_id]
    if len(remaining) == len(accounts):
        raise NotFoundError("Account not found")
    await _save(cache, accounts_key(guest_id), remaining)


async def _check_account_ref(cache: EphemeralCache, guest_id: str, account_id: str | None) -> str | None:
    if not account_id:
        return None
    if not any(a.id == account_id for a in await load_accounts(cache, guest_id)):
        raise ValidationError("Linked account does not exist", details={"field": "account_id"})
    return account_id


async def create_debt(
    cache: EphemeralCache,
    guest_id: str,
    name: str,
    amount: Decimal | str | int | float,
    account_id: str | None = None,
) -> Debt:
    debt = Debt(
        id=uuid.uuid4().hex,
        name=validate_required_str(name, "name"),
        amount=parse_amount(amount),
        account_id=await _check_account_ref(cache, guest_id, account_id),
    )
    debts = await load_debts(cache, guest_id)
    debts.append(debt)
    await _save(cache, debts_key(guest_id), debts)
    return debt


async def update_debt(cache: EphemeralCache, guest_id: str, debt: Debt) -> Debt:
    debts = await load_debts(cache, guest_id)
    for i, existing in enumerate(debts):
        if existing.id == debt.id:
            debts[i] = Debt(
                id=existing.id,
                name=validate_required_str(debt.name, "name"),
                amount=parse_amount(debt.amount),
                account_id=await _check_account_ref(cache, guest_id, debt.account_id),
            )
            await _save(cache, debts_key(guest_id), debts)
            return debts[i]
    raise NotFoundError("Debt not found")


async def delete_debt(cache: EphemeralCache, guest_id: str, debt_id: str) -> None:
    debts = await load_debts(cache, guest_id)
    remaining = [d for d in debts if d.id != debt_id]
    if len(remaining) == len(debts):
        raise NotFoundError("Debt not found")
    await _save(cache, debts_key(guest_id), remaining)
