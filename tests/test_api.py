"""End-to-end API flows over the in-memory backends."""

import pytest
from httpx import AsyncClient

from app.deps import SESSION_COOKIE_NAME

pytestmark = pytest.mark.asyncio


async def test_sign_up_establishes_session(client: AsyncClient):
    r = await client.get("/v1/auth/session")
    assert r.json() == {"state": "none", "user": None}

    r = await client.post("/v1/auth/sign-up", json={"email": "New@Example.com", "password": "s3cret-pass"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "new@example.com"
    assert r.json()["migration"]["status"] == "nothing_to_migrate"

    r = await client.get("/v1/auth/session")
    assert r.json()["state"] == "established"
    r = await client.get("/v1/auth/me")
    assert r.status_code == 200
    assert r.json()["email"] == "new@example.com"


async def test_unauthenticated_requests_rejected(client: AsyncClient):
    r = await client.get("/v1/accounts")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"


async def test_sign_in_with_wrong_password(client: AsyncClient):
    await client.post("/v1/auth/sign-up", json={"email": "a@example.com", "password": "s3cret-pass"})
    r = await client.post("/v1/auth/sign-in", json={"email": "a@example.com", "password": "nope-nope"})
    assert r.status_code == 401


async def test_sign_out_invalidates_old_cookie(signed_in: AsyncClient):
    old_cookie = signed_in.cookies.get(SESSION_COOKIE_NAME)
    assert old_cookie

    r = await signed_in.post("/v1/auth/sign-out")
    assert r.status_code == 200
    signed_in.cookies.set(SESSION_COOKIE_NAME, old_cookie)
    r = await signed_in.get("/v1/auth/me")
    assert r.status_code == 401


async def test_accounts_crud_and_delete_guard(signed_in: AsyncClient):
    r = await signed_in.post("/v1/accounts", json={"name": "Cash", "balance": 100})
    assert r.status_code == 201
    account = r.json()
    assert account["balance"] == "100"

    r = await signed_in.post("/v1/debts", json={"name": "Loan", "amount": "50", "account_id": account["id"]})
    assert r.status_code == 201
    debt = r.json()

    r = await signed_in.delete(f"/v1/accounts/{account['id']}")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "REFERENTIAL_INTEGRITY"
    assert r.json()["error"]["details"]["debt_ids"] == [debt["id"]]

    r = await signed_in.put(f"/v1/accounts/{account['id']}", json={"name": "Wallet", "balance": "80"})
    assert r.json()["name"] == "Wallet"

    assert (await signed_in.delete(f"/v1/debts/{debt['id']}")).status_code == 200
    assert (await signed_in.delete(f"/v1/accounts/{account['id']}")).status_code == 200
    r = await signed_in.get("/v1/accounts")
    assert r.json()["accounts"] == []


async def test_transaction_updates_balance(signed_in: AsyncClient):
    account = (await signed_in.post("/v1/accounts", json={"name": "Cash", "balance": 100})).json()

    r = await signed_in.post(
        "/v1/transactions",
        json={"account_id": account["id"], "amount": "30", "type": "withdrawal", "description": "Groceries"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["account"]["balance"] == "70"
    assert body["transaction"]["account_name"] == "Cash"
    assert body["transaction"]["amount"] == "30"

    r = await signed_in.get("/v1/transactions")
    assert len(r.json()["transactions"]) == 1


async def test_transaction_rejects_bad_amount(signed_in: AsyncClient):
    account = (await signed_in.post("/v1/accounts", json={"name": "Cash", "balance": 100})).json()
    r = await signed_in.post(
        "/v1/transactions",
        json={"account_id": account["id"], "amount": "-5", "type": "deposit"},
    )
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    r = await signed_in.get("/v1/accounts")
    assert r.json()["accounts"][0]["balance"] == "100"


async def test_transaction_missing_account(signed_in: AsyncClient):
    r = await signed_in.post("/v1/transactions", json={"account_id": "nope", "amount": 5, "type": "deposit"})
    assert r.status_code == 404


async def test_owners_are_isolated(client: AsyncClient):
    await client.post("/v1/auth/sign-up", json={"email": "one@example.com", "password": "s3cret-pass"})
    await client.post("/v1/accounts", json={"name": "Mine", "balance": 1})
    await client.post("/v1/auth/sign-out")

    await client.post("/v1/auth/sign-up", json={"email": "two@example.com", "password": "s3cret-pass"})
    r = await client.get("/v1/accounts")
    assert r.json()["accounts"] == []


async def test_guest_data_migrated_on_sign_up(client: AsyncClient):
    cash = (await client.post("/v1/guest/accounts", json={"name": "Cash", "balance": 100})).json()
    r = await client.post("/v1/guest/debts", json={"name": "Loan", "amount": 50, "account_id": cash["id"]})
    assert r.status_code == 201

    r = await client.post("/v1/auth/sign-up", json={"email": "guest@example.com", "password": "s3cret-pass"})
    migration = r.json()["migration"]
    assert migration["status"] == "migrated"
    assert migration["accounts"] == 1
    assert migration["debts"] == 1

    accounts = (await client.get("/v1/accounts")).json()["accounts"]
    debts = (await client.get("/v1/debts")).json()["debts"]
    assert [a["name"] for a in accounts] == ["Cash"]
    assert debts[0]["account_id"] == accounts[0]["id"]
    assert debts[0]["account_id"] != cash["id"]

    # Signing in again does not duplicate anything
    await client.post("/v1/auth/sign-in", json={"email": "guest@example.com", "password": "s3cret-pass"})
    assert len((await client.get("/v1/accounts")).json()["accounts"]) == 1


async def test_guest_delete_guard(client: AsyncClient):
    cash = (await client.post("/v1/guest/accounts", json={"name": "Cash"})).json()
    await client.post("/v1/guest/debts", json={"name": "Loan", "amount": 50, "account_id": cash["id"]})
    r = await client.delete(f"/v1/guest/accounts/{cash['id']}")
    assert r.status_code == 409


async def test_dashboard_and_expenses(signed_in: AsyncClient):
    a = (await signed_in.post("/v1/accounts", json={"name": "A", "balance": 100})).json()
    await signed_in.post("/v1/accounts", json={"name": "B", "balance": 50})
    await signed_in.post("/v1/debts", json={"name": "Loan", "amount": 30, "account_id": a["id"]})
    e = (await signed_in.post("/v1/monthly-expenses", json={"description": "Rent", "amount": 40})).json()
    await signed_in.post(f"/v1/monthly-expenses/{e['id']}/toggle-paid")

    r = await signed_in.get("/v1/dashboard")
    body = r.json()
    assert body["net_balance"] == "120"
    assert body["expenses"]["paid"] == "40"

    r = await signed_in.get("/v1/monthly-expenses")
    assert r.json()["totals"]["pending"] == "0"


async def test_crypto_holdings_value(signed_in: AsyncClient):
    r = await signed_in.post("/v1/crypto/holdings", json={"symbol": "BTC", "amount": "0.5"})
    assert r.status_code == 201
    r = await signed_in.get("/v1/crypto/holdings")
    assert r.json()["total_value_usd"] is None

    await signed_in.get("/v1/rates/crypto")
    r = await signed_in.get("/v1/crypto/holdings")
    assert r.json()["total_value_usd"] == "30000.0"


async def test_rates_endpoints(client: AsyncClient):
    r = await client.get("/v1/rates/fiat")
    assert r.status_code == 200
    assert r.json()["kind"] == "fiat"
    assert len(r.json()["rates"]) == 2

    r = await client.get("/v1/rates/crypto")
    symbols = [rate["symbol"] for rate in r.json()["rates"]]
    assert symbols == ["BTC", "ETH", "BNB"]


async def test_demo_request_once_per_client(client: AsyncClient):
    r = await client.get("/v1/demo-requests")
    assert r.json() == {"requested": False}

    r = await client.post("/v1/demo-requests", json={"email": "lead@example.com"})
    assert r.status_code == 200
    r = await client.post("/v1/demo-requests", json={"email": "lead@example.com"})
    assert r.status_code == 409
    assert (await client.get("/v1/demo-requests")).json() == {"requested": True}


async def test_demo_request_invalid_email(client: AsyncClient):
    r = await client.post("/v1/demo-requests", json={"email": "nope"})
    assert r.status_code == 422


async def test_oversized_amount_rejected(signed_in: AsyncClient):
    account = (await signed_in.post("/v1/accounts", json={"name": "Cash", "balance": 100})).json()
    r = await signed_in.post(
        "/v1/transactions",
        json={"account_id": account["id"], "amount": "9e999999", "type": "deposit"},
    )
    assert r.status_code == 422
    assert r.json()["error"]["details"] == {"field": "amount"}
