"""Route-level tests: auth, envelope, error mapping. Services are mocked."""

import uuid
from collections.abc import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.pw_common.database import get_db_session
from src.pw_common.errors import GatewayUnavailableError, InsufficientBalanceError
from src.pw_game.api.router import get_join_service
from src.pw_gateway.auth.dependencies import get_current_user
from src.pw_settlement.api.router import get_settlement_service
from src.pw_topup.api.router import get_topup_service, topup_rate_limit
from src.pw_topup.application.schemas import CreateOrderResponse
from src.pw_wallet.api.router import get_wallet_service
from src.pw_wallet.application.schemas import BalanceResponse

USER_ID = uuid.UUID("6f1c2d3e-0000-4000-8000-0000000000aa")
GAME_ID = "6f1c2d3e-0000-4000-8000-000000000001"


async def _fake_db() -> AsyncGenerator[AsyncMock, None]:
    yield AsyncMock()


@pytest.fixture
def authed() -> None:
    app.dependency_overrides[get_db_session] = _fake_db
    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(
        id=USER_ID, name="Asha", email="asha@example.com", is_active=True
    )


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_missing_token_is_401(client: AsyncClient) -> None:
    app.dependency_overrides[get_db_session] = _fake_db
    resp = await client.get("/api/v1/wallet/balance")
    assert resp.status_code == 401


async def test_balance_envelope(client: AsyncClient, authed: None) -> None:
    service = AsyncMock()
    service.get_balance.return_value = BalanceResponse.from_paise(str(USER_ID), 7500)
    app.dependency_overrides[get_wallet_service] = lambda: service

    resp = await client.get("/api/v1/wallet/balance", headers={"x-request-id": "req_test123"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == 0
    assert body["data"]["balance_paise"] == 7500
    assert body["data"]["balance_display"] == "₹75.00"
    assert body["request_id"] == "req_test123"
    assert resp.headers["x-request-id"] == "req_test123"
    assert service.get_balance.call_args.args[1] == str(USER_ID)


async def test_transactions_limit_validated(client: AsyncClient, authed: None) -> None:
    app.dependency_overrides[get_wallet_service] = lambda: AsyncMock()
    resp = await client.get("/api/v1/wallet/transactions?limit=500")
    assert resp.status_code == 400
    assert resp.json()["code"] == 9003


async def test_join_insufficient_balance_details(client: AsyncClient, authed: None) -> None:
    service = AsyncMock()
    service.join_with_wallet.side_effect = InsufficientBalanceError(2500, 1000)
    app.dependency_overrides[get_join_service] = lambda: service

    resp = await client.post(f"/api/v1/games/{GAME_ID}/join-with-wallet")

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == 2001
    assert body["data"]["shortfall_paise"] == 1500
    assert service.join_with_wallet.call_args.args[1:] == (str(USER_ID), GAME_ID)


async def test_join_rejects_malformed_game_id(client: AsyncClient, authed: None) -> None:
    app.dependency_overrides[get_join_service] = lambda: AsyncMock()
    resp = await client.post("/api/v1/games/not-a-uuid/join-with-wallet")
    assert resp.status_code == 400
    assert resp.json()["code"] == 9003


async def test_pay_game_validates_body(client: AsyncClient, authed: None) -> None:
    app.dependency_overrides[get_settlement_service] = lambda: AsyncMock()
    resp = await client.post(
        "/api/v1/wallet/pay-game", json={"game_id": GAME_ID, "total_price_paise": -10}
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == 9003


async def test_create_order(client: AsyncClient, authed: None) -> None:
    service = AsyncMock()
    service.create_order.return_value = CreateOrderResponse(
        order_id="order_1", amount=50000, currency="INR", key_id="rzp_test_key", receipt="r"
    )
    app.dependency_overrides[get_topup_service] = lambda: service
    app.dependency_overrides[topup_rate_limit] = lambda: None

    resp = await client.post("/api/v1/wallet/create-order", json={"amount_paise": 50000})

    assert resp.status_code == 200
    assert resp.json()["data"]["order_id"] == "order_1"
    service.create_order.assert_awaited_once_with(str(USER_ID), 50000)


async def test_create_order_unavailable_is_503(client: AsyncClient, authed: None) -> None:
    service = AsyncMock()
    service.create_order.side_effect = GatewayUnavailableError()
    app.dependency_overrides[get_topup_service] = lambda: service
    app.dependency_overrides[topup_rate_limit] = lambda: None

    resp = await client.post("/api/v1/wallet/create-order", json={"amount_paise": 50000})

    assert resp.status_code == 503
    assert resp.json()["code"] == 5001


async def test_unhandled_error_is_500_envelope(client: AsyncClient, authed: None) -> None:
    service = AsyncMock()
    service.get_balance.side_effect = RuntimeError("boom")
    app.dependency_overrides[get_wallet_service] = lambda: service

    resp = await client.get("/api/v1/wallet/balance")

    assert resp.status_code == 500
    assert resp.json()["code"] == 9002
