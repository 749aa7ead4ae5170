"""Tests for RazorpayClient against an httpx.MockTransport."""

import base64
import json

import httpx
import pytest

from src.pw_common.errors import GatewayError, GatewayTimeoutError
from src.pw_topup.infrastructure.config import GatewayConfig
from src.pw_topup.infrastructure.razorpay_client import RazorpayClient

CONFIG = GatewayConfig(key_id="rzp_test_key", key_secret="secret", timeout_seconds=2.0)


def _client(handler) -> RazorpayClient:
    return RazorpayClient(CONFIG, transport=httpx.MockTransport(handler))


async def test_create_order_posts_to_orders_with_basic_auth() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        body = json.loads(request.content)
        seen["body"] = body
        return httpx.Response(
            200,
            json={
                "id": "order_1",
                "amount": body["amount"],
                "currency": body["currency"],
                "receipt": body["receipt"],
                "status": "created",
            },
        )

    order = await _client(handler).create_order(
        amount=50000, currency="INR", receipt="wallet_u_1",
        notes={"userId": "u", "type": "WALLET_TOPUP"},
    )

    assert seen["path"] == "/v1/orders"
    assert seen["auth"] == "Basic " + base64.b64encode(b"rzp_test_key:secret").decode()
    assert seen["body"]["notes"] == {"userId": "u", "type": "WALLET_TOPUP"}
    assert order.id == "order_1"
    assert order.amount == 50000
    assert order.receipt == "wallet_u_1"


async def test_fetch_payment() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/payments/pay_1"
        return httpx.Response(
            200,
            json={"id": "pay_1", "status": "captured", "order_id": "order_1", "amount": 50000},
        )

    payment = await _client(handler).fetch_payment("pay_1")
    assert payment.is_captured
    assert payment.order_id == "order_1"
    assert payment.amount == 50000


async def test_fetch_order() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/orders/order_1"
        return httpx.Response(200, json={"id": "order_1", "amount": 30000, "currency": "INR"})

    order = await _client(handler).fetch_order("order_1")
    assert order.amount == 30000


async def test_timeout_maps_to_gateway_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(GatewayTimeoutError):
        await _client(handler).fetch_payment("pay_1")


async def test_error_response_carries_description() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"error": {"code": "BAD_REQUEST_ERROR", "description": "The id provided does not exist"}},
        )

    with pytest.raises(GatewayError) as exc_info:
        await _client(handler).fetch_payment("pay_x")
    assert "The id provided does not exist" in exc_info.value.message
    assert exc_info.value.http_status == 500


async def test_connection_error_maps_to_gateway_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayError):
        await _client(handler).create_order(50000, "INR", "r", {})


async def test_reuses_one_http_client_until_closed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/v1/payments/"):
            return httpx.Response(200, json={"id": "pay_1", "status": "captured", "amount": 100})
        return httpx.Response(200, json={"id": "order_1", "amount": 100, "currency": "INR"})

    client = _client(handler)
    await client.fetch_payment("pay_1")
    http = client._client()
    await client.fetch_order("order_1")
    assert client._client() is http

    await client.aclose()
    assert http.is_closed
    payment = await client.fetch_payment("pay_1")
    assert payment.amount == 100
    await client.aclose()
