"""Thin async Razorpay REST client (orders and payments only).

A single httpx.AsyncClient is reused across calls and closed with ``aclose``.
Every call uses HTTP basic auth with the key pair and a bounded timeout.
A timeout raises GatewayTimeoutError; any other transport failure or non-2xx
answer raises GatewayError carrying Razorpay's error description.
"""

import logging
from typing import Any

import httpx

from src.pw_common.errors import GatewayError, GatewayTimeoutError
from src.pw_topup.domain.models import GatewayOrder, GatewayPayment
from src.pw_topup.infrastructure.config import GatewayConfig

logger = logging.getLogger(__name__)


def _error_description(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("description"):
        return str(error["description"])
    return f"HTTP {response.status_code}"


class RazorpayClient:
    def __init__(
        self,
        config: GatewayConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def _client(self) -> httpx.AsyncClient:
        # opened lazily, reopened after aclose
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self._config.api_base,
                auth=(self._config.key_id, self._config.key_secret),
                timeout=self._config.timeout_seconds,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            response = await self._client().request(method, path, json=json)
        except httpx.TimeoutException as exc:
            logger.warning("Razorpay %s %s timed out", method, path)
            raise GatewayTimeoutError() from exc
        except httpx.HTTPError as exc:
            logger.error("Razorpay %s %s failed: %s", method, path, exc)
            raise GatewayError(str(exc) or type(exc).__name__) from exc
        if response.is_error:
            detail = _error_description(response)
            logger.error("Razorpay %s %s -> %d: %s", method, path, response.status_code, detail)
            raise GatewayError(detail)
        return response.json()

    async def create_order(
        self, amount: int, currency: str, receipt: str, notes: dict[str, str]
    ) -> GatewayOrder:
        payload = await self._request(
            "POST",
            "/orders",
            json={"amount": amount, "currency": currency, "receipt": receipt, "notes": notes},
        )
        return GatewayOrder.from_payload(payload)

    async def fetch_payment(self, payment_id: str) -> GatewayPayment:
        return GatewayPayment.from_payload(await self._request("GET", f"/payments/{payment_id}"))

    async def fetch_order(self, order_id: str) -> GatewayOrder:
        return GatewayOrder.from_payload(await self._request("GET", f"/orders/{order_id}"))
