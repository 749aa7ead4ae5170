"""Gateway-side records as seen by the top-up flow. Amounts in paise."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GatewayOrder:
    id: str
    amount: int
    currency: str
    receipt: str | None = None
    status: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "GatewayOrder":
        return cls(
            id=str(payload["id"]),
            amount=int(payload.get("amount") or 0),
            currency=str(payload.get("currency") or ""),
            receipt=payload.get("receipt"),
            status=payload.get("status"),
        )


@dataclass(frozen=True)
class GatewayPayment:
    id: str
    status: str
    order_id: str | None = None
    amount: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "GatewayPayment":
        return cls(
            id=str(payload["id"]),
            status=str(payload.get("status") or ""),
            order_id=payload.get("order_id"),
            amount=int(payload.get("amount") or 0),
        )

    @property
    def is_captured(self) -> bool:
        return self.status == "captured"
