"""Pydantic request/response schemas for pw_topup API."""

from pydantic import BaseModel

from src.pw_common.paise import paise_to_display
from src.pw_wallet.domain.models import WalletTransaction


class CreateOrderRequest(BaseModel):
    # Validated by the service so that non-positive amounts get the wallet error code
    amount_paise: int


class CreateOrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key_id: str
    receipt: str


class VerifyAndCreditRequest(BaseModel):
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None


class VerifyAndCreditResponse(BaseModel):
    transaction_id: int
    credited_amount_paise: int
    credited_amount_display: str
    new_wallet_balance_paise: int
    new_wallet_balance_display: str
    razorpay_payment_id: str | None
    razorpay_order_id: str | None
    already_processed: bool

    @classmethod
    def build(
        cls, entry: WalletTransaction, balance: int, already_processed: bool
    ) -> "VerifyAndCreditResponse":
        return cls(
            transaction_id=entry.id,
            credited_amount_paise=entry.amount,
            credited_amount_display=paise_to_display(entry.amount),
            new_wallet_balance_paise=balance,
            new_wallet_balance_display=paise_to_display(balance),
            razorpay_payment_id=entry.razorpay_payment_id,
            razorpay_order_id=entry.razorpay_order_id,
            already_processed=already_processed,
        )
