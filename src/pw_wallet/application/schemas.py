"""Pydantic response schemas for pw_wallet API."""

from pydantic import BaseModel

from src.pw_common.datetime_utils import isoformat_or_none
from src.pw_common.enums import PaymentStatus
from src.pw_common.paise import paise_to_display
from src.pw_wallet.domain.models import LedgerPage, WalletTransaction


class TransactionItem(BaseModel):
    id: int
    type: str
    reason: str
    amount_paise: int
    amount_display: str
    balance_after_paise: int
    game_id: str | None
    game_team_name: str | None
    game_type: str | None
    razorpay_payment_id: str | None
    razorpay_order_id: str | None
    description: str | None
    created_at: str | None  # ISO8601 string

    @classmethod
    def from_domain(cls, entry: WalletTransaction) -> "TransactionItem":
        return cls(
            id=entry.id,
            type=entry.type,
            reason=entry.reason,
            amount_paise=entry.amount,
            amount_display=paise_to_display(entry.amount),
            balance_after_paise=entry.balance_after,
            game_id=entry.game_id,
            game_team_name=entry.game_team_name,
            game_type=entry.game_type,
            razorpay_payment_id=entry.razorpay_payment_id,
            razorpay_order_id=entry.razorpay_order_id,
            description=entry.description,
            created_at=isoformat_or_none(entry.created_at),
        )


class GamePaymentItem(BaseModel):
    """A per-game payment record, derived from a GAME_JOIN debit."""

    game_id: str
    game_team_name: str | None
    amount_paise: int
    amount_display: str
    status: str
    paid_at: str | None

    @classmethod
    def from_domain(cls, entry: WalletTransaction) -> "GamePaymentItem":
        return cls(
            game_id=entry.game_id or "",
            game_team_name=entry.game_team_name,
            amount_paise=entry.amount,
            amount_display=paise_to_display(entry.amount),
            status=PaymentStatus.PAID.value,
            paid_at=isoformat_or_none(entry.created_at),
        )


class BalanceResponse(BaseModel):
    user_id: str
    balance_paise: int
    balance_display: str

    @classmethod
    def from_paise(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            balance_paise=balance,
            balance_display=paise_to_display(balance),
        )


class WalletSummaryResponse(BaseModel):
    balance_paise: int
    balance_display: str
    transactions: list[TransactionItem]
    payments: list[GamePaymentItem]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class TransactionListResponse(BaseModel):
    transactions: list[TransactionItem]
    pagination: Pagination

    @classmethod
    def from_page(cls, page: LedgerPage) -> "TransactionListResponse":
        return cls(
            transactions=[TransactionItem.from_domain(e) for e in page.entries],
            pagination=Pagination(
                page=page.page,
                limit=page.limit,
                total=page.total,
                total_pages=page.total_pages,
                has_next_page=page.has_next_page,
                has_prev_page=page.has_prev_page,
            ),
        )
