"""Domain models for pw_wallet — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Wallet:
    id: str
    user_id: str
    balance: int             # paise, materialized running total of the ledger
    version: int
    created_at: datetime
    updated_at: datetime


@dataclass
class WalletTransaction:
    """One immutable ledger entry. Created once, never updated or deleted."""

    id: int                          # BIGSERIAL
    user_id: str
    type: str                        # TransactionType value
    amount: int                      # paise, always > 0; sign comes from type
    reason: str                      # TransactionReason value
    balance_after: int               # paise, wallet balance right after this entry
    game_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_order_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    # populated by ledger queries that join games
    game_team_name: str | None = None
    game_type: str | None = None


@dataclass
class LedgerPage:
    entries: list[WalletTransaction]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1
