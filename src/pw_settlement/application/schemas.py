"""Pydantic request/response schemas for pw_settlement API."""

import uuid

from pydantic import BaseModel, Field

from src.pw_common.datetime_utils import isoformat_or_none
from src.pw_common.enums import PaymentStatus
from src.pw_common.paise import paise_to_display
from src.pw_game.domain.models import PlayerProfile
from src.pw_wallet.domain.models import WalletTransaction


class PayShareRequest(BaseModel):
    game_id: uuid.UUID
    # Only consulted while the game has no price yet
    total_price_paise: int | None = Field(None, gt=0)


class PayShareResponse(BaseModel):
    game_id: str
    amount_paid_paise: int
    amount_paid_display: str
    total_price_paise: int
    new_wallet_balance_paise: int
    new_wallet_balance_display: str
    already_paid: bool
    paid_at: str | None

    @classmethod
    def build(
        cls,
        game_id: str,
        entry: WalletTransaction,
        total_price: int,
        balance: int,
        already_paid: bool,
    ) -> "PayShareResponse":
        return cls(
            game_id=game_id,
            amount_paid_paise=entry.amount,
            amount_paid_display=paise_to_display(entry.amount),
            total_price_paise=total_price,
            new_wallet_balance_paise=balance,
            new_wallet_balance_display=paise_to_display(balance),
            already_paid=already_paid,
            paid_at=isoformat_or_none(entry.created_at),
        )


class PlayerPaymentStatus(BaseModel):
    user_id: str
    name: str
    email: str
    payment_status: str
    amount_paid_paise: int
    paid_at: str | None
    amount_due_paise: int | None

    @classmethod
    def from_profile(
        cls,
        profile: PlayerProfile,
        entry: WalletTransaction | None,
        amount_per_player: int | None,
    ) -> "PlayerPaymentStatus":
        if entry is not None:
            return cls(
                user_id=profile.user_id,
                name=profile.name,
                email=profile.email,
                payment_status=PaymentStatus.PAID.value,
                amount_paid_paise=entry.amount,
                paid_at=isoformat_or_none(entry.created_at),
                amount_due_paise=0,
            )
        return cls(
            user_id=profile.user_id,
            name=profile.name,
            email=profile.email,
            payment_status=PaymentStatus.PENDING.value,
            amount_paid_paise=0,
            paid_at=None,
            amount_due_paise=amount_per_player,
        )


class GameStatusResponse(BaseModel):
    game_id: str
    team_name: str
    total_price_paise: int | None
    amount_per_player_paise: int | None
    split_policy: str
    paid_count: int
    pending_count: int
    total_collected_paise: int
    players: list[PlayerPaymentStatus]
