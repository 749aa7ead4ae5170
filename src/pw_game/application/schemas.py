"""Pydantic response schemas for pw_game API."""

from pydantic import BaseModel

from src.pw_common.paise import paise_to_display
from src.pw_game.domain.models import Game


class GameSummary(BaseModel):
    id: str
    team_name: str
    team_size: int
    game_type: str
    status: str
    turf_price_paise: int | None
    players: list[str]
    available_spots: int
    is_open: bool

    @classmethod
    def from_domain(cls, game: Game) -> "GameSummary":
        return cls(
            id=game.id,
            team_name=game.team_name,
            team_size=game.team_size,
            game_type=game.game_type,
            status=game.status,
            turf_price_paise=game.turf_price,
            players=list(game.players),
            available_spots=game.available_spots,
            is_open=game.is_open,
        )


class JoinWithWalletResponse(BaseModel):
    game: GameSummary
    amount_paid_paise: int
    amount_paid_display: str
    new_wallet_balance_paise: int
    new_wallet_balance_display: str
    # False when an earlier GAME_JOIN debit for this game was honoured
    charged: bool

    @classmethod
    def build(
        cls, game: Game, amount_paid: int, balance: int, charged: bool
    ) -> "JoinWithWalletResponse":
        return cls(
            game=GameSummary.from_domain(game),
            amount_paid_paise=amount_paid,
            amount_paid_display=paise_to_display(amount_paid),
            new_wallet_balance_paise=balance,
            new_wallet_balance_display=paise_to_display(balance),
            charged=charged,
        )
