"""Domain models for pw_game — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pw_common.enums import GameStatus, SplitPolicy


@dataclass
class Game:
    id: str
    team_name: str
    team_size: int
    game_type: str
    turf_location: str
    turf_date_time: datetime
    created_by: str
    status: str = GameStatus.UPCOMING.value
    turf_price: int | None = None        # paise, total cost of the turf
    captain_id: str | None = None
    players: list[str] = field(default_factory=list)  # user ids in join order

    # Derived from the roster on every access; never stored.
    @property
    def available_spots(self) -> int:
        return self.team_size - len(self.players)

    @property
    def is_open(self) -> bool:
        return self.available_spots > 0 and self.status == GameStatus.UPCOMING.value

    @property
    def price_is_set(self) -> bool:
        return self.turf_price is not None and self.turf_price > 0

    def has_player(self, user_id: str) -> bool:
        return user_id in self.players

    def add_player(self, user_id: str) -> None:
        if self.has_player(user_id):
            raise ValueError(f"user {user_id} already in game {self.id}")
        self.players.append(user_id)

    def split_divisor(self, policy: SplitPolicy) -> int:
        """Number of ways the turf price is split under ``policy``."""
        if policy == SplitPolicy.CAPACITY:
            return self.team_size
        return len(self.players)


@dataclass
class PlayerProfile:
    user_id: str
    name: str
    email: str
