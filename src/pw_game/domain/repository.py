"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_game.domain.models import Game, PlayerProfile


class GameRepositoryProtocol(Protocol):
    async def get(self, db: AsyncSession, game_id: str) -> Game | None: ...

    async def get_for_update(self, db: AsyncSession, game_id: str) -> Game | None: ...

    async def set_turf_price_if_unset(
        self, db: AsyncSession, game_id: str, price: int
    ) -> int: ...

    async def add_player(self, db: AsyncSession, game_id: str, user_id: str) -> None: ...

    async def list_player_profiles(
        self, db: AsyncSession, game_id: str
    ) -> list[PlayerProfile]: ...
