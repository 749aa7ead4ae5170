"""GameRepository — games and their rosters.

``get_for_update`` takes a row lock on the game so that concurrent joins and
first-payer price setting for the same game run one after another; callers
re-validate every precondition after acquiring it.

Transaction ownership: the caller commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_common.errors import GameNotFoundError
from src.pw_game.domain.models import Game, PlayerProfile

_GAME_COLUMNS = """
    id, team_name, team_size, game_type, turf_location, turf_date_time,
    turf_price, captain_id, created_by, status
"""

_GET_SQL = text(f"SELECT {_GAME_COLUMNS} FROM games WHERE id = :game_id")

_GET_FOR_UPDATE_SQL = text(
    f"SELECT {_GAME_COLUMNS} FROM games WHERE id = :game_id FOR UPDATE"
)

_PLAYERS_SQL = text("""
    SELECT user_id
    FROM game_players
    WHERE game_id = :game_id
    ORDER BY id ASC
""")

_PLAYER_PROFILES_SQL = text("""
    SELECT gp.user_id, u.name, u.email
    FROM game_players gp
    JOIN users u ON u.id = gp.user_id
    WHERE gp.game_id = :game_id
    ORDER BY gp.id ASC
""")

_SET_PRICE_IF_UNSET_SQL = text("""
    UPDATE games
    SET turf_price = :price,
        updated_at = NOW()
    WHERE id = :game_id
      AND (turf_price IS NULL OR turf_price <= 0)
    RETURNING turf_price
""")

_CURRENT_PRICE_SQL = text("SELECT turf_price FROM games WHERE id = :game_id")

_ADD_PLAYER_SQL = text("""
    INSERT INTO game_players (game_id, user_id)
    VALUES (:game_id, :user_id)
""")

_TOUCH_GAME_SQL = text("UPDATE games SET updated_at = NOW() WHERE id = :game_id")


def _row_to_game(row: object, players: list[str]) -> Game:
    captain_id = row.captain_id  # type: ignore[attr-defined]
    return Game(
        id=str(row.id),  # type: ignore[attr-defined]
        team_name=row.team_name,  # type: ignore[attr-defined]
        team_size=row.team_size,  # type: ignore[attr-defined]
        game_type=row.game_type,  # type: ignore[attr-defined]
        turf_location=row.turf_location,  # type: ignore[attr-defined]
        turf_date_time=row.turf_date_time,  # type: ignore[attr-defined]
        turf_price=row.turf_price,  # type: ignore[attr-defined]
        captain_id=str(captain_id) if captain_id is not None else None,
        created_by=str(row.created_by),  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        players=players,
    )


class GameRepository:
    async def _load(self, db: AsyncSession, sql: object, game_id: str) -> Game | None:
        result = await db.execute(sql, {"game_id": game_id})  # type: ignore[arg-type]
        row = result.fetchone()
        if row is None:
            return None
        players_result = await db.execute(_PLAYERS_SQL, {"game_id": game_id})
        players = [str(r.user_id) for r in players_result.fetchall()]
        return _row_to_game(row, players)

    async def get(self, db: AsyncSession, game_id: str) -> Game | None:
        return await self._load(db, _GET_SQL, game_id)

    async def get_for_update(self, db: AsyncSession, game_id: str) -> Game | None:
        return await self._load(db, _GET_FOR_UPDATE_SQL, game_id)

    async def set_turf_price_if_unset(
        self, db: AsyncSession, game_id: str, price: int
    ) -> int:
        """Set the price once; returns the price now in effect."""
        result = await db.execute(
            _SET_PRICE_IF_UNSET_SQL, {"game_id": game_id, "price": price}
        )
        row = result.fetchone()
        if row is not None:
            return int(row.turf_price)
        current = (await db.execute(_CURRENT_PRICE_SQL, {"game_id": game_id})).fetchone()
        if current is None:
            raise GameNotFoundError(game_id)
        return int(current.turf_price)

    async def add_player(self, db: AsyncSession, game_id: str, user_id: str) -> None:
        await db.execute(_ADD_PLAYER_SQL, {"game_id": game_id, "user_id": user_id})
        await db.execute(_TOUCH_GAME_SQL, {"game_id": game_id})

    async def list_player_profiles(
        self, db: AsyncSession, game_id: str
    ) -> list[PlayerProfile]:
        result = await db.execute(_PLAYER_PROFILES_SQL, {"game_id": game_id})
        return [
            PlayerProfile(user_id=str(r.user_id), name=r.name, email=r.email)
            for r in result.fetchall()
        ]
