"""Unit tests for GameRepository using a mocked AsyncSession."""

import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pw_common.errors import GameNotFoundError
from src.pw_game.infrastructure.persistence import GameRepository

GAME_ID = uuid.UUID("6f1c2d3e-0000-4000-8000-000000000001")
OWNER = uuid.UUID("6f1c2d3e-0000-4000-8000-0000000000aa")
PLAYER = uuid.UUID("6f1c2d3e-0000-4000-8000-0000000000bb")


def _game_row(turf_price: int | None = 5000) -> MagicMock:
    row = MagicMock()
    row.id = GAME_ID
    row.team_name = "Sunday Five"
    row.team_size = 2
    row.game_type = "football"
    row.turf_location = "Turf A"
    row.turf_date_time = datetime(2026, 11, 1, 18, 0, tzinfo=UTC)
    row.turf_price = turf_price
    row.captain_id = None
    row.created_by = OWNER
    row.status = "upcoming"
    return row


def _result(row: MagicMock | None = None, rows: list[MagicMock] | None = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = rows or []
    return result


class TestGet:
    async def test_missing_game(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(None)
        assert await GameRepository().get(db, str(GAME_ID)) is None
        db.execute.assert_awaited_once()

    async def test_loads_roster(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(_game_row()),
            _result(rows=[MagicMock(user_id=PLAYER)]),
        ]
        game = await GameRepository().get(db, str(GAME_ID))
        assert game is not None
        assert game.id == str(GAME_ID)
        assert game.created_by == str(OWNER)
        assert game.players == [str(PLAYER)]
        assert game.available_spots == 1
        assert game.is_open is True

    async def test_get_for_update_locks_row(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(_game_row()), _result(rows=[])]
        await GameRepository().get_for_update(db, str(GAME_ID))
        assert "FOR UPDATE" in str(db.execute.call_args_list[0].args[0])


class TestSetPrice:
    async def test_sets_when_unset(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(MagicMock(turf_price=8000))
        assert await GameRepository().set_turf_price_if_unset(db, str(GAME_ID), 8000) == 8000
        db.execute.assert_awaited_once()

    async def test_keeps_existing_price(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(None), _result(MagicMock(turf_price=6000))]
        assert await GameRepository().set_turf_price_if_unset(db, str(GAME_ID), 8000) == 6000

    async def test_missing_game(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(None), _result(None)]
        with pytest.raises(GameNotFoundError):
            await GameRepository().set_turf_price_if_unset(db, str(GAME_ID), 8000)


class TestRoster:
    async def test_add_player(self) -> None:
        db = AsyncMock()
        await GameRepository().add_player(db, str(GAME_ID), str(PLAYER))
        assert db.execute.await_count == 2
        assert db.execute.call_args_list[0].args[1] == {
            "game_id": str(GAME_ID),
            "user_id": str(PLAYER),
        }

    async def test_list_player_profiles(self) -> None:
        db = AsyncMock()
        row = MagicMock(user_id=PLAYER, email="asha@example.com")
        row.name = "Asha"  # MagicMock(name=...) names the mock itself
        db.execute.return_value = _result(rows=[row])
        profiles = await GameRepository().list_player_profiles(db, str(GAME_ID))
        assert profiles[0].user_id == str(PLAYER)
        assert profiles[0].name == "Asha"
