"""004: create games and game_players tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE games (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            team_name       VARCHAR(120)    NOT NULL,
            team_size       INTEGER         NOT NULL,
            game_type       VARCHAR(30)     NOT NULL,
            turf_location   VARCHAR(255)    NOT NULL,
            turf_date_time  TIMESTAMPTZ     NOT NULL,
            turf_price      BIGINT,
            captain_id      UUID            REFERENCES users (id),
            created_by      UUID            NOT NULL REFERENCES users (id),
            status          VARCHAR(20)     NOT NULL DEFAULT 'upcoming',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_games_team_size_gt_0 CHECK (team_size > 0),
            CONSTRAINT ck_games_turf_price_gte_0 CHECK (turf_price IS NULL OR turf_price >= 0),
            CONSTRAINT ck_games_status CHECK (
                status IN ('upcoming', 'ongoing', 'finished', 'cancelled')
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_games_updated_at
            BEFORE UPDATE ON games
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    # Roster; available spots and open/closed are derived from it, never stored.
    op.execute("""
        CREATE TABLE game_players (
            id          BIGSERIAL   PRIMARY KEY,
            game_id     UUID        NOT NULL REFERENCES games (id) ON DELETE CASCADE,
            user_id     UUID        NOT NULL REFERENCES users (id),
            joined_at   TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_game_players_game_user UNIQUE (game_id, user_id)
        );
    """)
    op.execute("CREATE INDEX idx_game_players_user ON game_players (user_id);")
    op.execute("COMMENT ON TABLE games IS 'Pickup games, turf_price in paise';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS game_players CASCADE;")
    op.execute("DROP TABLE IF EXISTS games CASCADE;")
