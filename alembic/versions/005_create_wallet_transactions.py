"""005: create wallet_transactions ledger

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wallet_transactions (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            type                VARCHAR(10)     NOT NULL,
            amount              BIGINT          NOT NULL,
            reason              VARCHAR(20)     NOT NULL,
            balance_after       BIGINT          NOT NULL,
            game_id             UUID            REFERENCES games (id),
            razorpay_payment_id VARCHAR(64),
            razorpay_order_id   VARCHAR(64),
            description         VARCHAR(500),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wallet_tx_type CHECK (type IN ('CREDIT', 'DEBIT')),
            CONSTRAINT ck_wallet_tx_reason CHECK (
                reason IN ('ADD_MONEY', 'GAME_JOIN', 'REFUND', 'ADJUSTMENT')
            ),
            CONSTRAINT ck_wallet_tx_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_wallet_tx_balance_gte_0 CHECK (balance_after >= 0),
            CONSTRAINT uq_wallet_tx_razorpay_payment_id UNIQUE (razorpay_payment_id)
        );
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_wallet_tx_game_join
        ON wallet_transactions (user_id, game_id)
        WHERE type = 'DEBIT' AND reason = 'GAME_JOIN';
    """)
    op.execute(
        "CREATE INDEX idx_wallet_tx_user_time ON wallet_transactions (user_id, created_at DESC);"
    )
    op.execute("""
        CREATE INDEX idx_wallet_tx_game
        ON wallet_transactions (game_id)
        WHERE game_id IS NOT NULL;
    """)
    op.execute(
        "COMMENT ON TABLE wallet_transactions IS "
        "'Wallet ledger: append-only, never updated or deleted, amounts in paise';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wallet_transactions CASCADE;")
