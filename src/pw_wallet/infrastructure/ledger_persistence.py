"""LedgerRepository — append-only store of wallet_transactions.

There is no UPDATE or DELETE statement in this module: entries are written
once and only ever read back.

Idempotency boundary: ``uq_wallet_tx_razorpay_payment_id`` (unique, NULLs
allowed) rejects a second entry for the same gateway payment, and
``uq_wallet_tx_game_join`` (partial unique index) rejects a second GAME_JOIN
debit for the same (user, game). Both surface as typed AppErrors so that
services can fall back to reading the winner's entry.

Transaction ownership: the caller commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_common.enums import TransactionReason, TransactionType
from src.pw_common.errors import (
    DuplicateExternalReferenceError,
    DuplicateGamePaymentError,
    InternalError,
    InvalidAmountError,
)
from src.pw_common.transaction import violates_constraint
from src.pw_wallet.domain.models import LedgerPage, WalletTransaction

PAYMENT_ID_CONSTRAINT = "uq_wallet_tx_razorpay_payment_id"
GAME_JOIN_CONSTRAINT = "uq_wallet_tx_game_join"

_COLUMNS = """
    t.id, t.user_id, t.type, t.amount, t.reason, t.balance_after, t.game_id,
    t.razorpay_payment_id, t.razorpay_order_id, t.description, t.created_at
"""

_INSERT_SQL = text("""
    INSERT INTO wallet_transactions
        (user_id, type, amount, reason, balance_after, game_id,
         razorpay_payment_id, razorpay_order_id, description)
    VALUES
        (:user_id, :type, :amount, :reason, :balance_after, :game_id,
         :razorpay_payment_id, :razorpay_order_id, :description)
    RETURNING id, user_id, type, amount, reason, balance_after, game_id,
              razorpay_payment_id, razorpay_order_id, description, created_at
""")

_QUERY_PAGE_SQL = text(f"""
    SELECT {_COLUMNS}, g.team_name AS game_team_name, g.game_type AS game_type
    FROM wallet_transactions t
    LEFT JOIN games g ON g.id = t.game_id
    WHERE t.user_id = :user_id
    ORDER BY t.created_at DESC, t.id DESC
    LIMIT :limit OFFSET :offset
""")

_COUNT_SQL = text("""
    SELECT COUNT(*) FROM wallet_transactions WHERE user_id = :user_id
""")

_BY_PAYMENT_ID_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM wallet_transactions t
    WHERE t.razorpay_payment_id = :razorpay_payment_id
""")

_GAME_DEBIT_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM wallet_transactions t
    WHERE t.user_id = :user_id
      AND t.game_id = :game_id
      AND t.type = 'DEBIT'
      AND t.reason = 'GAME_JOIN'
""")

_GAME_DEBITS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM wallet_transactions t
    WHERE t.game_id = :game_id
      AND t.type = 'DEBIT'
      AND t.reason = 'GAME_JOIN'
    ORDER BY t.created_at ASC, t.id ASC
""")

_USER_GAME_DEBITS_SQL = text(f"""
    SELECT {_COLUMNS}, g.team_name AS game_team_name, g.game_type AS game_type
    FROM wallet_transactions t
    LEFT JOIN games g ON g.id = t.game_id
    WHERE t.user_id = :user_id
      AND t.type = 'DEBIT'
      AND t.reason = 'GAME_JOIN'
    ORDER BY t.created_at DESC, t.id DESC
""")


def _row_to_transaction(row: object) -> WalletTransaction:
    game_id = row.game_id  # type: ignore[attr-defined]
    return WalletTransaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        reason=row.reason,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        game_id=str(game_id) if game_id is not None else None,
        razorpay_payment_id=row.razorpay_payment_id,  # type: ignore[attr-defined]
        razorpay_order_id=row.razorpay_order_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        game_team_name=getattr(row, "game_team_name", None),
        game_type=getattr(row, "game_type", None),
    )


class LedgerRepository:
    """Concrete ledger store — append and read, nothing else."""

    async def append(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        tx_type: str,
        amount: int,
        reason: str,
        balance_after: int,
        game_id: str | None = None,
        razorpay_payment_id: str | None = None,
        razorpay_order_id: str | None = None,
        description: str | None = None,
    ) -> WalletTransaction:
        if amount <= 0:
            raise InvalidAmountError(f"Ledger amount must be > 0, got {amount}")
        try:
            result = await db.execute(
                _INSERT_SQL,
                {
                    "user_id": user_id,
                    "type": TransactionType(tx_type).value,
                    "amount": amount,
                    "reason": TransactionReason(reason).value,
                    "balance_after": balance_after,
                    "game_id": game_id,
                    "razorpay_payment_id": razorpay_payment_id,
                    "razorpay_order_id": razorpay_order_id,
                    "description": description,
                },
            )
        except IntegrityError as exc:
            if razorpay_payment_id and violates_constraint(exc, PAYMENT_ID_CONSTRAINT):
                raise DuplicateExternalReferenceError(razorpay_payment_id) from exc
            if game_id and violates_constraint(exc, GAME_JOIN_CONSTRAINT):
                raise DuplicateGamePaymentError(user_id, game_id) from exc
            raise
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_transaction(row)

    async def query(
        self, db: AsyncSession, user_id: str, page: int, limit: int
    ) -> LedgerPage:
        page = max(1, page)
        total = int((await db.execute(_COUNT_SQL, {"user_id": user_id})).scalar() or 0)
        result = await db.execute(
            _QUERY_PAGE_SQL,
            {"user_id": user_id, "limit": limit, "offset": (page - 1) * limit},
        )
        entries = [_row_to_transaction(row) for row in result.fetchall()]
        return LedgerPage(entries=entries, page=page, limit=limit, total=total)

    async def get_by_payment_id(
        self, db: AsyncSession, razorpay_payment_id: str
    ) -> WalletTransaction | None:
        result = await db.execute(
            _BY_PAYMENT_ID_SQL, {"razorpay_payment_id": razorpay_payment_id}
        )
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def get_game_debit(
        self, db: AsyncSession, user_id: str, game_id: str
    ) -> WalletTransaction | None:
        result = await db.execute(
            _GAME_DEBIT_SQL, {"user_id": user_id, "game_id": game_id}
        )
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def list_game_debits(
        self, db: AsyncSession, game_id: str
    ) -> list[WalletTransaction]:
        result = await db.execute(_GAME_DEBITS_SQL, {"game_id": game_id})
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def list_user_game_debits(
        self, db: AsyncSession, user_id: str
    ) -> list[WalletTransaction]:
        result = await db.execute(_USER_GAME_DEBITS_SQL, {"user_id": user_id})
        return [_row_to_transaction(row) for row in result.fetchall()]
