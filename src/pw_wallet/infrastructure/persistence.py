"""WalletRepository — concrete implementation of WalletRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows on a debit means the balance would go negative.
Every mutation appends its ledger entry in the same transaction.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back, normally via ``run_in_transaction``.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_common.enums import TransactionType
from src.pw_common.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    WalletNotFoundError,
)
from src.pw_wallet.domain.models import Wallet, WalletTransaction
from src.pw_wallet.domain.repository import LedgerRepositoryProtocol
from src.pw_wallet.infrastructure.ledger_persistence import LedgerRepository

_RETURNING = "RETURNING id, user_id, balance, version, created_at, updated_at"

# Concurrent first access: the loser of the INSERT race takes the ON CONFLICT
# branch and gets the winner's row back.
_GET_OR_CREATE_SQL = text(f"""
    INSERT INTO wallets (user_id)
    VALUES (:user_id)
    ON CONFLICT (user_id) DO UPDATE
        SET updated_at = wallets.updated_at
    {_RETURNING}
""")

_GET_SQL = text("""
    SELECT id, user_id, balance, version, created_at, updated_at
    FROM wallets
    WHERE user_id = :user_id
""")

_CREDIT_SQL = text(f"""
    UPDATE wallets
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    {_RETURNING}
""")

_DEBIT_SQL = text(f"""
    UPDATE wallets
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND balance >= :amount
    {_RETURNING}
""")


def _row_to_wallet(row: object) -> Wallet:
    return Wallet(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class WalletRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    def __init__(self, ledger: LedgerRepositoryProtocol | None = None) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger or LedgerRepository()

    async def get_by_user_id(self, db: AsyncSession, user_id: str) -> Wallet | None:
        result = await db.execute(_GET_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def get_or_create(self, db: AsyncSession, user_id: str) -> Wallet:
        result = await db.execute(_GET_OR_CREATE_SQL, {"user_id": user_id})
        row = result.fetchone()
        if row is None:
            raise WalletNotFoundError(user_id)
        return _row_to_wallet(row)

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        *,
        reason: str,
        description: str,
        game_id: str | None = None,
        razorpay_payment_id: str | None = None,
        razorpay_order_id: str | None = None,
    ) -> tuple[Wallet, WalletTransaction]:
        if amount <= 0:
            raise InvalidAmountError(f"Credit amount must be > 0, got {amount}")
        await self.get_or_create(db, user_id)
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise WalletNotFoundError(user_id)
        wallet = _row_to_wallet(row)
        entry = await self._ledger.append(
            db,
            user_id=user_id,
            tx_type=TransactionType.CREDIT,
            amount=amount,
            reason=reason,
            balance_after=wallet.balance,
            game_id=game_id,
            razorpay_payment_id=razorpay_payment_id,
            razorpay_order_id=razorpay_order_id,
            description=description,
        )
        return wallet, entry

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        *,
        reason: str,
        description: str,
        game_id: str | None = None,
    ) -> tuple[Wallet, WalletTransaction]:
        if amount <= 0:
            raise InvalidAmountError(f"Debit amount must be > 0, got {amount}")
        current = await self.get_or_create(db, user_id)
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise InsufficientBalanceError(amount, current.balance)
        wallet = _row_to_wallet(row)
        entry = await self._ledger.append(
            db,
            user_id=user_id,
            tx_type=TransactionType.DEBIT,
            amount=amount,
            reason=reason,
            balance_after=wallet.balance,
            game_id=game_id,
            description=description,
        )
        return wallet, entry
