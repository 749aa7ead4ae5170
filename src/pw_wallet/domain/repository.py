"""Repository Protocols — dependency inversion for testability.

Unit tests inject a mock that conforms to these Protocols.
Infrastructure layer provides the real implementations.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_wallet.domain.models import LedgerPage, Wallet, WalletTransaction


class LedgerRepositoryProtocol(Protocol):
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
    ) -> WalletTransaction: ...

    async def query(
        self, db: AsyncSession, user_id: str, page: int, limit: int
    ) -> LedgerPage: ...

    async def get_by_payment_id(
        self, db: AsyncSession, razorpay_payment_id: str
    ) -> WalletTransaction | None: ...

    async def get_game_debit(
        self, db: AsyncSession, user_id: str, game_id: str
    ) -> WalletTransaction | None: ...

    async def list_game_debits(
        self, db: AsyncSession, game_id: str
    ) -> list[WalletTransaction]: ...

    async def list_user_game_debits(
        self, db: AsyncSession, user_id: str
    ) -> list[WalletTransaction]: ...


class WalletRepositoryProtocol(Protocol):
    async def get_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Wallet | None: ...

    async def get_or_create(self, db: AsyncSession, user_id: str) -> Wallet: ...

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
    ) -> tuple[Wallet, WalletTransaction]: ...

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        *,
        reason: str,
        description: str,
        game_id: str | None = None,
    ) -> tuple[Wallet, WalletTransaction]: ...
