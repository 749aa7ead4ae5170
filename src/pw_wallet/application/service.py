"""WalletApplicationService — read path for balances and ledger history.

get_summary lazily creates the wallet (race-safe upsert) and commits.
get_balance and list_transactions are read-only and run without an explicit
transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pw_common.paise import paise_to_display
from src.pw_common.transaction import run_in_transaction
from src.pw_wallet.application.schemas import (
    BalanceResponse,
    GamePaymentItem,
    TransactionItem,
    TransactionListResponse,
    WalletSummaryResponse,
)
from src.pw_wallet.domain.repository import (
    LedgerRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.pw_wallet.infrastructure.ledger_persistence import LedgerRepository
from src.pw_wallet.infrastructure.persistence import WalletRepository

MAX_PAGE_SIZE = 50


class WalletApplicationService:
    def __init__(
        self,
        wallet_repo: WalletRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        recent_limit: int | None = None,
    ) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._wallets: WalletRepositoryProtocol = wallet_repo or WalletRepository(self._ledger)
        self._recent_limit = recent_limit or settings.WALLET_RECENT_TRANSACTIONS

    async def get_summary(self, db: AsyncSession, user_id: str) -> WalletSummaryResponse:
        wallet = await run_in_transaction(
            db, lambda: self._wallets.get_or_create(db, user_id)
        )
        recent = await self._ledger.query(db, user_id, page=1, limit=self._recent_limit)
        payments = await self._ledger.list_user_game_debits(db, user_id)
        return WalletSummaryResponse(
            balance_paise=wallet.balance,
            balance_display=paise_to_display(wallet.balance),
            transactions=[TransactionItem.from_domain(e) for e in recent.entries],
            payments=[GamePaymentItem.from_domain(e) for e in payments],
        )

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        wallet = await self._wallets.get_by_user_id(db, user_id)
        return BalanceResponse.from_paise(user_id, wallet.balance if wallet else 0)

    async def list_transactions(
        self, db: AsyncSession, user_id: str, page: int, limit: int
    ) -> TransactionListResponse:
        limit = min(max(1, limit), MAX_PAGE_SIZE)
        ledger_page = await self._ledger.query(db, user_id, page=max(1, page), limit=limit)
        return TransactionListResponse.from_page(ledger_page)
