"""GameJoinService — join a game and pay for the spot from the wallet.

The whole join is one transaction with the game row locked: the wallet debit,
its GAME_JOIN ledger entry and the roster insert either all persist or none
do. Preconditions are checked after the lock is taken, so two users racing
for the last spot cannot both get in.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pw_common.enums import SplitPolicy, TransactionReason
from src.pw_common.errors import (
    AlreadyJoinedError,
    DuplicateGamePaymentError,
    GameClosedError,
    GameNotFoundError,
    InvalidPriceError,
    PriceNotSetError,
)
from src.pw_common.transaction import run_in_transaction
from src.pw_game.application.schemas import JoinWithWalletResponse
from src.pw_game.domain.repository import GameRepositoryProtocol
from src.pw_game.infrastructure.persistence import GameRepository
from src.pw_settlement.domain.share import compute_share
from src.pw_wallet.domain.repository import (
    LedgerRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.pw_wallet.infrastructure.ledger_persistence import LedgerRepository
from src.pw_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class GameJoinService:
    def __init__(
        self,
        game_repo: GameRepositoryProtocol | None = None,
        wallet_repo: WalletRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        split_policy: SplitPolicy | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._games: GameRepositoryProtocol = game_repo or GameRepository()
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._wallets: WalletRepositoryProtocol = wallet_repo or WalletRepository(self._ledger)
        self._policy = SplitPolicy(split_policy or settings.JOIN_SPLIT_POLICY)
        self._max_attempts = max_attempts or settings.TX_MAX_ATTEMPTS

    async def join_with_wallet(
        self, db: AsyncSession, user_id: str, game_id: str
    ) -> JoinWithWalletResponse:
        async def _work() -> JoinWithWalletResponse:
            game = await self._games.get_for_update(db, game_id)
            if game is None:
                raise GameNotFoundError(game_id)
            if not game.is_open:
                raise GameClosedError(game_id)
            if game.has_player(user_id):
                raise AlreadyJoinedError(game_id)
            if not game.price_is_set:
                raise PriceNotSetError()

            # OCCUPANCY counts the joining player as well
            if self._policy == SplitPolicy.CAPACITY:
                divisor = game.team_size
            else:
                divisor = len(game.players) + 1
            price = compute_share(game.turf_price, divisor)
            if price <= 0:
                raise InvalidPriceError(price)

            previous = await self._ledger.get_game_debit(db, user_id, game_id)
            if previous is not None:
                # Left and re-joined: the original payment still covers the spot.
                wallet = await self._wallets.get_or_create(db, user_id)
                amount_paid, charged = previous.amount, False
            else:
                try:
                    wallet, _entry = await self._wallets.debit(
                        db,
                        user_id,
                        price,
                        reason=TransactionReason.GAME_JOIN,
                        description=f"Joined game: {game.team_name}",
                        game_id=game_id,
                    )
                except DuplicateGamePaymentError as exc:
                    raise AlreadyJoinedError(game_id) from exc
                amount_paid, charged = price, True

            await self._games.add_player(db, game_id, user_id)
            game.add_player(user_id)
            return JoinWithWalletResponse.build(game, amount_paid, wallet.balance, charged)

        result = await run_in_transaction(db, _work, self._max_attempts)
        logger.info(
            "User %s joined game %s (charged=%s, amount=%d paise, spots left=%d)",
            user_id,
            game_id,
            result.charged,
            result.amount_paid_paise,
            result.game.available_spots,
        )
        return result
