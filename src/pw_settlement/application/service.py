"""SettlementService — a player's share of a game's turf price.

pay_share debits each participant at most once per game. The GAME_JOIN
debit in the ledger is the payment record: its existence means "paid".
The first payer may supply the total price; it is written onto the game in
the same transaction as their debit, so a failed debit leaves the game
unpriced.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pw_common.enums import PaymentStatus, SplitPolicy, TransactionReason
from src.pw_common.errors import (
    DuplicateGamePaymentError,
    GameNotFoundError,
    NoParticipantsError,
    NotAParticipantError,
    PriceRequiredError,
)
from src.pw_common.transaction import run_in_transaction
from src.pw_game.domain.repository import GameRepositoryProtocol
from src.pw_game.infrastructure.persistence import GameRepository
from src.pw_settlement.application.schemas import (
    GameStatusResponse,
    PayShareResponse,
    PlayerPaymentStatus,
)
from src.pw_settlement.domain.share import compute_share
from src.pw_wallet.domain.repository import (
    LedgerRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.pw_wallet.infrastructure.ledger_persistence import LedgerRepository
from src.pw_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        game_repo: GameRepositoryProtocol | None = None,
        wallet_repo: WalletRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        pay_policy: SplitPolicy | None = None,
        status_policy: SplitPolicy | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._games: GameRepositoryProtocol = game_repo or GameRepository()
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._wallets: WalletRepositoryProtocol = wallet_repo or WalletRepository(self._ledger)
        self._pay_policy = SplitPolicy(pay_policy or settings.PAY_SHARE_SPLIT_POLICY)
        self._status_policy = SplitPolicy(status_policy or settings.STATUS_SPLIT_POLICY)
        self._max_attempts = max_attempts or settings.TX_MAX_ATTEMPTS

    async def pay_share(
        self,
        db: AsyncSession,
        user_id: str,
        game_id: str,
        price_override: int | None = None,
    ) -> PayShareResponse:
        async def _work() -> PayShareResponse:
            game = await self._games.get_for_update(db, game_id)
            if game is None:
                raise GameNotFoundError(game_id)
            if not game.players:
                raise NoParticipantsError(game_id)
            if not game.has_player(user_id):
                raise NotAParticipantError(game_id)

            total = game.turf_price
            if not game.price_is_set:
                if price_override is None or price_override <= 0:
                    raise PriceRequiredError()
                total = await self._games.set_turf_price_if_unset(db, game_id, price_override)
                game.turf_price = total
                logger.info("Game %s priced at %d paise by user %s", game_id, total, user_id)

            share = compute_share(total, game.split_divisor(self._pay_policy))

            existing = await self._ledger.get_game_debit(db, user_id, game_id)
            if existing is not None:
                wallet = await self._wallets.get_or_create(db, user_id)
                return PayShareResponse.build(
                    game_id, existing, int(total or 0), wallet.balance, already_paid=True
                )

            wallet, entry = await self._wallets.debit(
                db,
                user_id,
                share,
                reason=TransactionReason.GAME_JOIN,
                description=f"Paid share for game: {game.team_name}",
                game_id=game_id,
            )
            return PayShareResponse.build(
                game_id, entry, int(total or 0), wallet.balance, already_paid=False
            )

        try:
            result = await run_in_transaction(db, _work, self._max_attempts)
        except DuplicateGamePaymentError:
            # A concurrent request for the same (user, game) committed first.
            return await self._replay(db, user_id, game_id)
        if not result.already_paid:
            logger.info(
                "User %s paid %d paise for game %s",
                user_id,
                result.amount_paid_paise,
                game_id,
            )
        return result

    async def _replay(self, db: AsyncSession, user_id: str, game_id: str) -> PayShareResponse:
        entry = await self._ledger.get_game_debit(db, user_id, game_id)
        if entry is None:
            raise DuplicateGamePaymentError(user_id, game_id)
        game = await self._games.get(db, game_id)
        wallet = await self._wallets.get_by_user_id(db, user_id)
        return PayShareResponse.build(
            game_id,
            entry,
            int(game.turf_price or 0) if game else 0,
            wallet.balance if wallet else 0,
            already_paid=True,
        )

    async def get_game_status(self, db: AsyncSession, game_id: str) -> GameStatusResponse:
        game = await self._games.get(db, game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        profiles = await self._games.list_player_profiles(db, game_id)
        debits = {e.user_id: e for e in await self._ledger.list_game_debits(db, game_id)}

        divisor = game.split_divisor(self._status_policy)
        per_player = (
            compute_share(game.turf_price, divisor)
            if game.price_is_set and divisor > 0
            else None
        )
        players = [
            PlayerPaymentStatus.from_profile(p, debits.get(p.user_id), per_player)
            for p in profiles
        ]
        paid = [p for p in players if p.payment_status == PaymentStatus.PAID.value]
        return GameStatusResponse(
            game_id=game.id,
            team_name=game.team_name,
            total_price_paise=game.turf_price,
            amount_per_player_paise=per_player,
            split_policy=self._status_policy.value,
            paid_count=len(paid),
            pending_count=len(players) - len(paid),
            total_collected_paise=sum(p.amount_paid_paise for p in paid),
            players=players,
        )
