"""Concurrent top-up and join races against an in-memory transactional store.

The fakes stage writes per session and apply them on commit, reserve unique
keys at insert time (a second insert of the same key fails, as a unique index
would), and hold the game row lock from get_for_update until commit/rollback.
"""

import asyncio
import dataclasses
from collections.abc import Callable
from datetime import UTC, datetime
from unittest.mock import AsyncMock

from src.pw_common.enums import SplitPolicy, TransactionReason
from src.pw_common.errors import (
    DuplicateExternalReferenceError,
    GameClosedError,
    InsufficientBalanceError,
)
from src.pw_common.transaction import run_in_transaction
from src.pw_game.application.join_service import GameJoinService
from src.pw_game.application.schemas import JoinWithWalletResponse
from src.pw_game.domain.models import Game
from src.pw_topup.application.service import TopUpService
from src.pw_topup.domain.models import GatewayPayment
from src.pw_topup.domain.signature import expected_signature
from src.pw_topup.infrastructure.config import GatewayConfig
from src.pw_wallet.domain.models import Wallet, WalletTransaction


class FakeSession:
    def __init__(self) -> None:
        self.staged: list[Callable[[], None]] = []
        self.undo: list[Callable[[], None]] = []
        self.release: list[Callable[[], None]] = []

    def in_transaction(self) -> bool:
        return bool(self.staged or self.undo or self.release)

    async def commit(self) -> None:
        for op in self.staged:
            op()
        self._end()

    async def rollback(self) -> None:
        for op in self.undo:
            op()
        self._end()

    def _end(self) -> None:
        for op in self.release:
            op()
        self.staged, self.undo, self.release = [], [], []


class FakeStore:
    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self.balances: dict[str, int] = dict(balances or {})
        self.entries: list[WalletTransaction] = []
        self.payment_ids: set[str] = set()
        self.next_id = 1


class FakeLedger:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def append(self, db: FakeSession, **kw) -> WalletTransaction:
        await asyncio.sleep(0)
        payment_id = kw.get("razorpay_payment_id")
        if payment_id:
            if payment_id in self.store.payment_ids:
                raise DuplicateExternalReferenceError(payment_id)
            self.store.payment_ids.add(payment_id)
            db.undo.append(lambda: self.store.payment_ids.discard(payment_id))
        entry = WalletTransaction(
            id=self.store.next_id,
            user_id=kw["user_id"],
            type=str(getattr(kw["tx_type"], "value", kw["tx_type"])),
            amount=kw["amount"],
            reason=str(getattr(kw["reason"], "value", kw["reason"])),
            balance_after=kw["balance_after"],
            game_id=kw.get("game_id"),
            razorpay_payment_id=payment_id,
            razorpay_order_id=kw.get("razorpay_order_id"),
            created_at=datetime.now(UTC),
        )
        self.store.next_id += 1
        db.staged.append(lambda: self.store.entries.append(entry))
        return entry

    async def get_by_payment_id(self, db: FakeSession, payment_id: str) -> WalletTransaction | None:
        await asyncio.sleep(0)
        return next((e for e in self.store.entries if e.razorpay_payment_id == payment_id), None)

    async def get_game_debit(self, db: FakeSession, user_id: str, game_id: str) -> WalletTransaction | None:
        await asyncio.sleep(0)
        return next(
            (e for e in self.store.entries
             if e.user_id == user_id and e.game_id == game_id and e.reason == "GAME_JOIN"),
            None,
        )


class FakeWallets:
    def __init__(self, store: FakeStore, ledger: FakeLedger) -> None:
        self.store = store
        self.ledger = ledger

    def _wallet(self, user_id: str, balance: int) -> Wallet:
        now = datetime.now(UTC)
        return Wallet(id=f"w-{user_id}", user_id=user_id, balance=balance, version=0,
                      created_at=now, updated_at=now)

    async def get_or_create(self, db: FakeSession, user_id: str) -> Wallet:
        await asyncio.sleep(0)
        return self._wallet(user_id, self.store.balances.get(user_id, 0))

    async def get_by_user_id(self, db: FakeSession, user_id: str) -> Wallet | None:
        return await self.get_or_create(db, user_id)

    async def _apply(self, db: FakeSession, user_id: str, delta: int) -> int:
        await asyncio.sleep(0)
        new_balance = self.store.balances.get(user_id, 0) + delta

        def _commit() -> None:
            self.store.balances[user_id] = self.store.balances.get(user_id, 0) + delta

        db.staged.append(_commit)
        return new_balance

    async def credit(self, db: FakeSession, user_id: str, amount: int, **kw) -> tuple[Wallet, WalletTransaction]:
        balance = await self._apply(db, user_id, amount)
        entry = await self.ledger.append(
            db, user_id=user_id, tx_type="CREDIT", amount=amount, balance_after=balance, **kw
        )
        return self._wallet(user_id, balance), entry

    async def debit(self, db: FakeSession, user_id: str, amount: int, **kw) -> tuple[Wallet, WalletTransaction]:
        current = self.store.balances.get(user_id, 0)
        if current < amount:
            raise InsufficientBalanceError(amount, current)
        balance = await self._apply(db, user_id, -amount)
        entry = await self.ledger.append(
            db, user_id=user_id, tx_type="DEBIT", amount=amount, balance_after=balance, **kw
        )
        return self._wallet(user_id, balance), entry


class FakeGames:
    def __init__(self, game: Game) -> None:
        self.game = game
        self.lock = asyncio.Lock()

    async def get_for_update(self, db: FakeSession, game_id: str) -> Game | None:
        await self.lock.acquire()
        db.release.append(self.lock.release)
        await asyncio.sleep(0)
        return dataclasses.replace(self.game, players=list(self.game.players))

    async def add_player(self, db: FakeSession, game_id: str, user_id: str) -> None:
        await asyncio.sleep(0)
        db.staged.append(lambda: self.game.players.append(user_id))


async def test_concurrent_verify_credits_once() -> None:
    store = FakeStore()
    ledger = FakeLedger(store)
    client = AsyncMock()
    client.fetch_payment.return_value = GatewayPayment(
        id="pay_1", status="captured", order_id="order_1", amount=50000
    )
    service = TopUpService(
        config=GatewayConfig(key_id="rzp_test_key", key_secret="secret"),
        client=client,
        wallet_repo=FakeWallets(store, ledger),
        ledger_repo=ledger,
    )
    signature = expected_signature("secret", "order_1", "pay_1")

    results = await asyncio.gather(
        service.verify_and_credit(FakeSession(), "user-1", "order_1", "pay_1", signature),
        service.verify_and_credit(FakeSession(), "user-1", "order_1", "pay_1", signature),
    )

    assert len(store.entries) == 1
    assert store.balances["user-1"] == 50000
    assert sorted(r.already_processed for r in results) == [False, True]
    assert {r.credited_amount_paise for r in results} == {50000}


async def test_concurrent_joins_for_last_spot() -> None:
    store = FakeStore({"u1": 10000, "u2": 10000})
    ledger = FakeLedger(store)
    game = Game(
        id="game-1",
        team_name="Sunday Five",
        team_size=2,
        game_type="football",
        turf_location="Turf A",
        turf_date_time=datetime(2026, 11, 1, 18, 0, tzinfo=UTC),
        created_by="owner",
        turf_price=5000,
        players=["owner"],
    )
    games = FakeGames(game)
    service = GameJoinService(
        game_repo=games,
        wallet_repo=FakeWallets(store, ledger),
        ledger_repo=ledger,
        split_policy=SplitPolicy.CAPACITY,
    )

    results = await asyncio.gather(
        service.join_with_wallet(FakeSession(), "u1", "game-1"),
        service.join_with_wallet(FakeSession(), "u2", "game-1"),
        return_exceptions=True,
    )

    joined = [r for r in results if isinstance(r, JoinWithWalletResponse)]
    rejected = [r for r in results if isinstance(r, GameClosedError)]
    assert len(joined) == 1
    assert len(rejected) == 1
    assert len(games.game.players) == 2
    assert games.game.available_spots == 0
    assert len(store.entries) == 1
    assert store.balances["u1"] + store.balances["u2"] == 17500


async def test_credit_then_debit_restores_balance() -> None:
    store = FakeStore({"u1": 12345})
    ledger = FakeLedger(store)
    wallets = FakeWallets(store, ledger)
    db = FakeSession()

    async def _top_up():
        return await wallets.credit(
            db, "u1", 4999, reason=TransactionReason.ADD_MONEY, description="Wallet top-up"
        )

    async def _pay():
        return await wallets.debit(
            db, "u1", 4999, reason=TransactionReason.GAME_JOIN,
            description="Joined game: Sunday Five", game_id="game-1",
        )

    await run_in_transaction(db, _top_up)
    await run_in_transaction(db, _pay)

    assert store.balances["u1"] == 12345
    assert [e.type for e in store.entries] == ["CREDIT", "DEBIT"]
    assert [e.balance_after for e in store.entries] == [17344, 12345]
    assert not db.in_transaction()
