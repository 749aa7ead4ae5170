"""TopUpService — wallet top-up through Razorpay checkout.

Flow per attempt: ORDER_CREATED -> SIGNATURE_VERIFIED -> CAPTURED_CONFIRMED
-> CREDITED. Every gateway call happens before the database transaction is
opened; a failure at any step leaves the balance untouched.

Idempotency: the unique razorpay_payment_id on the ledger is the guarantee.
The existence check inside the transaction only avoids a pointless credit
attempt; a concurrent request that loses the unique race reads the winner's
entry and answers with it.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pw_common.datetime_utils import epoch_millis
from src.pw_common.enums import TopUpState, TransactionReason
from src.pw_common.errors import (
    DuplicateExternalReferenceError,
    GatewayUnavailableError,
    InvalidAmountError,
    MissingPaymentDetailsError,
    OrderMismatchError,
    PaymentAmountUnverifiedError,
    PaymentNotCapturedError,
    SignatureMismatchError,
)
from src.pw_common.transaction import end_read_transaction, run_in_transaction
from src.pw_topup.application.schemas import CreateOrderResponse, VerifyAndCreditResponse
from src.pw_topup.domain.signature import verify_signature
from src.pw_topup.infrastructure.config import GatewayConfig
from src.pw_topup.infrastructure.razorpay_client import RazorpayClient
from src.pw_wallet.domain.models import WalletTransaction
from src.pw_wallet.domain.repository import (
    LedgerRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.pw_wallet.infrastructure.ledger_persistence import LedgerRepository
from src.pw_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)

RECEIPT_MAX_LENGTH = 40


def _log_state(order_id: str, state: TopUpState) -> None:
    logger.info("Top-up %s -> %s", order_id, state.value)


class TopUpService:
    def __init__(
        self,
        config: GatewayConfig | None = None,
        client: RazorpayClient | None = None,
        wallet_repo: WalletRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._config = config or GatewayConfig.from_settings(settings)
        self._client = client or RazorpayClient(self._config)
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._wallets: WalletRepositoryProtocol = wallet_repo or WalletRepository(self._ledger)
        self._max_attempts = max_attempts or settings.TX_MAX_ATTEMPTS
        if not self._config.configured:
            logger.warning("Razorpay credentials missing; wallet top-up is disabled")

    async def aclose(self) -> None:
        await self._client.aclose()

    def _require_gateway(self) -> RazorpayClient:
        if not self._config.configured:
            raise GatewayUnavailableError()
        return self._client

    async def create_order(self, user_id: str, amount_paise: int) -> CreateOrderResponse:
        if amount_paise <= 0:
            raise InvalidAmountError()
        if amount_paise < self._config.min_amount_paise:
            raise InvalidAmountError(
                f"Minimum top-up amount is {self._config.min_amount_paise} paise"
            )
        client = self._require_gateway()

        receipt = f"wallet_{user_id}_{epoch_millis()}"[:RECEIPT_MAX_LENGTH]
        order = await client.create_order(
            amount=amount_paise,
            currency=self._config.currency,
            receipt=receipt,
            notes={"userId": user_id, "type": "WALLET_TOPUP"},
        )
        _log_state(order.id, TopUpState.ORDER_CREATED)
        return CreateOrderResponse(
            order_id=order.id,
            amount=order.amount or amount_paise,
            currency=order.currency or self._config.currency,
            key_id=self._config.key_id,
            receipt=order.receipt or receipt,
        )

    async def verify_and_credit(
        self,
        db: AsyncSession,
        user_id: str,
        order_id: str | None,
        payment_id: str | None,
        signature: str | None,
    ) -> VerifyAndCreditResponse:
        if not order_id or not payment_id or not signature:
            raise MissingPaymentDetailsError()
        client = self._require_gateway()

        if not verify_signature(self._config.key_secret, order_id, payment_id, signature):
            logger.warning(
                "Rejected top-up for user %s: bad signature (order %s, payment %s)",
                user_id,
                order_id,
                payment_id,
            )
            raise SignatureMismatchError()
        _log_state(order_id, TopUpState.SIGNATURE_VERIFIED)

        # the auth lookup on this session opened a read transaction
        await end_read_transaction(db)

        payment = await client.fetch_payment(payment_id)
        if not payment.is_captured:
            raise PaymentNotCapturedError(payment.status)
        if payment.order_id != order_id:
            raise OrderMismatchError(order_id, payment.order_id)
        _log_state(order_id, TopUpState.CAPTURED_CONFIRMED)

        amount = payment.amount
        if amount <= 0:
            amount = (await client.fetch_order(order_id)).amount
        if amount <= 0:
            raise PaymentAmountUnverifiedError()

        async def _work() -> VerifyAndCreditResponse:
            existing = await self._ledger.get_by_payment_id(db, payment_id)
            if existing is not None:
                self._check_owner(existing, user_id)
                wallet = await self._wallets.get_or_create(db, user_id)
                return VerifyAndCreditResponse.build(existing, wallet.balance, True)
            wallet, entry = await self._wallets.credit(
                db,
                user_id,
                amount,
                reason=TransactionReason.ADD_MONEY,
                description="Wallet top-up via Razorpay",
                razorpay_payment_id=payment_id,
                razorpay_order_id=order_id,
            )
            return VerifyAndCreditResponse.build(entry, wallet.balance, False)

        try:
            result = await run_in_transaction(db, _work, self._max_attempts)
        except DuplicateExternalReferenceError:
            result = await self._replay(db, user_id, payment_id)

        if result.already_processed:
            logger.info("Top-up payment %s already credited; replaying", payment_id)
        else:
            _log_state(order_id, TopUpState.CREDITED)
            logger.info(
                "Credited %d paise to user %s (payment %s)", amount, user_id, payment_id
            )
        return result

    @staticmethod
    def _check_owner(entry: WalletTransaction, user_id: str) -> None:
        if entry.user_id != user_id:
            logger.warning(
                "Payment %s is recorded for user %s, not %s",
                entry.razorpay_payment_id,
                entry.user_id,
                user_id,
            )
            raise DuplicateExternalReferenceError(entry.razorpay_payment_id or "")

    async def _replay(
        self, db: AsyncSession, user_id: str, payment_id: str
    ) -> VerifyAndCreditResponse:
        entry = await self._ledger.get_by_payment_id(db, payment_id)
        if entry is None:
            raise DuplicateExternalReferenceError(payment_id)
        self._check_owner(entry, user_id)
        wallet = await self._wallets.get_by_user_id(db, user_id)
        return VerifyAndCreditResponse.build(entry, wallet.balance if wallet else 0, True)
