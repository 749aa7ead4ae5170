"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Wallet/Ledger
  3xxx: Game
  4xxx: Settlement
  5xxx: Payment gateway
  9xxx: System
"""

from typing import Any

from src.pw_common.paise import paise_to_display


class AppError(Exception):
    """Base application error.

    ``details`` carries structured data (amounts, ids) and is returned to the
    caller in the ``data`` field of the error envelope.
    """

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


# --- 2xxx: Wallet/Ledger ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        shortfall = max(0, required - available)
        super().__init__(
            2001,
            "Insufficient wallet balance: required "
            f"{paise_to_display(required)}, available {paise_to_display(available)}",
            400,
            details={
                "required_paise": required,
                "current_balance_paise": available,
                "shortfall_paise": shortfall,
            },
        )


class WalletNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Wallet not found for user {user_id}", 500)


class DuplicateExternalReferenceError(AppError):
    def __init__(self, payment_id: str) -> None:
        self.payment_id = payment_id
        super().__init__(2003, f"Payment already recorded: {payment_id}", 409)


class InvalidAmountError(AppError):
    def __init__(self, detail: str = "Amount must be a positive number") -> None:
        super().__init__(2004, detail, 400)


class DuplicateGamePaymentError(AppError):
    def __init__(self, user_id: str, game_id: str) -> None:
        self.user_id = user_id
        self.game_id = game_id
        super().__init__(2005, f"Game {game_id} already paid by user {user_id}", 409)


# --- 3xxx: Game ---

class GameNotFoundError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(3001, f"Game not found: {game_id}", 404)


class GameClosedError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(3002, f"No spots available in game {game_id}", 400)


class AlreadyJoinedError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(3003, f"You are already part of game {game_id}", 400)


class PriceNotSetError(AppError):
    def __init__(self) -> None:
        super().__init__(3004, "Game price not set. Please contact game organizer.", 400)


class InvalidPriceError(AppError):
    def __init__(self, price: int) -> None:
        super().__init__(3005, f"Invalid per-player price: {price} paise", 400)


# --- 4xxx: Settlement ---

class NotAParticipantError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(4001, f"You are not part of game {game_id}", 403)


class NoParticipantsError(AppError):
    def __init__(self, game_id: str) -> None:
        super().__init__(4002, f"No players in game {game_id} yet", 400)


class PriceRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(
            4003,
            "total_price_paise is required the first time payments are made for this game",
            400,
        )


# --- 5xxx: Payment gateway ---

class GatewayUnavailableError(AppError):
    def __init__(self) -> None:
        super().__init__(
            5001,
            "Wallet top-up is temporarily unavailable. Missing Razorpay credentials.",
            503,
        )


class SignatureMismatchError(AppError):
    def __init__(self) -> None:
        super().__init__(5002, "Invalid payment signature", 400)


class PaymentNotCapturedError(AppError):
    def __init__(self, status: str) -> None:
        super().__init__(5003, f"Payment not captured. Status: {status}", 400)


class OrderMismatchError(AppError):
    def __init__(self, expected: str, actual: str | None) -> None:
        super().__init__(
            5004,
            "Order ID mismatch",
            400,
            details={"expected_order_id": expected, "payment_order_id": actual},
        )


class GatewayError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5005, f"Payment gateway error: {detail}", 500)


class GatewayTimeoutError(AppError):
    def __init__(self) -> None:
        super().__init__(5006, "Payment gateway timed out; no funds were credited, retry safely", 504)


class MissingPaymentDetailsError(AppError):
    def __init__(self) -> None:
        super().__init__(5007, "Missing Razorpay payment details", 400)


class PaymentAmountUnverifiedError(AppError):
    def __init__(self) -> None:
        super().__init__(5008, "Could not verify payment amount", 400)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class RequestValidationFailedError(AppError):
    def __init__(self, errors: list[Any]) -> None:
        super().__init__(9003, "Request validation failed", 400, details={"errors": errors})
