"""Global enums — must match DB CHECK constraints exactly.

See alembic/versions/004_create_games.py and 005_create_wallet_transactions.py.
"""

from enum import Enum


class TransactionType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class TransactionReason(str, Enum):
    ADD_MONEY = "ADD_MONEY"
    GAME_JOIN = "GAME_JOIN"
    REFUND = "REFUND"
    ADJUSTMENT = "ADJUSTMENT"


class GameStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Per-game payment status; derived from the ledger, never stored."""
    PENDING = "pending"
    PAID = "paid"


class SplitPolicy(str, Enum):
    """Divisor used to split a game's turf price between players."""
    CAPACITY = "CAPACITY"    # team_size
    OCCUPANCY = "OCCUPANCY"  # players currently on the roster


class TopUpState(str, Enum):
    """Top-up lifecycle; any failure before CREDITED leaves the balance untouched."""
    ORDER_CREATED = "ORDER_CREATED"
    SIGNATURE_VERIFIED = "SIGNATURE_VERIFIED"
    CAPTURED_CONFIRMED = "CAPTURED_CONFIRMED"
    CREDITED = "CREDITED"
