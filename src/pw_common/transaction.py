"""Transaction runner for money-moving units of work.

Every balance mutation, ledger append and roster change of one operation runs
inside a single ``work(db)`` call. The runner commits on success and rolls
back on any failure, so callers never observe a balance change without its
ledger entry (or vice versa).

PostgreSQL serialization failures and deadlocks abort the whole unit; it is
re-run from the start so that every precondition is re-validated against
fresh rows.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 40001 serialization_failure, 40P01 deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def sqlstate_of(exc: DBAPIError) -> str | None:
    """Extract the SQLSTATE from a wrapped driver error (asyncpg adapter)."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, DBAPIError) and sqlstate_of(exc) in _RETRYABLE_SQLSTATES


def violates_constraint(exc: DBAPIError, constraint_name: str) -> bool:
    """True if ``exc`` was raised by the named unique/check constraint."""
    orig = exc.orig
    name = getattr(orig, "constraint_name", None)
    if name is None and orig is not None:
        name = getattr(getattr(orig, "__cause__", None), "constraint_name", None)
    if name is not None:
        return bool(name == constraint_name)
    return constraint_name in str(orig)


async def run_in_transaction(
    db: AsyncSession,
    work: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
) -> T:
    """Run ``work`` atomically, retrying on serialization failure / deadlock."""
    attempt = 1
    while True:
        try:
            result = await work()
            await db.commit()
            return result
        except Exception as exc:
            await db.rollback()
            if attempt < max_attempts and is_retryable(exc):
                logger.warning(
                    "Transaction conflict (attempt %d/%d), retrying: %s",
                    attempt,
                    max_attempts,
                    exc,
                )
                attempt += 1
                continue
            raise


async def end_read_transaction(db: AsyncSession) -> None:
    """Close the implicit transaction opened by earlier reads on ``db``.

    Call before slow outside I/O so the pooled connection is not left idle in
    transaction.
    """
    if db.in_transaction():
        await db.rollback()
