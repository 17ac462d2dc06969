# raffle_service/db/transaction.py
"""
Transaction boundary for the purchase core.

`run_in_transaction` runs a unit of work, commits it, or rolls the whole
thing back. Lock waits, serialization failures, deadlocks and timeouts are
reported as TransactionConflictError and the unit is retried with backoff.
"""

import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from raffle_service.core.config import settings
from raffle_service.core.errors import (
    PersistenceFailureError,
    RaffleServiceError,
    TransactionConflictError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# lock_not_available, query_canceled (statement_timeout), serialization_failure,
# deadlock_detected
CONFLICT_PGCODES = {"55P03", "57014", "40001", "40P01"}
SQLITE_BUSY_MESSAGES = ("database is locked", "database table is locked", "database is busy")


def _apply_timeouts(db: Session) -> None:
    # SQLite is bounded by its busy_timeout pragma instead.
    if db.get_bind().dialect.name == "postgresql":
        timeout = int(settings.TRANSACTION_TIMEOUT_MS)
        db.execute(text(f"SET LOCAL lock_timeout = {timeout}"))
        db.execute(text(f"SET LOCAL statement_timeout = {timeout}"))


def _is_lock_conflict(exc: DBAPIError) -> bool:
    """Lock waits, timeouts, serialization failures and deadlocks only."""
    if getattr(exc.orig, "pgcode", None) in CONFLICT_PGCODES:
        return True
    message = str(exc.orig).lower()
    return any(busy in message for busy in SQLITE_BUSY_MESSAGES)


def _translate(exc: SQLAlchemyError, label: str) -> RaffleServiceError:
    if isinstance(exc, IntegrityError):
        if "raffle_tickets" in str(exc.orig):
            # two purchases derived the same code; safe to redo
            return TransactionConflictError()
        logger.error(f"Integrity error in {label}: {exc}", exc_info=True)
        return PersistenceFailureError()
    if isinstance(exc, DBAPIError) and _is_lock_conflict(exc):
        logger.warning(f"Transaction conflict in {label}: {exc.orig}")
        return TransactionConflictError()
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        logger.warning(f"Connection lost during {label}")
        return TransactionConflictError()
    logger.error(f"Storage failure in {label}: {exc}", exc_info=True)
    return PersistenceFailureError()


def _attempt(db: Session, work: Callable[[Session], T], label: str) -> T:
    try:
        _apply_timeouts(db)
        result = work(db)
        db.commit()
        return result
    except RaffleServiceError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise _translate(e, label) from e
    except Exception:
        db.rollback()
        raise


def run_in_transaction(
    db: Session,
    work: Callable[[Session], T],
    *,
    label: str = "transaction",
    max_attempts: Optional[int] = None,
) -> T:
    """
    Run `work(db)` as one atomic unit and return its result.

    Business errors abort immediately. TransactionConflictError is retried up
    to `max_attempts` times (TRANSACTION_MAX_ATTEMPTS by default) before it
    reaches the caller.
    """
    attempts = max_attempts or settings.TRANSACTION_MAX_ATTEMPTS
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(TransactionConflictError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(_attempt, db, work, label)
