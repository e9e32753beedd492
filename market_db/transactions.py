# market_db/transactions.py
"""
Transaction management for atomic operations
"""
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from sqlalchemy.engine import Connection

from .constants import VALID_ISOLATION_LEVELS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Rollback(Exception):
    """
    Explicit abort signal raised from inside a unit of work.

    The executor rolls the transaction back, swallows the signal and returns
    ``value`` to its caller.
    """

    def __init__(self, reason: str = "rollback requested", value: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.value = value


def _validate_isolation_level(isolation_level: str) -> str:
    level = isolation_level.upper()
    if level not in VALID_ISOLATION_LEVELS:
        raise ValueError(
            f"Invalid isolation level: {isolation_level}. "
            f"Valid options: {list(VALID_ISOLATION_LEVELS)}"
        )
    return level


def run_in_transaction(
    connection: Connection,
    work: Callable[[Connection], T],
    isolation_level: Optional[str] = None,
) -> Optional[T]:
    """
    Run ``work(connection)`` atomically.

    Commits when ``work`` returns, rolls back when it raises. A ``Rollback``
    signal is swallowed after the rollback; every other exception propagates.
    When the connection already has a transaction open the work runs inside a
    SAVEPOINT, so only the inner writes are discarded on failure.

    Args:
        connection: Connection checked out from the pool
        work: Callable receiving the live connection
        isolation_level: Optional isolation level for a top-level transaction

    Returns:
        Whatever ``work`` returned, or ``Rollback.value`` after an abort
    """
    nested = connection.in_transaction()

    if isolation_level and not nested:
        connection.execution_options(isolation_level=_validate_isolation_level(isolation_level))

    transaction = connection.begin_nested() if nested else connection.begin()
    scope = "savepoint" if nested else "transaction"
    logger.debug(f"Began {scope}" + (f" with isolation: {isolation_level}" if isolation_level else ""))

    try:
        result = work(connection)
    except Rollback as signal:
        transaction.rollback()
        logger.info(f"Rolled back {scope} on request: {signal.reason}")
        return signal.value
    except Exception as e:
        if transaction.is_active:
            transaction.rollback()
        logger.warning(f"Rolled back {scope} after {type(e).__name__}: {e}")
        raise

    transaction.commit()
    logger.debug(f"Committed {scope}")
    return result


class TransactionManager:
    """Transaction manager bound to a pool"""

    def __init__(self, pool):
        self.pool = pool

    @contextmanager
    def begin(self, isolation_level: Optional[str] = None) -> Iterator[Connection]:
        """
        Acquire a connection and begin a transaction on it

        Usage:
            with TransactionManager(pool).begin() as conn:
                conn.execute(...)
                conn.execute(...)

        Raising ``Rollback`` inside the block discards the writes quietly.
        """
        with self.pool.get_connection() as conn:
            if isolation_level:
                conn.execution_options(isolation_level=_validate_isolation_level(isolation_level))
            transaction = conn.begin()
            try:
                yield conn
            except Rollback as signal:
                transaction.rollback()
                logger.info(f"Transaction rolled back on request: {signal.reason}")
            except Exception as e:
                if transaction.is_active:
                    transaction.rollback()
                logger.warning(f"Transaction rollback: {e}")
                raise
            else:
                transaction.commit()
                logger.debug("Transaction committed successfully")
