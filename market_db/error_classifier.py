# market_db/error_classifier.py
"""
Map storage-engine failures onto the service error taxonomy

PostgreSQL errors are classified from their SQLSTATE code and diagnostics.
Other drivers (SQLite in tests) fall back to message matching.
"""
import logging
import re
from typing import Optional

from sqlalchemy import exc as sa_exc

from .constants import (
    CONNECTION_KEYWORDS, GENERIC_CONFLICT_MESSAGE, PG_CHECK_VIOLATION,
    PG_CONNECTION_EXCEPTION_CLASS, PG_FOREIGN_KEY_VIOLATION, PG_NOT_NULL_VIOLATION,
    PG_OPERATOR_INTERVENTION_CLASS, PG_UNIQUE_VIOLATION, UNIQUE_KEYWORDS
)
from .exceptions import (
    ConflictError, ConnectionError, DatabaseError, NotFoundError, ServiceError
)

logger = logging.getLogger(__name__)

_CONSTRAINT_LABELS = {
    PG_FOREIGN_KEY_VIOLATION: "foreign key",
    PG_NOT_NULL_VIOLATION: "not null",
    PG_CHECK_VIOLATION: "check",
}

_PG_KEY_DETAIL = re.compile(r"Key \((?P<cols>[^)]+)\)=\((?P<vals>.*)\) already exists", re.IGNORECASE)
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<cols>.+)$", re.IGNORECASE | re.MULTILINE)


def _orig(error: Exception):
    """The DBAPI exception wrapped by SQLAlchemy, or the error itself"""
    return getattr(error, "orig", None) or error


def _pgcode(error: Exception) -> Optional[str]:
    orig = _orig(error)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _diag(error: Exception, attribute: str) -> Optional[str]:
    diag = getattr(_orig(error), "diag", None)
    return getattr(diag, attribute, None) if diag is not None else None


def _message(error: Exception) -> str:
    return str(_orig(error)).strip()


def is_unique_violation(error: Exception) -> bool:
    """Check if an integrity error comes from a unique constraint"""
    code = _pgcode(error)
    if code:
        return code == PG_UNIQUE_VIOLATION
    lowered = _message(error).lower()
    return any(keyword in lowered for keyword in UNIQUE_KEYWORDS)


def extract_conflict_detail(error: Exception) -> str:
    """
    Best-effort human readable description of a unique violation.

    Tries, in order: the driver's diagnostic detail, the PostgreSQL
    ``Key (...)=(...) already exists`` text, and SQLite's
    ``UNIQUE constraint failed: table.column`` text.
    """
    detail = _diag(error, "message_detail")
    if detail:
        return detail.strip()

    message = _message(error)
    match = _PG_KEY_DETAIL.search(message)
    if match:
        return f"Key ({match.group('cols')})=({match.group('vals')}) already exists."

    match = _SQLITE_UNIQUE.search(message)
    if match:
        return f"{match.group('cols').strip()} already exists"

    return GENERIC_CONFLICT_MESSAGE


def is_connection_failure(error: Exception) -> bool:
    """Check if an error means the database could not be reached or used"""
    if isinstance(error, (sa_exc.TimeoutError, sa_exc.DisconnectionError, sa_exc.InterfaceError)):
        return True
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return True

    code = _pgcode(error)
    if code:
        return code.startswith((PG_CONNECTION_EXCEPTION_CLASS, PG_OPERATOR_INTERVENTION_CLASS))

    if isinstance(error, sa_exc.OperationalError):
        lowered = _message(error).lower()
        return any(keyword in lowered for keyword in CONNECTION_KEYWORDS)
    return False


def classify(error: Exception, context: Optional[str] = None) -> ServiceError:
    """
    Classify an engine failure into a ServiceError.

    Args:
        error: Exception raised by SQLAlchemy or the DBAPI driver
        context: Operation name prepended to internal messages

    Returns:
        ServiceError subclass instance (never raised here)
    """
    if isinstance(error, ServiceError):
        return error

    prefix = f"{context}: " if context else ""

    if isinstance(error, sa_exc.NoResultFound):
        return NotFoundError(f"{prefix}no matching row", error)

    if isinstance(error, sa_exc.IntegrityError):
        if is_unique_violation(error):
            detail = extract_conflict_detail(error)
            constraint = _diag(error, "constraint_name")
            logger.info(f"{prefix}unique violation on {constraint or 'unknown constraint'}")
            return ConflictError(detail, error, constraint=constraint)

        label = _CONSTRAINT_LABELS.get(_pgcode(error), "integrity")
        constraint = _diag(error, "constraint_name")
        return DatabaseError(
            f"{prefix}{label} constraint violation"
            + (f" on {constraint}" if constraint else "")
            + f": {_message(error)}",
            error,
        )

    if is_connection_failure(error):
        return ConnectionError(f"{prefix}{_message(error)}", error)

    return DatabaseError(f"{prefix}{_message(error)}", error)
