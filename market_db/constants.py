# market_db/constants.py
"""
Constants for the marketplace data-access layer
"""

# Environment variables holding the database endpoint
DATABASE_URL_ENV = "DATABASE_URL"
TEST_DATABASE_URL_ENV = "DATABASE_URL_TEST"

# Pool configuration
DEFAULT_POOL_SIZE = 10
DEFAULT_MAX_OVERFLOW = 10
DEFAULT_POOL_TIMEOUT = 30
DEFAULT_POOL_RECYCLE = 3600
DEFAULT_STATEMENT_TIMEOUT = 30000

# Transaction isolation levels
READ_COMMITTED = "READ COMMITTED"
REPEATABLE_READ = "REPEATABLE READ"
SERIALIZABLE = "SERIALIZABLE"
VALID_ISOLATION_LEVELS = (READ_COMMITTED, REPEATABLE_READ, SERIALIZABLE)

# Query limits
MAX_QUERY_LIMIT = 1000
DEFAULT_PAGE_SIZE = 20

# PostgreSQL SQLSTATE codes
# https://www.postgresql.org/docs/current/errcodes-appendix.html
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_NOT_NULL_VIOLATION = "23502"
PG_CHECK_VIOLATION = "23514"
PG_CONNECTION_EXCEPTION_CLASS = "08"
PG_OPERATOR_INTERVENTION_CLASS = "57P"

# Error message keywords
UNIQUE_KEYWORDS = ("unique constraint", "unique violation", "duplicate key", "duplicate entry")
CONNECTION_KEYWORDS = (
    "could not connect",
    "connection refused",
    "connection reset",
    "server closed the connection",
    "authentication failed",
    "unable to open database file",
    "could not translate host name",
    "timeout expired",
)

# Public messages
GENERIC_CONFLICT_MESSAGE = "Resource already exists"
GENERIC_DATABASE_MESSAGE = "An internal database error occurred"
GENERIC_CONNECTION_MESSAGE = "Database connection error"

# Logging
LOG_DIR = "logs"
TEST_LOG_DIR = "tests/logs"
LOG_FILE_PREFIX = "market_db"
SLOW_OPERATION_SECONDS = 1.0
