# market_db/connection.py
"""
Connection pool manager

A ``Pool`` wraps one SQLAlchemy engine. It is built once per process (or test
session) by ``establish_pool`` and shared; callers that need their own handle
use ``clone()``, which never builds a second engine.
"""
import logging
import re
import time
from typing import Any, Callable, Dict, Optional, TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from .config import DatabaseConfig, get_database_config
from .constants import DATABASE_URL_ENV
from .exceptions import ConfigError, ConnectionError
from .performance_monitor import MetricType, PerformanceMetric, QueryStats, log_performance_metric
from .transactions import TransactionManager, run_in_transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSAFE_ENDPOINT_CHARS = re.compile(r"[^@:A-Za-z]")


def sanitize_endpoint(endpoint: str) -> str:
    """Replace every character except '@', ':' and ASCII letters with '*'"""
    return _UNSAFE_ENDPOINT_CHARS.sub("*", endpoint or "")


def _engine_options(config: DatabaseConfig) -> Dict[str, Any]:
    """Pool and driver options for the endpoint's backend"""
    url = make_url(config.connection_string)
    options: Dict[str, Any] = {"echo": config.echo, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"timeout": config.pool_timeout, "check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # in-memory databases live in a single connection
            return options
    elif url.get_backend_name() == "postgresql" and url.get_driver_name() in ("psycopg2", "psycopg"):
        options["connect_args"] = {"options": f"-c statement_timeout={config.statement_timeout}"}

    options.update(
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
    )
    return options


def _install_sqlite_locking(engine: Engine) -> None:
    """
    Make pysqlite open every transaction with BEGIN IMMEDIATE.

    Writers then queue on the database lock (up to the busy timeout) the way
    row locks queue them on PostgreSQL, instead of failing on lock upgrade.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _create_engine(config: DatabaseConfig) -> Engine:
    engine = create_engine(config.connection_string, **_engine_options(config))
    if engine.dialect.name == "sqlite":
        _install_sqlite_locking(engine)
    return engine


class Pool:
    """
    Shared handle to a bounded set of database connections
    """

    def __init__(self, engine: Engine, config: DatabaseConfig, stats: Optional[QueryStats] = None):
        self._engine = engine
        self._config = config
        self._stats = stats or QueryStats()

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def stats(self) -> QueryStats:
        return self._stats

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    def clone(self) -> "Pool":
        """Return a handle sharing this pool's engine and statistics"""
        return Pool(self._engine, self._config, self._stats)

    def get_connection(self) -> Connection:
        """
        Check out a connection, waiting at most ``pool_timeout`` seconds.

        Raises:
            ConnectionError: pool exhausted or connection unusable
        """
        try:
            return self._engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to acquire database connection: {e}")
            raise ConnectionError(f"Failed to acquire connection: {e}", original_error=e) from e

    def transaction(self, isolation_level: Optional[str] = None):
        """Context manager yielding a connection inside a transaction"""
        return TransactionManager(self).begin(isolation_level=isolation_level)

    def run_in_transaction(
        self,
        work: Callable[[Connection], T],
        isolation_level: Optional[str] = None,
    ) -> Optional[T]:
        """Acquire a connection and run ``work`` atomically on it"""
        with self.get_connection() as conn:
            return run_in_transaction(conn, work, isolation_level=isolation_level)

    def health_check(self) -> bool:
        """Check database connection health"""
        try:
            with self._engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except SQLAlchemyError as e:
            logger.error(f"Health check failed: {e}")
            return False

    def get_stats(self) -> Dict[str, Any]:
        """Get pool status and operation statistics"""
        pool = self._engine.pool
        status = {"status": pool.status()}
        for name in ("size", "checkedin", "checkedout", "overflow"):
            method = getattr(pool, name, None)
            if callable(method):
                status[name] = method()

        return {
            "dialect": self.dialect_name,
            "connection_pool": status,
            "operation_stats": self._stats.snapshot(),
            "summary": self._stats.get_performance_summary(),
            "config": {
                "pool_size": self._config.pool_size,
                "max_overflow": self._config.max_overflow,
                "pool_timeout": self._config.pool_timeout,
                "statement_timeout": self._config.statement_timeout,
            },
        }

    def dispose(self) -> None:
        """Close all pooled connections"""
        logger.info("Disposing database pool")
        self._engine.dispose()

    def __repr__(self):
        return f"Pool(endpoint={sanitize_endpoint(self._config.connection_string)!r})"


def establish_pool(
    endpoint: Optional[str] = None,
    env_var: str = DATABASE_URL_ENV,
    config: Optional[DatabaseConfig] = None,
    **overrides
) -> Pool:
    """
    Build the shared connection pool.

    Args:
        endpoint: Explicit connection string; ``env_var`` is read when omitted
        env_var: Environment variable holding the connection string
        config: Pre-built configuration, takes precedence over both
        **overrides: Pool settings such as ``pool_size`` or ``pool_timeout``

    Returns:
        Pool ready for use

    Raises:
        ConfigError: no endpoint given and ``env_var`` is not set
        ConnectionError: engine could not be built or first connection failed
    """
    start = time.perf_counter()
    operation = "establish_pool"

    def emit(success: bool, details: str) -> None:
        log_performance_metric(PerformanceMetric(
            operation, time.perf_counter() - start, success, MetricType.SYSTEM, details
        ))

    if config is None:
        if not endpoint:
            logger.info(f"No endpoint provided, reading {env_var} from environment")
        try:
            config = get_database_config(connection_string=endpoint, env_var=env_var, **overrides)
        except ConfigError as e:
            emit(False, e.message)
            raise

    safe_endpoint = sanitize_endpoint(config.connection_string)
    engine = None
    try:
        engine = _create_engine(config)
        with engine.connect():
            pass
    except (SQLAlchemyError, ValueError, TypeError, ImportError) as e:
        if engine is not None:
            engine.dispose()
        reason = str(e).replace(config.connection_string, safe_endpoint)
        emit(False, f"Failed to create pool for {safe_endpoint}: {reason}")
        raise ConnectionError(f"Failed to create pool: {reason}", original_error=e) from e

    emit(True, f"Pool created successfully for {safe_endpoint}")
    return Pool(engine, config)
