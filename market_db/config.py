# market_db/config.py
"""
Database configuration management
"""
import os
import logging
from typing import Optional
from dataclasses import dataclass, replace

from dotenv import find_dotenv, load_dotenv

from .constants import (
    DATABASE_URL_ENV, DEFAULT_POOL_SIZE, DEFAULT_MAX_OVERFLOW, DEFAULT_POOL_TIMEOUT,
    DEFAULT_POOL_RECYCLE, DEFAULT_STATEMENT_TIMEOUT
)
from .exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Immutable database configuration
    """
    connection_string: str
    pool_size: int = DEFAULT_POOL_SIZE
    max_overflow: int = DEFAULT_MAX_OVERFLOW
    pool_timeout: float = DEFAULT_POOL_TIMEOUT
    pool_recycle: int = DEFAULT_POOL_RECYCLE
    statement_timeout: int = DEFAULT_STATEMENT_TIMEOUT
    echo: bool = False

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not self.connection_string:
            raise ConfigError("Connection string cannot be empty")
        if self.pool_size <= 0:
            raise ConfigError("Pool size must be positive")
        if self.max_overflow < 0:
            raise ConfigError("Max overflow cannot be negative")
        if self.pool_timeout <= 0:
            raise ConfigError("Pool timeout must be positive")


def load_environment(filename: Optional[str] = None) -> bool:
    """
    Load variables from a dotenv file into the process environment.

    Called once at startup. Variables that are already set are left alone.
    Returns True when a file was found and loaded.
    """
    path = find_dotenv(filename, usecwd=True) if filename else find_dotenv(usecwd=True)
    if not path:
        logger.debug(f"No dotenv file found for {filename or '.env'}")
        return False
    logger.info(f"Loading environment from {path}")
    return load_dotenv(path, override=False)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{raw}'")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'")


class ConfigLoader:
    """Load and validate database configuration"""

    @staticmethod
    def from_environment(env_var: str = DATABASE_URL_ENV) -> DatabaseConfig:
        """Load configuration from environment variables"""
        connection_string = os.environ.get(env_var)
        if not connection_string:
            raise ConfigError(f"{env_var} not found in environment")

        return DatabaseConfig(
            connection_string=connection_string,
            pool_size=_env_int("DB_POOL_SIZE", DEFAULT_POOL_SIZE),
            max_overflow=_env_int("DB_MAX_OVERFLOW", DEFAULT_MAX_OVERFLOW),
            pool_timeout=_env_float("DB_POOL_TIMEOUT", DEFAULT_POOL_TIMEOUT),
            pool_recycle=_env_int("DB_POOL_RECYCLE", DEFAULT_POOL_RECYCLE),
            statement_timeout=_env_int("DB_STATEMENT_TIMEOUT", DEFAULT_STATEMENT_TIMEOUT),
            echo=os.environ.get("DB_ECHO", "false").lower() == "true",
        )

    @staticmethod
    def from_params(
        connection_string: str,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        pool_timeout: Optional[float] = None,
        pool_recycle: Optional[int] = None,
        statement_timeout: Optional[int] = None,
        echo: bool = False,
    ) -> DatabaseConfig:
        """Load configuration from parameters"""
        return DatabaseConfig(
            connection_string=connection_string,
            pool_size=DEFAULT_POOL_SIZE if pool_size is None else pool_size,
            max_overflow=DEFAULT_MAX_OVERFLOW if max_overflow is None else max_overflow,
            pool_timeout=DEFAULT_POOL_TIMEOUT if pool_timeout is None else pool_timeout,
            pool_recycle=DEFAULT_POOL_RECYCLE if pool_recycle is None else pool_recycle,
            statement_timeout=(
                DEFAULT_STATEMENT_TIMEOUT if statement_timeout is None else statement_timeout
            ),
            echo=echo,
        )


def get_database_config(
    connection_string: Optional[str] = None,
    env_var: str = DATABASE_URL_ENV,
    **kwargs
) -> DatabaseConfig:
    """
    Main function to get database configuration
    Supports both environment variables and parameters
    """
    if connection_string:
        return ConfigLoader.from_params(connection_string=connection_string, **kwargs)
    config = ConfigLoader.from_environment(env_var)
    overrides = {key: value for key, value in kwargs.items() if value is not None}
    return replace(config, **overrides) if overrides else config
