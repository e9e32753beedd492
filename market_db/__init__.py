# market_db/__init__.py
"""
Data-access core for the equipment marketplace backend

Shared connection pool, transactional executor, error classification into a
closed set of service errors, and repositories for users, assets, equipment
and orders.

Features:
- One bounded pool per process, cloned handles share it
- Atomic read-validate-write for stock decrements
- Explicit rollback signal with a return value
- Structured performance events for every operation
"""

__version__ = "0.1.0"

from .config import ConfigLoader, DatabaseConfig, get_database_config, load_environment
from .connection import Pool, establish_pool, sanitize_endpoint
from .error_classifier import classify
from .exceptions import (
    ConfigError,
    ConflictError,
    ConnectionError,
    DatabaseError,
    ErrorKind,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from .logging_config import init_logger
from .models import (
    Asset,
    Equipment,
    EquipmentCategory,
    NewAsset,
    NewEquipment,
    NewEquipmentCategory,
    NewOrder,
    NewOrderItem,
    NewUser,
    Order,
    OrderItem,
    User,
)
from .performance_monitor import MetricType, PerformanceMetric, QueryStats, log_performance_metric
from .repositories import (
    AssetRepository,
    EquipmentRepository,
    OrderRepository,
    UserRepository,
    cleanup_database,
)
from .schema import metadata
from .transactions import Rollback, TransactionManager, run_in_transaction

__all__ = [
    # Pool
    "Pool",
    "establish_pool",
    "sanitize_endpoint",

    # Configuration
    "ConfigLoader",
    "DatabaseConfig",
    "get_database_config",
    "load_environment",
    "init_logger",

    # Transactions
    "Rollback",
    "TransactionManager",
    "run_in_transaction",

    # Errors
    "classify",
    "ErrorKind",
    "ServiceError",
    "ConfigError",
    "ConnectionError",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",

    # Repositories
    "UserRepository",
    "AssetRepository",
    "EquipmentRepository",
    "OrderRepository",
    "cleanup_database",

    # Models
    "NewUser",
    "User",
    "NewAsset",
    "Asset",
    "NewEquipmentCategory",
    "EquipmentCategory",
    "NewEquipment",
    "Equipment",
    "NewOrder",
    "Order",
    "NewOrderItem",
    "OrderItem",

    # Monitoring
    "MetricType",
    "PerformanceMetric",
    "QueryStats",
    "log_performance_metric",

    "metadata",
]
