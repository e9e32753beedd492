# market_db/decorators.py
"""
Decorators for repository operations
"""
import logging
import time
from functools import wraps
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from .constants import SLOW_OPERATION_SECONDS
from .error_classifier import classify
from .exceptions import ErrorKind, NotFoundError, ServiceError
from .performance_monitor import MetricType, PerformanceMetric, log_performance_metric

logger = logging.getLogger(__name__)


def repository_operation(
    operation: Optional[str] = None,
    metric_type: MetricType = MetricType.DATABASE,
) -> Callable:
    """
    Wrap a repository method so that it only ever fails with a ServiceError.

    Engine errors are classified once here. Every call emits one performance
    event and is recorded in the owning pool's statistics.

    Args:
        operation: Name used in logs and stats, defaults to the method name
        metric_type: Category of the emitted performance event
    """
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            table = getattr(self, "table", None)
            key = f"{table.name}.{name}" if table is not None else name
            start = time.perf_counter()
            success = False
            details = None

            try:
                result = func(self, *args, **kwargs)
                success = True
                return result
            except ServiceError as e:
                details = f"{e.kind.value}: {e.message}"
                raise
            except SQLAlchemyError as e:
                error = classify(e, context=key)
                details = f"{error.kind.value}: {error.message}"
                if error.kind in (ErrorKind.DATABASE, ErrorKind.CONNECTION):
                    logger.error(f"{key} failed: {error.message}")
                raise error from e
            finally:
                elapsed = time.perf_counter() - start
                metric = PerformanceMetric(key, elapsed, success, metric_type, details)
                self.pool.stats.record(metric)
                log_performance_metric(metric)
                if elapsed > SLOW_OPERATION_SECONDS:
                    logger.warning(f"Slow operation {key} took {elapsed:.3f}s")

        return wrapper

    return decorator


def ensure_found(result, resource_type: str, resource_id=None):
    """Raise NotFoundError when a singular lookup produced nothing"""
    if result is None:
        raise NotFoundError.for_resource(resource_type, resource_id)
    return result

