# market_db/performance_monitor.py
"""
Performance events and operation statistics
"""
import json
import logging
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class MetricType(str, Enum):
    """Category of a performance event"""
    DATABASE = "Database"
    API = "Api"
    BUSINESS = "Business"
    SYSTEM = "System"


@dataclass
class PerformanceMetric:
    """A single structured outcome event"""
    operation: str
    duration: float
    success: bool
    metric_type: MetricType = MetricType.DATABASE
    details: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": self.operation,
            "duration_ms": self.duration * 1000.0,
            "success": self.success,
            "type": self.metric_type.value,
            "details": self.details,
        })


def format_duration(seconds: float) -> str:
    """Format a duration given in seconds as µs, ms or s"""
    micros = seconds * 1_000_000
    if micros >= 1_000_000:
        return f"{micros / 1_000_000:.2f}s"
    if micros >= 1000:
        return f"{micros / 1000:.2f}ms"
    return f"{micros:.2f}µs"


def log_performance_metric(metric: PerformanceMetric) -> None:
    """Emit one human readable line and one JSON line for the metric"""
    status = "SUCCESS" if metric.success else "FAILURE"
    logger.info(
        f"PERFORMANCE_METRIC - {datetime.now(timezone.utc).isoformat()} - "
        f"Operation: {metric.operation}, Status: {status}, "
        f"Duration: {format_duration(metric.duration)}, "
        f"Type: {metric.metric_type.value}, Details: {metric.details or 'None'}"
    )
    logger.debug(f"METRIC_JSON {metric.to_json()}")


@dataclass
class OperationMetrics:
    """Aggregated metrics for one operation name"""
    count: int = 0
    total_time: float = 0.0
    min_time: float = float('inf')
    max_time: float = 0.0
    success_count: int = 0
    error_count: int = 0
    errors: List[str] = field(default_factory=list)
    last_executed: Optional[datetime] = None

    @property
    def avg_time(self) -> float:
        return self.total_time / self.count if self.count > 0 else 0.0

    @property
    def success_rate(self) -> float:
        total = self.success_count + self.error_count
        return (self.success_count / total * 100) if total > 0 else 100.0


class QueryStats:
    """Track operation statistics with thread safety"""

    MAX_RECENT_ERRORS = 10

    def __init__(self):
        self._lock = threading.RLock()
        self._stats: Dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self._start_time = time.time()

    def record(self, metric: PerformanceMetric) -> None:
        """Fold a performance event into the aggregate for its operation"""
        with self._lock:
            stats = self._stats[metric.operation]
            stats.count += 1
            stats.total_time += metric.duration
            stats.min_time = min(stats.min_time, metric.duration)
            stats.max_time = max(stats.max_time, metric.duration)
            stats.last_executed = datetime.now(timezone.utc)
            if metric.success:
                stats.success_count += 1
            else:
                stats.error_count += 1
                if metric.details:
                    stats.errors.append(metric.details)
                    del stats.errors[:-self.MAX_RECENT_ERRORS]

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Get current statistics snapshot"""
        with self._lock:
            return {
                key: {
                    "count": metrics.count,
                    "total_time": metrics.total_time,
                    "avg_time": metrics.avg_time,
                    "min_time": metrics.min_time if metrics.count else 0.0,
                    "max_time": metrics.max_time,
                    "success_count": metrics.success_count,
                    "error_count": metrics.error_count,
                    "success_rate": metrics.success_rate,
                    "last_executed": (
                        metrics.last_executed.isoformat()
                        if metrics.last_executed else None
                    ),
                    "recent_errors": list(metrics.errors),
                }
                for key, metrics in self._stats.items()
            }

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()
            self._start_time = time.time()

    def get_top_slow_operations(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Get slowest operations by average time"""
        slow = [
            {"operation": key, "avg_time": stats["avg_time"], "count": stats["count"]}
            for key, stats in self.snapshot().items()
        ]
        slow.sort(key=lambda item: item["avg_time"], reverse=True)
        return slow[:limit]

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get overall performance summary"""
        snapshot = self.snapshot()
        total = sum(stats["count"] for stats in snapshot.values())
        total_time = sum(stats["total_time"] for stats in snapshot.values())
        errors = sum(stats["error_count"] for stats in snapshot.values())

        return {
            "total_operations": total,
            "total_execution_time": total_time,
            "avg_time_per_operation": total_time / total if total else 0.0,
            "total_errors": errors,
            "error_rate_percent": (errors / total * 100) if total else 0.0,
            "unique_operations": len(snapshot),
            "uptime_hours": (time.time() - self._start_time) / 3600,
        }
