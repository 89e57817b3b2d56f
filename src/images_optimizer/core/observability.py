"""Per-image timing and size metrics for batch runs."""

import threading
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PerformanceMetrics:
    """Timing and byte counts of one operation on one image."""

    operation: str
    start_time: float
    end_time: float
    success: bool
    item_name: str = ""
    input_bytes: int = 0
    output_bytes: int = 0
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        """Operation duration in seconds."""
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> float:
        return self.duration * 1000


class MetricsCollector:
    """Thread-safe collector for performance metrics."""

    def __init__(self):
        self._metrics: List[PerformanceMetrics] = []
        self._lock = threading.Lock()

    def record_metric(self, metric: PerformanceMetrics):
        with self._lock:
            self._metrics.append(metric)

    def get_metrics(self, operation: Optional[str] = None) -> List[PerformanceMetrics]:
        """Get recorded metrics, optionally filtered by operation."""
        with self._lock:
            if operation:
                return [m for m in self._metrics if m.operation == operation]
            return self._metrics.copy()

    def get_summary(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """
        Summarize recorded metrics.

        Byte totals only count successful operations, since failed ones
        produce no output. Returns an empty dict when nothing was recorded.
        """
        metrics = self.get_metrics(operation)

        if not metrics:
            return {}

        durations = [m.duration for m in metrics]
        successful = [m for m in metrics if m.success]
        total_duration = sum(durations)
        input_bytes = sum(m.input_bytes for m in successful)

        return {
            "total_operations": len(metrics),
            "successful_operations": len(successful),
            "failed_operations": len(metrics) - len(successful),
            "success_rate": len(successful) / len(metrics),
            "avg_duration": total_duration / len(durations),
            "min_duration": min(durations),
            "max_duration": max(durations),
            "total_duration": total_duration,
            "total_input_bytes": input_bytes,
            "total_output_bytes": sum(m.output_bytes for m in successful),
            "bytes_per_second": input_bytes / total_duration if total_duration > 0 else 0.0,
            "slowest_item": max(metrics, key=lambda m: m.duration).item_name,
        }

    def clear_metrics(self):
        with self._lock:
            self._metrics.clear()
