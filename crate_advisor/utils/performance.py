"""Performance monitoring utilities for crate-advisor."""

import functools
import os
import time
import tracemalloc
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

from rich.console import Console
from rich.table import Table

from .logging import get_logger

F = TypeVar('F', bound=Callable[..., Any])

BENCHMARK_ENV_VAR = "CRATE_ADVISOR_VERBOSE_BENCHMARK"
_BYTES_PER_MB = 1024 * 1024


@dataclass
class PerformanceMetrics:
    """Timing of one measured operation; memory figures are in MB."""

    operation: str
    execution_time: float
    memory_usage: Optional[float] = None
    memory_peak: Optional[float] = None


class PerformanceMonitor:
    """Collects timings of named resolver and store operations.

    Memory is only sampled when tracking is enabled, since tracemalloc slows
    every allocation down.
    """

    def __init__(self, enable_memory_tracking: bool = False) -> None:
        self.metrics: List[PerformanceMetrics] = []
        self.enable_memory_tracking = enable_memory_tracking

        if enable_memory_tracking and not tracemalloc.is_tracing():
            tracemalloc.start()

    @contextmanager
    def measure(self, operation: str) -> Iterator[None]:
        """Record the duration of the enclosed block under ``operation``.

        Args:
            operation: Name the metric is grouped under

        Yields:
            None
        """
        start_memory = tracemalloc.get_traced_memory()[0] if self.enable_memory_tracking else 0
        start_time = time.perf_counter()

        try:
            yield
        finally:
            metric = PerformanceMetrics(operation, time.perf_counter() - start_time)
            if self.enable_memory_tracking:
                current_memory, peak_memory = tracemalloc.get_traced_memory()
                metric.memory_usage = (current_memory - start_memory) / _BYTES_PER_MB
                metric.memory_peak = peak_memory / _BYTES_PER_MB
            self.metrics.append(metric)

    def get_operation_totals(self) -> Dict[str, Dict[str, float]]:
        """Call count and total time per operation, in first-seen order."""
        totals: Dict[str, Dict[str, float]] = {}
        for metric in self.metrics:
            entry = totals.setdefault(metric.operation, {"calls": 0, "total_time": 0.0})
            entry["calls"] += 1
            entry["total_time"] += metric.execution_time
        return totals

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary.

        Returns:
            Dictionary with performance summary, empty when nothing was measured
        """
        if not self.metrics:
            return {}

        total_time = sum(m.execution_time for m in self.metrics)
        summary: Dict[str, Any] = {
            "total_executions": len(self.metrics),
            "total_time": total_time,
            "average_time": total_time / len(self.metrics),
            "operations": self.get_operation_totals(),
            "metrics": self.metrics,
        }
        if self.enable_memory_tracking:
            summary["total_memory"] = sum(m.memory_usage or 0 for m in self.metrics)
            summary["max_peak_memory"] = max(m.memory_peak or 0 for m in self.metrics)
        return summary

    def print_summary(self, console: Optional[Console] = None) -> None:
        """Print one row per operation plus the overall totals."""
        summary = self.get_summary()
        if not summary:
            return

        table = Table(title="Performance Summary")
        table.add_column("Operation", style="cyan")
        table.add_column("Calls", justify="right")
        table.add_column("Total", style="green", justify="right")
        table.add_column("Average", style="green", justify="right")

        for operation, entry in summary["operations"].items():
            table.add_row(
                operation,
                str(entry["calls"]),
                f"{entry['total_time']:.4f}s",
                f"{entry['total_time'] / entry['calls']:.4f}s",
            )
        table.add_row(
            "all",
            str(summary["total_executions"]),
            f"{summary['total_time']:.4f}s",
            f"{summary['average_time']:.4f}s",
            style="bold",
        )

        console = console or Console()
        console.print(table)
        if self.enable_memory_tracking:
            console.print(
                f"Memory: {summary['total_memory']:.2f} MB retained, "
                f"{summary['max_peak_memory']:.2f} MB peak"
            )


def benchmark(func: F) -> F:
    """Log how long each call of ``func`` takes.

    Timing is only logged when CRATE_ADVISOR_VERBOSE_BENCHMARK is set.
    """
    logger = get_logger("Performance")

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            if os.environ.get(BENCHMARK_ENV_VAR):
                logger.info(f"{func.__qualname__} took {time.perf_counter() - start_time:.4f} seconds")
    return wrapper  # type: ignore[return-value]
