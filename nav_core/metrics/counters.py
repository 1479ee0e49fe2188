"""
Metrics counters and histograms implementation.

Provides thread-safe counters for:
- Sample counts (in, filtered, dropped)
- Drop reasons (unknown_anchor, insufficient_anchors, no_path, etc.)
- Solver and planner statistics (successes, failures)
- Histograms (solver residuals, search expansions, route length)

Every degenerate outcome (absent position, empty path) is counted with a
reason code so that callers can tell them apart in diagnostics.
"""

import logging
import threading
import time
from typing import Dict, List, Optional
from dataclasses import dataclass
from collections import defaultdict
import statistics

logger = logging.getLogger(__name__)


@dataclass
class CounterSnapshot:
    """Snapshot of counter state at a point in time."""

    timestamp: float
    counters: Dict[str, int]
    drop_reasons: Dict[str, int]
    histograms: Dict[str, List[float]]

    def total_dropped(self) -> int:
        """Degenerate outcomes recorded across all reasons."""
        return sum(self.drop_reasons.values())


class MetricsCollector:
    """
    Thread-safe metrics collection.

    Usage:
        collector = MetricsCollector()
        collector.increment('samples_in')
        collector.increment_drop('unknown_anchor')
        collector.record_histogram('solver_residual_m', 0.42)

        snapshot = collector.snapshot()
        print(f"Total dropped: {snapshot.total_dropped()}")
    """

    # Standard drop reason codes
    DROP_REASONS = {
        'unknown_anchor': 'Sample from a beacon that is not configured',
        'out_of_range_sample': 'Zero RSSI, fallback distance used',
        'insufficient_anchors': 'Less than 3 ranged anchors',
        'degenerate_geometry': 'Collinear/coincident anchors or inconsistent ranges',
        'snap_failed': 'Empty graph, endpoint could not be snapped',
        'out_of_bounds': 'Grid endpoint outside the grid',
        'goal_blocked': 'Grid goal cell is a wall',
        'no_path': 'Open set exhausted without reaching the goal',
    }

    def __init__(self):
        """Initialize metrics collector."""
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = defaultdict(int)
        self._drop_reasons: Dict[str, int] = defaultdict(int)
        self._histograms: Dict[str, List[float]] = defaultdict(list)
        self._start_time = time.time()

        self._init_standard_counters()

    def _init_standard_counters(self):
        """Initialize standard counter keys."""
        standard_counters = [
            'samples_in',
            'samples_filtered',
            'position_solve_attempts',
            'position_solve_success',
            'route_search_attempts',
            'route_search_success',
        ]

        with self._lock:
            for counter in standard_counters:
                if counter not in self._counters:
                    self._counters[counter] = 0

            for reason in self.DROP_REASONS:
                if reason not in self._drop_reasons:
                    self._drop_reasons[reason] = 0

    def increment(self, counter_name: str, value: int = 1):
        """
        Increment a counter by value.

        Args:
            counter_name: Name of counter to increment
            value: Amount to increment (default 1)
        """
        with self._lock:
            self._counters[counter_name] += value

    def increment_drop(self, reason: str, value: int = 1):
        """
        Increment drop counter for specific reason.

        Args:
            reason: Drop reason code (should be in DROP_REASONS)
            value: Amount to increment (default 1)
        """
        if reason not in self.DROP_REASONS:
            # Unknown reasons are still counted
            logger.warning("Unknown drop reason '%s'", reason)

        with self._lock:
            self._drop_reasons[reason] += value
            self._counters['inputs_dropped'] += value

    def get_counter(self, counter_name: str) -> int:
        """
        Get current value of a counter.

        Args:
            counter_name: Name of counter

        Returns:
            Current counter value
        """
        with self._lock:
            return self._counters.get(counter_name, 0)

    def get_drop_count(self, reason: str) -> int:
        """Get current count for a drop reason."""
        with self._lock:
            return self._drop_reasons.get(reason, 0)

    def record_histogram(self, histogram_name: str, value: float, max_samples: int = 10000):
        """
        Record a value in a histogram.

        Args:
            histogram_name: Name of histogram
            value: Value to record
            max_samples: Maximum samples to keep (prevents unbounded growth)
        """
        with self._lock:
            samples = self._histograms[histogram_name]
            samples.append(value)

            if len(samples) > max_samples:
                # Keep most recent half
                self._histograms[histogram_name] = samples[-max_samples//2:]

    def get_histogram_stats(self, histogram_name: str) -> Optional[Dict[str, float]]:
        """
        Get statistics for a histogram.

        Args:
            histogram_name: Name of histogram

        Returns:
            Dict with min, max, mean, median, p95, p99, count
            None if histogram is empty
        """
        with self._lock:
            samples = self._histograms.get(histogram_name, [])

            if not samples:
                return None

            sorted_samples = sorted(samples)
            count = len(sorted_samples)

            return {
                'count': count,
                'min': sorted_samples[0],
                'max': sorted_samples[-1],
                'mean': statistics.mean(sorted_samples),
                'median': statistics.median(sorted_samples),
                'p95': sorted_samples[int(count * 0.95)] if count > 1 else sorted_samples[0],
                'p99': sorted_samples[int(count * 0.99)] if count > 1 else sorted_samples[0],
            }

    def snapshot(self) -> CounterSnapshot:
        """
        Get a snapshot of current metrics state.

        Returns:
            CounterSnapshot with copies of all metrics
        """
        with self._lock:
            return CounterSnapshot(
                timestamp=time.time(),
                counters=dict(self._counters),
                drop_reasons=dict(self._drop_reasons),
                histograms={k: list(v) for k, v in self._histograms.items()},
            )

    def reset(self):
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._counters.clear()
            self._drop_reasons.clear()
            self._histograms.clear()
            self._start_time = time.time()
        self._init_standard_counters()

    def get_uptime(self) -> float:
        """Get uptime in seconds since initialization."""
        return time.time() - self._start_time

    def format_summary(self) -> str:
        """Human-readable metrics summary."""
        snapshot = self.snapshot()
        uptime = self.get_uptime()

        lines = [
            "=" * 70,
            f"  METRICS SUMMARY (uptime: {uptime:.1f}s)",
            "=" * 70,
            "COUNTERS:",
        ]
        for name, value in sorted(snapshot.counters.items()):
            lines.append(f"  {name:30s}: {value:8d}")

        total_dropped = snapshot.total_dropped()
        if total_dropped > 0:
            lines.append("DROP REASONS:")
            for reason, count in sorted(snapshot.drop_reasons.items()):
                if count > 0:
                    pct = (count / total_dropped) * 100
                    lines.append(f"  {reason:30s}: {count:8d} ({pct:5.1f}%)")

        if snapshot.histograms:
            lines.append("HISTOGRAMS:")
            for name in sorted(snapshot.histograms.keys()):
                stats = self.get_histogram_stats(name)
                if stats:
                    lines.append(f"  {name}:")
                    lines.append(
                        f"    count={stats['count']}, mean={stats['mean']:.3f}, "
                        f"p95={stats['p95']:.3f}, p99={stats['p99']:.3f}"
                    )

        lines.append("=" * 70)
        return "\n".join(lines)
