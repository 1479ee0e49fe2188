"""
Metrics Module: Diagnostics, counters, histograms.

Counters never influence results; they only record what the engine did:
- Counters: samples_in, position_solve_attempts, route_search_success, etc.
- Histograms: solver residuals, search expansions, route length
- Drop reason codes for every absent/empty result

Usage:
    from nav_core.metrics import get_metrics

    metrics = get_metrics()
    metrics.increment('samples_in')
    metrics.increment_drop('unknown_anchor')
    metrics.record_histogram('route_distance_m', 15.0)
"""

from .counters import MetricsCollector, CounterSnapshot

# Global singleton for easy access
_global_metrics = None


def get_metrics() -> MetricsCollector:
    """
    Get the global metrics collector singleton.

    Returns:
        MetricsCollector instance
    """
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = MetricsCollector()
    return _global_metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _global_metrics
    _global_metrics = MetricsCollector()


__all__ = ['MetricsCollector', 'CounterSnapshot', 'get_metrics', 'reset_metrics']
