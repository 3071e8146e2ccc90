r"""
Metrics collection and aggregation.

    from write_bench.metrics import MetricsCollector, summarize
"""

from write_bench.metrics.aggregate import KeySummary, log_summaries, summarize
from write_bench.metrics.collector import MetricsCollector, SessionInfo, compute_throughput

__all__ = [
    "KeySummary",
    "MetricsCollector",
    "SessionInfo",
    "compute_throughput",
    "log_summaries",
    "summarize",
]
