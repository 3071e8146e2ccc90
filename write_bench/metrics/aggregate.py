r"""
Median aggregation of recorded samples.

    from write_bench.metrics.aggregate import summarize, log_summaries

    summaries = summarize(collector)
    log_summaries(summaries)
"""

import statistics
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from write_bench.errors import AggregationError
from write_bench.log import get_logger
from write_bench.metrics.collector import MetricsCollector
from write_bench.types import MetricsKey

__all__ = ["KeySummary", "summarize", "log_summaries"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class KeySummary:
    """Median figures for one comparison cell.

    Attributes:
        key: Comparison cell.
        samples: Number of samples aggregated.
        median_elapsed_ms: Median wall-clock time in milliseconds.
        median_throughput: Median (read + write) objects per second.
        median_write_throughput: Median written objects per second.
    """

    key: MetricsKey
    samples: int
    median_elapsed_ms: float
    median_throughput: float
    median_write_throughput: float


def summarize(collector: MetricsCollector, keys: Iterable[MetricsKey] | None = None) -> list[KeySummary]:
    """Compute per-key medians.

    Args:
        collector: Collector holding the raw samples.
        keys: Keys to summarize (default: every recorded key).

    Returns:
        One summary per key, sorted by key.

    Raises:
        AggregationError: If a requested key has no samples.
    """
    summaries = []
    for key in sorted(collector.keys() if keys is None else keys):
        samples = collector.samples(key)
        if not samples:
            msg = f"No samples recorded for {key.strategy_name} (batch {key.batch_size}, ratio {key.contention_ratio})"
            raise AggregationError(msg)
        summaries.append(
            KeySummary(
                key=key,
                samples=len(samples),
                median_elapsed_ms=statistics.median(s.elapsed_ms for s in samples),
                median_throughput=statistics.median(s.throughput for s in samples),
                median_write_throughput=statistics.median(s.write_throughput for s in samples),
            )
        )
    return summaries


def log_summaries(summaries: Sequence[KeySummary]) -> None:
    """Emit one log line per summarized key."""
    for summary in summaries:
        logger.info(
            "median_summary",
            strategy=summary.key.strategy_name,
            batch_size=summary.key.batch_size,
            contention_ratio=summary.key.contention_ratio,
            samples=summary.samples,
            median_elapsed_ms=round(summary.median_elapsed_ms, 3),
            median_throughput=round(summary.median_throughput, 2),
        )
