r"""
Metrics collection.

One collector is owned by each sweep and handed to every strategy
invocation. Records may arrive from worker threads during the concurrent
edge phase, so appends are serialized by a lock.

    from write_bench.metrics.collector import MetricsCollector
    from write_bench.types import MetricsKey

    collector = MetricsCollector()
    collector.record(MetricsKey("batch", 500, 0.5), read_objects=0, write_objects=500,
                     read_queries=0, write_queries=1, elapsed_ns=1_000_000)
"""

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from write_bench.log import get_logger
from write_bench.types import MetricsKey, MetricsSample

__all__ = ["MetricsCollector", "SessionInfo", "compute_throughput"]

logger = get_logger(__name__)


@dataclass
class SessionInfo:
    """Information about a sweep session.

    Attributes:
        session_id: Unique session identifier.
        started_at: Session start timestamp.
        completed_at: Session end timestamp (empty if ongoing).
        profile: Sweep profile name.
        store: Store name the sweep ran against.
        workloads: Workload phases that ran.
    """

    session_id: str = ""
    started_at: str = ""
    completed_at: str = ""
    profile: str = ""
    store: str = ""
    workloads: list[str] = field(default_factory=list)


def compute_throughput(objects: int, elapsed_ns: int) -> float:
    """Objects per second; infinite when no time elapsed."""
    if elapsed_ns <= 0:
        return float("inf")
    return objects / (elapsed_ns / 1_000_000_000)


class MetricsCollector:
    """Thread-safe store of per-invocation samples keyed by MetricsKey."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._samples: dict[MetricsKey, list[MetricsSample]] = {}
        self._order: list[tuple[MetricsKey, MetricsSample]] = []
        self._session = SessionInfo()

    def start_session(self, *, profile: str, store: str, workloads: list[str]) -> None:
        """Start a new sweep session."""
        started_at = datetime.now(UTC)
        self._session = SessionInfo(
            session_id=f"sweep_{started_at.strftime('%Y%m%d_%H%M%S')}",
            started_at=started_at.isoformat(),
            profile=profile,
            store=store,
            workloads=workloads,
        )

    def end_session(self) -> None:
        """End the current sweep session."""
        self._session.completed_at = datetime.now(UTC).isoformat()

    def record(
        self,
        key: MetricsKey,
        *,
        read_objects: int,
        write_objects: int,
        read_queries: int,
        write_queries: int,
        elapsed_ns: int,
    ) -> MetricsSample:
        """Record one executor invocation.

        Args:
            key: Comparison cell the invocation belongs to.
            read_objects: Keys returned by existence checks.
            write_objects: Objects handed to write statements.
            read_queries: Read round trips.
            write_queries: Write round trips.
            elapsed_ns: Wall-clock duration.

        Returns:
            The stored sample with derived throughputs.
        """
        sample = MetricsSample(
            read_objects=read_objects,
            write_objects=write_objects,
            read_queries=read_queries,
            write_queries=write_queries,
            elapsed_ns=elapsed_ns,
            throughput=compute_throughput(read_objects + write_objects, elapsed_ns),
            write_throughput=compute_throughput(write_objects, elapsed_ns),
        )
        self.add(key, sample)
        logger.info(
            "invocation_recorded",
            strategy=key.strategy_name,
            batch_size=key.batch_size,
            contention_ratio=key.contention_ratio,
            read_objects=read_objects,
            write_objects=write_objects,
            read_queries=read_queries,
            write_queries=write_queries,
            elapsed_ms=round(sample.elapsed_ms, 3),
            write_throughput=round(sample.write_throughput, 2),
        )
        return sample

    def add(self, key: MetricsKey, sample: MetricsSample) -> None:
        """Append an already built sample."""
        with self._lock:
            self._samples.setdefault(key, []).append(sample)
            self._order.append((key, sample))

    @property
    def session(self) -> SessionInfo:
        """Get session information."""
        return self._session

    def keys(self) -> list[MetricsKey]:
        """Keys in first-recorded order."""
        with self._lock:
            return list(self._samples)

    def samples(self, key: MetricsKey) -> list[MetricsSample]:
        """Samples recorded under ``key`` (empty if none)."""
        with self._lock:
            return list(self._samples.get(key, ()))

    def records(self) -> list[tuple[MetricsKey, MetricsSample]]:
        """Every (key, sample) pair in recording order."""
        with self._lock:
            return list(self._order)

    def __len__(self) -> int:
        with self._lock:
            return len(self._order)

    def to_dict(self) -> dict[str, Any]:
        """Convert session and raw samples to a dictionary."""
        return {
            "session": {
                "id": self._session.session_id,
                "started_at": self._session.started_at,
                "completed_at": self._session.completed_at,
                "profile": self._session.profile,
                "store": self._session.store,
                "workloads": self._session.workloads,
            },
            "samples": [
                {
                    "strategy": key.strategy_name,
                    "batch_size": key.batch_size,
                    "contention_ratio": key.contention_ratio,
                    "read_objects": sample.read_objects,
                    "write_objects": sample.write_objects,
                    "read_queries": sample.read_queries,
                    "write_queries": sample.write_queries,
                    "elapsed_ns": sample.elapsed_ns,
                    "throughput": sample.throughput,
                    "write_throughput": sample.write_throughput,
                }
                for key, sample in self.records()
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetricsCollector":
        """Rebuild a collector from ``to_dict`` output."""
        collector = cls()
        session = data.get("session", {})
        collector._session = SessionInfo(
            session_id=session.get("id", ""),
            started_at=session.get("started_at", ""),
            completed_at=session.get("completed_at", ""),
            profile=session.get("profile", ""),
            store=session.get("store", ""),
            workloads=list(session.get("workloads", [])),
        )
        for item in data.get("samples", []):
            key = MetricsKey(item["strategy"], int(item["batch_size"]), float(item["contention_ratio"]))
            sample = MetricsSample(
                read_objects=int(item["read_objects"]),
                write_objects=int(item["write_objects"]),
                read_queries=int(item["read_queries"]),
                write_queries=int(item["write_queries"]),
                elapsed_ns=int(item["elapsed_ns"]),
                throughput=float(item["throughput"]),
                write_throughput=float(item["write_throughput"]),
            )
            collector.add(key, sample)
        return collector
