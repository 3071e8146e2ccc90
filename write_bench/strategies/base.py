r"""
Base strategy implementation.

A strategy applies a statement set to a store along three axes: transaction
granularity, conflict handling and (for guarded strategies) the shape of the
existence check. Subclasses only describe how one chunk is written; session
handling, timing, cancellation and metrics live here.

    from write_bench.strategies.base import BaseStrategy, StrategyRegistry

    @StrategyRegistry.register("my_strategy")
    class MyStrategy(BaseStrategy):
        def write_chunk(self, tx, chunk, counts) -> None:
            ...
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from write_bench.batching import batch
from write_bench.errors import StrategyCancelled
from write_bench.log import get_logger
from write_bench.metrics.collector import MetricsCollector
from write_bench.protocols import GraphStore, StoreSession, Transaction
from write_bench.statements import ParameterizedStatement
from write_bench.timing import Timer
from write_bench.types import ConflictHandling, ExistenceCheck, Granularity, InvocationCounts, MetricsKey

__all__ = ["BaseStrategy", "StrategyRegistry", "measured_invocation"]

logger = get_logger(__name__)


class StrategyRegistry:
    """Registry for write strategies."""

    _strategies: dict[str, type["BaseStrategy"]] = {}

    @classmethod
    def register(cls, name: str) -> Any:
        """Decorator to register a strategy class."""

        def decorator(strategy_cls: type["BaseStrategy"]) -> type["BaseStrategy"]:
            cls._strategies[name] = strategy_cls
            return strategy_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type["BaseStrategy"] | None:
        """Get strategy class by name."""
        return cls._strategies.get(name)

    @classmethod
    def list(cls) -> list[str]:
        """List registered strategy names."""
        return list(cls._strategies.keys())

    @classmethod
    def create(cls, name: str) -> "BaseStrategy":
        """Create strategy instance by name."""
        strategy_cls = cls.get(name)
        if strategy_cls is None:
            valid = ", ".join(cls.list()) or "none"
            msg = f"Unknown strategy '{name}'. Registered: {valid}"
            raise ValueError(msg)
        return strategy_cls()


@contextmanager
def measured_invocation(
    store: GraphStore,
    collector: MetricsCollector,
    key: MetricsKey,
) -> Iterator[tuple[StoreSession, InvocationCounts]]:
    """Scope one strategy invocation around a store session.

    Once the session is open, it is closed and exactly one sample is
    recorded under ``key`` whether the body returns or raises. If opening
    the session fails, nothing was measured and no sample is recorded.

    Args:
        store: Store to open the session on.
        collector: Collector receiving the sample.
        key: Metrics key of the invocation.

    Yields:
        The open session and the counters the body increments.
    """
    counts = InvocationCounts()
    with store.session() as session:
        timer = Timer()
        try:
            with timer:
                yield session, counts
        finally:
            collector.record(
                key,
                read_objects=counts.read_objects,
                write_objects=counts.write_objects,
                read_queries=counts.read_queries,
                write_queries=counts.write_queries,
                elapsed_ns=timer.elapsed_ns,
            )


def check_cancelled(cancel: threading.Event | None, name: str) -> None:
    """Raise StrategyCancelled if a sibling task asked to stop."""
    if cancel is not None and cancel.is_set():
        msg = f"{name} cancelled before its next batch"
        raise StrategyCancelled(msg)


class BaseStrategy(ABC):
    """Base class for write strategies."""

    granularity: Granularity = Granularity.SINGLE_TXN
    conflict_handling: ConflictHandling = ConflictHandling.BLIND
    existence_check: ExistenceCheck = ExistenceCheck.NONE

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name."""
        ...

    @abstractmethod
    def write_chunk(
        self,
        tx: Transaction,
        chunk: Sequence[ParameterizedStatement],
        counts: InvocationCounts,
    ) -> None:
        """Apply one chunk inside ``tx`` and bump ``counts`` for every round trip."""
        ...

    def execute(
        self,
        store: GraphStore,
        statements: Sequence[ParameterizedStatement],
        *,
        batch_size: int,
        contention_ratio: float,
        collector: MetricsCollector,
        name: str | None = None,
        cancel: threading.Event | None = None,
    ) -> InvocationCounts:
        """Apply ``statements`` to ``store`` and record one metrics sample.

        Args:
            store: Target store.
            statements: Statement set, all sharing one template.
            batch_size: Chunk size.
            contention_ratio: Recorded in the metrics key only.
            collector: Collector receiving the sample.
            name: Metrics name (defaults to the strategy name).
            cancel: Event that stops the strategy before its next chunk.

        Returns:
            Counts of objects and queries issued.

        Raises:
            ValueError: If batch_size is smaller than 1.
            StoreError: On the first failing store call.
            StrategyCancelled: If ``cancel`` was set before a chunk.
        """
        chunks = batch(statements, batch_size)
        key = MetricsKey(name or self.name, batch_size, contention_ratio)
        logger.debug("strategy_started", strategy=key.strategy_name, statements=len(statements), chunks=len(chunks))

        with measured_invocation(store, collector, key) as (session, counts):
            if self.granularity == Granularity.SINGLE_TXN:
                self._apply(session, chunks, counts, key.strategy_name, cancel)
            else:
                for chunk in chunks:
                    self._apply(session, [chunk], counts, key.strategy_name, cancel)

        return counts

    def _apply(
        self,
        session: StoreSession,
        chunks: Sequence[Sequence[ParameterizedStatement]],
        counts: InvocationCounts,
        name: str,
        cancel: threading.Event | None,
    ) -> None:
        """Write ``chunks`` in one transaction and add the round trips to ``counts``."""
        attempts: list[InvocationCounts] = []

        def work(tx: Transaction) -> None:
            attempt = InvocationCounts()
            attempts.append(attempt)
            for chunk in chunks:
                check_cancelled(cancel, name)
                self.write_chunk(tx, chunk, attempt)

        try:
            session.execute_write(work)
        finally:
            # Only the last attempt counts when the store retried
            if attempts:
                counts += attempts[-1]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
