r"""
Exception hierarchy for write-bench.

Every error that reaches the sweep is fatal to it; the engine never retries.

    from write_bench.errors import ConstraintViolation, StoreError

    try:
        strategy.execute(store, statements, batch_size=100, contention_ratio=0.5, collector=collector)
    except ConstraintViolation:
        ...
"""

__all__ = [
    "WriteBenchError",
    "StoreError",
    "ConstraintViolation",
    "StrategyCancelled",
    "AggregationError",
]


class WriteBenchError(Exception):
    """Base class for all write-bench errors."""


class StoreError(WriteBenchError):
    """A graph store call failed (connectivity, syntax, transaction)."""

    def __init__(self, message: str, *, statement: str | None = None) -> None:
        super().__init__(message)
        self.statement = statement


class ConstraintViolation(StoreError):
    """A write violated a uniqueness constraint on an existing object."""


class StrategyCancelled(WriteBenchError):
    """A sibling task failed and this executor stopped before its next batch."""


class AggregationError(WriteBenchError):
    """Metrics could not be aggregated (e.g. a key without samples)."""
