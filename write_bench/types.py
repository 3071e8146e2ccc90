r"""
Core types for the write-strategy benchmark.

    from write_bench.types import MetricsKey, SweepConfig, BenchmarkMatrix

    matrix = BenchmarkMatrix(SweepConfig(name="tiny", total_objects=100, batch_sizes=(10,), contention_ratios=(0.5,)))
    for batch_size, contention_ratio, run in matrix.cells():
        ...
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum, auto

__all__ = [
    "Granularity",
    "ConflictHandling",
    "ExistenceCheck",
    "InvocationCounts",
    "MetricsKey",
    "MetricsSample",
    "SweepConfig",
    "BenchmarkMatrix",
]


class Granularity(IntEnum):
    """Transaction boundary of a strategy."""

    SINGLE_TXN = auto()
    MULTI_TXN = auto()


class ConflictHandling(IntEnum):
    """How a strategy treats keys that may already exist."""

    BLIND = auto()
    GUARDED = auto()


class ExistenceCheck(IntEnum):
    """Query shape used by guarded strategies to find existing keys."""

    NONE = auto()
    POINT_LOOKUP = auto()
    MEMBERSHIP = auto()
    SET_JOIN = auto()


@dataclass(slots=True)
class InvocationCounts:
    """Counters accumulated by one executor invocation.

    Attributes:
        read_objects: Keys returned by existence checks.
        write_objects: Objects handed to write statements.
        read_queries: Existence-check round trips.
        write_queries: Write round trips.
    """

    read_objects: int = 0
    write_objects: int = 0
    read_queries: int = 0
    write_queries: int = 0

    def __iadd__(self, other: "InvocationCounts") -> "InvocationCounts":
        self.read_objects += other.read_objects
        self.write_objects += other.write_objects
        self.read_queries += other.read_queries
        self.write_queries += other.write_queries
        return self


@dataclass(frozen=True, slots=True, order=True)
class MetricsKey:
    """Identifies one comparison cell of the sweep.

    Attributes:
        strategy_name: Experiment or strategy name.
        batch_size: Batch size the invocation ran with.
        contention_ratio: Fraction of keys pre-existing in the store.
    """

    strategy_name: str
    batch_size: int
    contention_ratio: float


@dataclass(frozen=True, slots=True)
class MetricsSample:
    """One recorded executor invocation.

    Attributes:
        read_objects: Keys returned by existence checks.
        write_objects: Objects written.
        read_queries: Read round trips issued.
        write_queries: Write round trips issued.
        elapsed_ns: Wall-clock duration in nanoseconds.
        throughput: (read_objects + write_objects) per second.
        write_throughput: write_objects per second.
    """

    read_objects: int
    write_objects: int
    read_queries: int
    write_queries: int
    elapsed_ns: int
    throughput: float
    write_throughput: float

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed_ns / 1_000_000

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return self.elapsed_ns / 1_000_000_000


@dataclass(frozen=True, slots=True)
class SweepConfig:
    """Static parameters of one benchmark sweep.

    Attributes:
        name: Profile name.
        total_objects: Size of the node workload's object domain.
        batch_sizes: Batch sizes to sweep.
        contention_ratios: Contention ratios to sweep.
        runs: Repetitions per (batch size, contention ratio) cell.
        seed: Random seed for the sampler (None = unseeded).
    """

    name: str
    total_objects: int
    batch_sizes: tuple[int, ...]
    contention_ratios: tuple[float, ...]
    runs: int = 1
    seed: int | None = None


@dataclass(frozen=True, slots=True)
class BenchmarkMatrix:
    """Cross product of batch sizes, contention ratios and runs."""

    config: SweepConfig

    def cells(self) -> Iterator[tuple[int, float, int]]:
        """Yield (batch_size, contention_ratio, run) in sweep order."""
        for batch_size in self.config.batch_sizes:
            for contention_ratio in self.config.contention_ratios:
                for run in range(self.config.runs):
                    yield batch_size, contention_ratio, run

    def __len__(self) -> int:
        return len(self.config.batch_sizes) * len(self.config.contention_ratios) * self.config.runs
