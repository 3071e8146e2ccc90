r"""
Benchmark orchestrator driving the write-strategy sweep.

For every (batch size, contention ratio, run) cell:

- nodes: a fresh node workload, then every node experiment in order; the
  store is wiped, seeded with the partial-create set, written by the
  measured strategy and wiped again.
- edges: a fresh edge workload; users and groups are created, then the
  bindings and both update streams run as concurrent tasks whose joined
  latency is recorded under ``concurrent_updates``.

Any error ends the sweep.

    from write_bench.runner import BenchmarkOrchestrator, OrchestratorConfig

    orchestrator = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile="smoke"))
    result = orchestrator.run()
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from write_bench.config import DEFAULT_PROFILE, get_profile
from write_bench.log import get_logger
from write_bench.metrics.aggregate import KeySummary, log_summaries, summarize
from write_bench.metrics.collector import MetricsCollector
from write_bench.protocols import GraphStore
from write_bench.runner.concurrent import run_concurrently
from write_bench.runner.experiments import (
    CONCURRENT_UPDATES,
    EDGE_BINDINGS,
    EDGE_GROUP_UPDATES,
    EDGE_GROUPS,
    EDGE_STRATEGY,
    EDGE_USER_UPDATES,
    EDGE_USERS,
    NODE_EXPERIMENTS,
    Experiment,
)
from write_bench.statements import ParameterizedStatement
from write_bench.strategies import BaseStrategy, StrategyRegistry
from write_bench.timing import Timer, timed_section
from write_bench.types import BenchmarkMatrix, InvocationCounts, MetricsKey, SweepConfig
from write_bench.workload.generator import BINDING_TYPE, GROUP_LABEL, USER_LABEL, WorkloadGenerator

__all__ = ["BenchmarkOrchestrator", "OrchestratorConfig", "SweepResult", "ProgressCallback", "WORKLOADS"]

logger = get_logger(__name__)

ProgressCallback = Callable[[str, str, str], None]

WORKLOADS = ("nodes", "edges")


@dataclass
class OrchestratorConfig:
    """Configuration for a sweep.

    Attributes:
        profile: Sweep profile or its name.
        workloads: Workload phases to run ("nodes", "edges").
        experiments: Node experiments in execution order.
    """

    profile: str | SweepConfig = DEFAULT_PROFILE
    workloads: tuple[str, ...] = WORKLOADS
    experiments: tuple[Experiment, ...] = NODE_EXPERIMENTS


@dataclass
class SweepResult:
    """Results from one sweep.

    Attributes:
        sweep: Profile the sweep ran with.
        store: Store name.
        collector: Every recorded sample.
        summaries: Per-key medians.
        started_at: Timestamp when the sweep started.
        completed_at: Timestamp when the sweep completed.
    """

    sweep: SweepConfig
    store: str
    collector: MetricsCollector
    summaries: list[KeySummary] = field(default_factory=list)
    started_at: float = 0.0
    completed_at: float = 0.0

    @property
    def duration_seconds(self) -> float:
        """Total duration in seconds."""
        return self.completed_at - self.started_at

    @property
    def sample_count(self) -> int:
        """Number of recorded samples."""
        return len(self.collector)


class BenchmarkOrchestrator:
    """Runs the write-strategy sweep against one store."""

    def __init__(self, store: GraphStore, *, config: OrchestratorConfig | None = None) -> None:
        self._store = store
        self._config = config or OrchestratorConfig()
        self._progress_callback: ProgressCallback | None = None
        self._strategies: dict[str, BaseStrategy] = {}

        unknown = [w for w in self._config.workloads if w not in WORKLOADS]
        if unknown:
            msg = f"Unknown workloads {unknown}. Valid workloads: {', '.join(WORKLOADS)}"
            raise ValueError(msg)

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set callback(phase, cell, experiment) for progress updates."""
        self._progress_callback = callback

    @property
    def sweep(self) -> SweepConfig:
        """Resolved sweep profile."""
        profile = self._config.profile
        if isinstance(profile, str):
            return get_profile(profile)
        return profile

    def _strategy(self, name: str) -> BaseStrategy:
        if name not in self._strategies:
            self._strategies[name] = StrategyRegistry.create(name)
        return self._strategies[name]

    def _progress(self, phase: str, cell: str, experiment: str) -> None:
        if self._progress_callback:
            self._progress_callback(phase, cell, experiment)

    def run(self) -> SweepResult:
        """Run the whole sweep.

        Returns:
            SweepResult with every sample and the per-key medians.

        Raises:
            StoreError: If setup or any strategy invocation fails.
            AggregationError: If medians cannot be computed.
        """
        sweep = self.sweep
        collector = MetricsCollector()
        collector.start_session(profile=sweep.name, store=self._store.name, workloads=list(self._config.workloads))
        result = SweepResult(sweep=sweep, store=self._store.name, collector=collector, started_at=time.time())

        logger.info(
            "sweep_started",
            profile=sweep.name,
            store=self._store.name,
            cells=len(BenchmarkMatrix(sweep)),
            workloads=list(self._config.workloads),
        )
        self._setup()

        generator = WorkloadGenerator(sweep.total_objects, seed=sweep.seed)
        for batch_size, contention_ratio, run in BenchmarkMatrix(sweep).cells():
            cell = f"batch={batch_size} ratio={contention_ratio} run={run + 1}/{sweep.runs}"
            with timed_section(cell, callback=self._log_cell):
                if "nodes" in self._config.workloads:
                    self._run_node_cell(generator, batch_size, contention_ratio, cell, collector)
                if "edges" in self._config.workloads:
                    self._run_edge_cell(generator, batch_size, contention_ratio, cell, collector)

        collector.end_session()
        result.completed_at = time.time()
        result.summaries = summarize(collector)
        log_summaries(result.summaries)
        logger.info("sweep_completed", samples=result.sample_count, duration_s=round(result.duration_seconds, 2))
        return result

    def _log_cell(self, cell: str, elapsed_ns: int) -> None:
        logger.info("cell_completed", cell=cell, elapsed_ms=round(elapsed_ns / 1_000_000, 1))

    def _setup(self) -> None:
        self._store.ensure_constraints((USER_LABEL, GROUP_LABEL), (BINDING_TYPE,))
        self._store.wipe()

    def _run_node_cell(
        self,
        generator: WorkloadGenerator,
        batch_size: int,
        contention_ratio: float,
        cell: str,
        collector: MetricsCollector,
    ) -> None:
        workload = generator.node_workload(contention_ratio)
        for experiment in self._config.experiments:
            self._progress("nodes", cell, experiment.name)
            self._store.wipe()
            self._strategy(experiment.seed_strategy).execute(
                self._store,
                workload.partial_create,
                batch_size=batch_size,
                contention_ratio=contention_ratio,
                collector=collector,
                name=experiment.seed_name,
            )
            self._strategy(experiment.strategy).execute(
                self._store,
                workload.statements(experiment.statements),
                batch_size=batch_size,
                contention_ratio=contention_ratio,
                collector=collector,
                name=experiment.name,
            )
            self._store.wipe()

    def _run_edge_cell(
        self,
        generator: WorkloadGenerator,
        batch_size: int,
        contention_ratio: float,
        cell: str,
        collector: MetricsCollector,
    ) -> None:
        workload = generator.edge_workload(contention_ratio)
        strategy = self._strategy(EDGE_STRATEGY)
        self._store.wipe()

        # Bindings match both endpoints, so nodes must exist first
        for name, statements in ((EDGE_USERS, workload.users), (EDGE_GROUPS, workload.groups)):
            self._progress("edges", cell, name)
            strategy.execute(
                self._store,
                statements,
                batch_size=batch_size,
                contention_ratio=contention_ratio,
                collector=collector,
                name=name,
            )

        self._progress("edges", cell, CONCURRENT_UPDATES)
        streams = {
            EDGE_BINDINGS: workload.bindings,
            EDGE_USER_UPDATES: workload.user_updates,
            EDGE_GROUP_UPDATES: workload.group_updates,
        }

        def task(name: str, statements: Sequence[ParameterizedStatement]) -> Callable[..., InvocationCounts]:
            return lambda cancel: strategy.execute(
                self._store,
                statements,
                batch_size=batch_size,
                contention_ratio=contention_ratio,
                collector=collector,
                name=name,
                cancel=cancel,
            )

        with Timer() as timer:
            outcomes = run_concurrently({name: task(name, statements) for name, statements in streams.items()})

        total = InvocationCounts()
        for counts in outcomes.values():
            total += counts
        collector.record(
            MetricsKey(CONCURRENT_UPDATES, batch_size, contention_ratio),
            read_objects=total.read_objects,
            write_objects=total.write_objects,
            read_queries=total.read_queries,
            write_queries=total.write_queries,
            elapsed_ns=timer.elapsed_ns,
        )
        self._store.wipe()
