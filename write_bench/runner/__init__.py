r"""
Sweep runner and orchestration.

Drives the node and edge sweeps over the profile's batch sizes, contention
ratios and runs, collecting one sample per strategy invocation.

    from write_bench.runner import BenchmarkOrchestrator

    orchestrator = BenchmarkOrchestrator(store)
    result = orchestrator.run()
"""

from write_bench.runner.concurrent import run_concurrently
from write_bench.runner.experiments import NODE_EXPERIMENTS, Experiment
from write_bench.runner.orchestrator import (
    WORKLOADS,
    BenchmarkOrchestrator,
    OrchestratorConfig,
    ProgressCallback,
    SweepResult,
)

__all__ = [
    "BenchmarkOrchestrator",
    "Experiment",
    "NODE_EXPERIMENTS",
    "OrchestratorConfig",
    "ProgressCallback",
    "SweepResult",
    "WORKLOADS",
    "run_concurrently",
]
