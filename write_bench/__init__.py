r"""
write-bench: write-strategy benchmark for Bolt graph databases.

Measures how guarded (check-then-write) and blind writes, batched or not,
in one or many transactions, behave as the share of pre-existing keys grows.

    from write_bench import get_profile
    from write_bench.runner import BenchmarkOrchestrator, OrchestratorConfig
    from write_bench.stores import Neo4jStore

    store = Neo4jStore()
    store.connect()
    result = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile="smoke")).run()
"""

from write_bench.config import DEFAULT_PROFILE, PROFILES, get_profile
from write_bench.errors import (
    AggregationError,
    ConstraintViolation,
    StoreError,
    StrategyCancelled,
    WriteBenchError,
)
from write_bench.types import InvocationCounts, MetricsKey, MetricsSample, SweepConfig

__all__ = [
    "AggregationError",
    "ConstraintViolation",
    "DEFAULT_PROFILE",
    "InvocationCounts",
    "MetricsKey",
    "MetricsSample",
    "PROFILES",
    "StoreError",
    "StrategyCancelled",
    "SweepConfig",
    "WriteBenchError",
    "get_profile",
]

__version__ = "0.1.0"
