r"""
Write strategies for write-bench.

    from write_bench.strategies import StrategyRegistry

    strategy = StrategyRegistry.create("batch_guarded_in")
    counts = strategy.execute(store, statements, batch_size=500, contention_ratio=0.5, collector=collector)
"""

from write_bench.strategies.base import BaseStrategy, StrategyRegistry, measured_invocation
from write_bench.strategies.blind import BatchStrategy, RowStrategy, TxnBatchStrategy
from write_bench.strategies.guarded import (
    BatchGuardedInStrategy,
    BatchGuardedUnwindStrategy,
    RowGuardedStrategy,
    TxnBatchGuardedInStrategy,
    TxnBatchGuardedUnwindStrategy,
)

__all__ = [
    "BaseStrategy",
    "BatchGuardedInStrategy",
    "BatchGuardedUnwindStrategy",
    "BatchStrategy",
    "RowGuardedStrategy",
    "RowStrategy",
    "StrategyRegistry",
    "TxnBatchGuardedInStrategy",
    "TxnBatchGuardedUnwindStrategy",
    "TxnBatchStrategy",
    "measured_invocation",
]
