r"""
Blind write strategies.

Blind strategies write every statement unconditionally. They issue no read
queries, and against a key that already exists a CREATE statement fails on
the uniqueness constraint.

    from write_bench.strategies.blind import BatchStrategy

    BatchStrategy().execute(store, statements, batch_size=500, contention_ratio=0.0, collector=collector)
"""

from collections.abc import Sequence

from write_bench.batching import rewrite
from write_bench.protocols import Transaction
from write_bench.statements import ParameterizedStatement
from write_bench.strategies.base import BaseStrategy, StrategyRegistry
from write_bench.types import Granularity, InvocationCounts

__all__ = ["RowStrategy", "BatchStrategy", "TxnBatchStrategy"]


@StrategyRegistry.register("row")
class RowStrategy(BaseStrategy):
    """One round trip per statement, all in one transaction."""

    @property
    def name(self) -> str:
        return "row"

    def write_chunk(
        self,
        tx: Transaction,
        chunk: Sequence[ParameterizedStatement],
        counts: InvocationCounts,
    ) -> None:
        for statement in chunk:
            tx.run(statement.text, statement.as_dict())
            counts.write_queries += 1
            counts.write_objects += 1


@StrategyRegistry.register("batch")
class BatchStrategy(BaseStrategy):
    """One UNWIND round trip per chunk, all chunks in one transaction."""

    @property
    def name(self) -> str:
        return "batch"

    def write_chunk(
        self,
        tx: Transaction,
        chunk: Sequence[ParameterizedStatement],
        counts: InvocationCounts,
    ) -> None:
        composite = rewrite(chunk)
        tx.run(composite.text, composite.as_dict())
        counts.write_queries += 1
        counts.write_objects += len(composite)


@StrategyRegistry.register("txn_batch")
class TxnBatchStrategy(BatchStrategy):
    """One UNWIND round trip per chunk, each chunk committed on its own."""

    granularity = Granularity.MULTI_TXN

    @property
    def name(self) -> str:
        return "txn_batch"
