r"""
Guarded write strategies.

Guarded strategies ask the store which keys already exist and write only
the absent ones. ``read_objects`` counts every key the check returned;
``write_objects`` counts the keys left to write. The write statement is
issued even when nothing is left, so each chunk always costs one read and
one write round trip.

Two check shapes are compared for batches:

- membership: ``MATCH ... WHERE n.`~id` IN $_ids``
- set-join: ``UNWIND $_ids AS _id MATCH ... WHERE n.`~id` = _id``

    from write_bench.strategies.guarded import BatchGuardedInStrategy

    BatchGuardedInStrategy().execute(store, statements, batch_size=500, contention_ratio=0.5, collector=collector)
"""

from collections.abc import Sequence

from write_bench.batching import rewrite
from write_bench.protocols import Transaction
from write_bench.statements import (
    EXISTING_KEYS_FIELD,
    KEY_PARAMETER,
    KEYS_PARAMETER,
    ParameterizedStatement,
    existence_query,
)
from write_bench.strategies.base import BaseStrategy, StrategyRegistry
from write_bench.types import ConflictHandling, ExistenceCheck, Granularity, InvocationCounts

__all__ = [
    "RowGuardedStrategy",
    "BatchGuardedInStrategy",
    "BatchGuardedUnwindStrategy",
    "TxnBatchGuardedInStrategy",
    "TxnBatchGuardedUnwindStrategy",
]


@StrategyRegistry.register("row_guarded")
class RowGuardedStrategy(BaseStrategy):
    """Point lookup per statement, then a row write if the key is absent."""

    conflict_handling = ConflictHandling.GUARDED
    existence_check = ExistenceCheck.POINT_LOOKUP

    @property
    def name(self) -> str:
        return "row_guarded"

    def write_chunk(
        self,
        tx: Transaction,
        chunk: Sequence[ParameterizedStatement],
        counts: InvocationCounts,
    ) -> None:
        for statement in chunk:
            lookup = existence_query(statement.label, self.existence_check)
            found = tx.run(lookup, {KEY_PARAMETER: statement.key}).collect()
            counts.read_queries += 1
            if found:
                counts.read_objects += 1
                continue
            tx.run(statement.text, statement.as_dict())
            counts.write_queries += 1
            counts.write_objects += 1


class GuardedBatchStrategy(BaseStrategy):
    """Existence check per chunk, then one UNWIND write of the absent rows."""

    conflict_handling = ConflictHandling.GUARDED

    def write_chunk(
        self,
        tx: Transaction,
        chunk: Sequence[ParameterizedStatement],
        counts: InvocationCounts,
    ) -> None:
        if not chunk:
            return
        check = existence_query(chunk[0].label, self.existence_check)
        records = tx.run(check, {KEYS_PARAMETER: [s.key for s in chunk]}).collect()
        existing = set(records[0][EXISTING_KEYS_FIELD]) if records else set()
        counts.read_queries += 1
        counts.read_objects += len(existing)

        composite = rewrite(chunk, exclude=existing)
        tx.run(composite.text, composite.as_dict())
        counts.write_queries += 1
        counts.write_objects += len(composite)


@StrategyRegistry.register("batch_guarded_in")
class BatchGuardedInStrategy(GuardedBatchStrategy):
    """Membership check per chunk, all chunks in one transaction."""

    existence_check = ExistenceCheck.MEMBERSHIP

    @property
    def name(self) -> str:
        return "batch_guarded_in"


@StrategyRegistry.register("batch_guarded_unwind")
class BatchGuardedUnwindStrategy(GuardedBatchStrategy):
    """Set-join check per chunk, all chunks in one transaction."""

    existence_check = ExistenceCheck.SET_JOIN

    @property
    def name(self) -> str:
        return "batch_guarded_unwind"


@StrategyRegistry.register("txn_batch_guarded_in")
class TxnBatchGuardedInStrategy(GuardedBatchStrategy):
    """Membership check per chunk, each chunk committed on its own."""

    granularity = Granularity.MULTI_TXN
    existence_check = ExistenceCheck.MEMBERSHIP

    @property
    def name(self) -> str:
        return "txn_batch_guarded_in"


@StrategyRegistry.register("txn_batch_guarded_unwind")
class TxnBatchGuardedUnwindStrategy(GuardedBatchStrategy):
    """Set-join check per chunk, each chunk committed on its own."""

    granularity = Granularity.MULTI_TXN
    existence_check = ExistenceCheck.SET_JOIN

    @property
    def name(self) -> str:
        return "txn_batch_guarded_unwind"
