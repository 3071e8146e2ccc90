r"""
Ordered experiment lists for the node and edge sweeps.

A node experiment seeds the store with the partial-create set using a blind
strategy, then runs the measured strategy over the full create or upsert set.
The unbatched upsert seeds row by row; the guarded transaction-batch
experiments seed in transaction batches; everything else seeds with one
single-transaction batch.

    from write_bench.runner.experiments import NODE_EXPERIMENTS

    for experiment in NODE_EXPERIMENTS:
        print(experiment.name, experiment.seed_name)
"""

from dataclasses import dataclass

__all__ = [
    "Experiment",
    "NODE_EXPERIMENTS",
    "EDGE_STRATEGY",
    "EDGE_USERS",
    "EDGE_GROUPS",
    "EDGE_BINDINGS",
    "EDGE_USER_UPDATES",
    "EDGE_GROUP_UPDATES",
    "CONCURRENT_UPDATES",
]


@dataclass(frozen=True, slots=True)
class Experiment:
    """One measured strategy run of the node sweep.

    Attributes:
        strategy: Registry name of the measured strategy.
        statements: Statement set it runs over ("create" or "upsert").
        seed_strategy: Registry name of the strategy seeding the partial set.
    """

    strategy: str
    statements: str
    seed_strategy: str

    @property
    def name(self) -> str:
        return f"{self.strategy}:{self.statements}"

    @property
    def seed_name(self) -> str:
        return f"{self.name}:seed"


NODE_EXPERIMENTS: tuple[Experiment, ...] = (
    Experiment("row", "upsert", seed_strategy="row"),
    Experiment("batch", "upsert", seed_strategy="batch"),
    Experiment("txn_batch", "upsert", seed_strategy="batch"),
    Experiment("row_guarded", "create", seed_strategy="batch"),
    Experiment("batch_guarded_in", "upsert", seed_strategy="batch"),
    Experiment("batch_guarded_unwind", "upsert", seed_strategy="batch"),
    Experiment("batch_guarded_in", "create", seed_strategy="batch"),
    Experiment("batch_guarded_unwind", "create", seed_strategy="batch"),
    Experiment("txn_batch_guarded_in", "upsert", seed_strategy="txn_batch"),
    Experiment("txn_batch_guarded_unwind", "upsert", seed_strategy="txn_batch"),
    Experiment("txn_batch_guarded_in", "create", seed_strategy="txn_batch"),
    Experiment("txn_batch_guarded_unwind", "create", seed_strategy="txn_batch"),
)

# Edge sweep metrics names
EDGE_STRATEGY = "txn_batch"
EDGE_USERS = "txn_batch:users"
EDGE_GROUPS = "txn_batch:groups"
EDGE_BINDINGS = "txn_batch:bindings"
EDGE_USER_UPDATES = "txn_batch:user_updates"
EDGE_GROUP_UPDATES = "txn_batch:group_updates"
CONCURRENT_UPDATES = "concurrent_updates"
