r"""
Memgraph graph store.

Memgraph speaks Bolt, so this reuses the Neo4j driver plumbing and only
changes connection defaults and the constraint syntax. Memgraph has no
relationship property constraints; relationship types are skipped.

Environment variables:
    WRITE_BENCH_MEMGRAPH_URI: Connection URI (default: bolt://localhost:7688)
    WRITE_BENCH_MEMGRAPH_USER: Username (default: none)
    WRITE_BENCH_MEMGRAPH_PASSWORD: Password (default: none)

    from write_bench.stores.memgraph import MemgraphStore

    store = MemgraphStore()
    store.connect(uri="bolt://localhost:7688")
"""

from collections.abc import Sequence
from typing import Any

from write_bench.config import get_env
from write_bench.stores.base import StoreRegistry
from write_bench.stores.neo4j import Neo4jStore

__all__ = ["MemgraphStore"]


@StoreRegistry.register("memgraph")
class MemgraphStore(Neo4jStore):
    """Memgraph graph store."""

    default_uri = "bolt://localhost:7688"
    env_prefix = "MEMGRAPH"

    @property
    def name(self) -> str:
        return "Memgraph"

    def _auth(self, **kwargs: Any) -> tuple[str, str] | None:
        user = kwargs.get("user") or get_env("MEMGRAPH_USER", default="")
        password = kwargs.get("password") or get_env("MEMGRAPH_PASSWORD")
        return (user, password) if password else None

    def constraint_statements(
        self,
        node_labels: Sequence[str],
        relationship_types: Sequence[str],
    ) -> list[str]:
        return [f"CREATE CONSTRAINT ON (n:{label}) ASSERT n.`~id` IS UNIQUE" for label in node_labels]
