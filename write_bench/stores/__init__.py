r"""
Graph stores for write-bench.

Each store implements the GraphStore protocol on top of BaseStore.

    from write_bench.stores import StoreRegistry

    store = StoreRegistry.create("neo4j")
    store.connect(uri="bolt://localhost:7687")
"""

from write_bench.stores.base import BaseStore, StoreRegistry
from write_bench.stores.memgraph import MemgraphStore
from write_bench.stores.neo4j import Neo4jStore

__all__ = [
    "BaseStore",
    "MemgraphStore",
    "Neo4jStore",
    "StoreRegistry",
]
