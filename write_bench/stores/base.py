r"""
Base store implementation with common functionality.

A store hands out sessions whose ``execute_write`` runs a unit of work in one
write transaction. The wipe and the uniqueness constraints the sweep
relies on are expressed once here on top of that.

    from write_bench.stores.base import BaseStore, StoreRegistry

    @StoreRegistry.register("mystore")
    class MyStore(BaseStore):
        ...
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from write_bench.log import get_logger
from write_bench.protocols import StoreSession

__all__ = ["BaseStore", "StoreRegistry", "WIPE_STATEMENT"]

logger = get_logger(__name__)

WIPE_STATEMENT = "MATCH (n) DETACH DELETE n"


class StoreRegistry:
    """Registry for graph stores."""

    _stores: dict[str, type["BaseStore"]] = {}

    @classmethod
    def register(cls, name: str) -> Any:
        """Decorator to register a store class."""

        def decorator(store_cls: type["BaseStore"]) -> type["BaseStore"]:
            cls._stores[name] = store_cls
            return store_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type["BaseStore"] | None:
        """Get store class by name."""
        return cls._stores.get(name)

    @classmethod
    def list(cls) -> list[str]:
        """List registered store names."""
        return list(cls._stores.keys())

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> "BaseStore":
        """Create store instance by name."""
        store_cls = cls.get(name)
        if store_cls is None:
            valid = ", ".join(cls.list()) or "none"
            msg = f"Unknown store '{name}'. Registered: {valid}"
            raise ValueError(msg)
        return store_cls(**kwargs)


class BaseStore(ABC):
    """Base class for graph stores."""

    _connected: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable store name."""
        ...

    @property
    def version(self) -> str:
        """Store version string."""
        return "unknown"

    @property
    def connected(self) -> bool:
        """Whether the store is currently connected."""
        return self._connected

    @abstractmethod
    def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        """Establish connection to the store."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to the store."""
        ...

    @abstractmethod
    def open_session(self) -> StoreSession:
        """Open a new session; the caller closes it."""
        ...

    @abstractmethod
    def constraint_statements(
        self,
        node_labels: Sequence[str],
        relationship_types: Sequence[str],
    ) -> list[str]:
        """Statements creating a unique ``~id`` constraint per label and type."""
        ...

    @contextmanager
    def session(self) -> Iterator[StoreSession]:
        """Open a session that is closed when the context exits."""
        session = self.open_session()
        try:
            yield session
        finally:
            session.close()

    def run_schema(self, text: str) -> None:
        """Run a schema statement in its own transaction."""
        with self.session() as session:
            session.execute_write(lambda tx: tx.run(text, {}).collect())

    def wipe(self) -> None:
        """Delete every node and relationship."""
        with self.session() as session:
            session.execute_write(lambda tx: tx.run(WIPE_STATEMENT, {}).collect())

    def ensure_constraints(
        self,
        node_labels: Sequence[str],
        relationship_types: Sequence[str] = (),
    ) -> None:
        """Create the unique-key constraints the sweep relies on.

        Args:
            node_labels: Node labels keyed by ``~id``.
            relationship_types: Relationship types keyed by ``~id``.

        Raises:
            StoreError: If a constraint statement fails.
        """
        for statement in self.constraint_statements(node_labels, relationship_types):
            self.run_schema(statement)
        logger.info(
            "constraints_ensured",
            store=self.name,
            node_labels=list(node_labels),
            relationship_types=list(relationship_types),
        )

    def __enter__(self) -> "BaseStore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.disconnect()

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"{self.__class__.__name__}({self.name}, {status})"
