r"""
Protocol definitions for graph store collaborators.

The strategies only ever talk to a store through these four shapes:
a store hands out sessions, a session runs a unit of work inside one
write transaction, a transaction runs statements, and a cursor
collects result records.

    from write_bench.protocols import GraphStore

    with store.session() as session:
        session.execute_write(lambda tx: tx.run("MATCH (n) RETURN count(n)", {}).collect())
"""

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any, Protocol, TypeVar, runtime_checkable

__all__ = [
    "GraphStore",
    "StoreSession",
    "Transaction",
    "ResultCursor",
]

T = TypeVar("T")


@runtime_checkable
class ResultCursor(Protocol):
    """Result of one statement."""

    def collect(self) -> list[dict[str, Any]]:
        """Materialize every record as a dict."""
        ...


@runtime_checkable
class Transaction(Protocol):
    """Write transaction."""

    def run(self, text: str, parameters: dict[str, Any]) -> ResultCursor:
        """Run one statement inside the transaction."""
        ...


@runtime_checkable
class StoreSession(Protocol):
    """Session bound to one store connection."""

    def execute_write(self, work: Callable[[Transaction], T]) -> T:
        """Run ``work`` in one transaction; commit on return, roll back on error.

        A store may rerun ``work`` after a transient failure, so ``work`` keeps
        its effects inside the transaction.
        """
        ...

    def close(self) -> None:
        """Release the session."""
        ...


@runtime_checkable
class GraphStore(Protocol):
    """Graph database the benchmark writes to."""

    @property
    def name(self) -> str:
        """Human-readable store name."""
        ...

    def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        """Establish connection to the store."""
        ...

    def disconnect(self) -> None:
        """Close connection to the store."""
        ...

    def session(self) -> AbstractContextManager[StoreSession]:
        """Open a session; closed when the context exits."""
        ...

    def wipe(self) -> None:
        """Delete every node and relationship."""
        ...

    def ensure_constraints(self, node_labels: tuple[str, ...], relationship_types: tuple[str, ...]) -> None:
        """Create unique-key constraints on the given labels and types."""
        ...
