r"""
Neo4j graph store.

Writes run through the driver's managed ``execute_write``, which retries
transient failures such as deadlocks between the concurrent edge streams.
Retryable errors therefore leave ``Neo4jTransaction.run`` untranslated; the
final failure is translated once the driver gives up.

Environment variables:
    WRITE_BENCH_NEO4J_URI: Connection URI (default: bolt://localhost:7687)
    WRITE_BENCH_NEO4J_USER: Username (default: neo4j)
    WRITE_BENCH_NEO4J_PASSWORD: Password (default: benchmark)
    WRITE_BENCH_NEO4J_DATABASE: Database name (default: server default)

    from write_bench.stores.neo4j import Neo4jStore

    store = Neo4jStore()
    store.connect(uri="bolt://localhost:7687", user="neo4j", password="password")
"""

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from neo4j import GraphDatabase
from neo4j.exceptions import ConstraintError, DriverError, Neo4jError

from write_bench.config import get_env
from write_bench.errors import ConstraintViolation, StoreError
from write_bench.log import get_logger
from write_bench.protocols import Transaction
from write_bench.stores.base import BaseStore, StoreRegistry

__all__ = ["Neo4jStore", "Neo4jSession", "Neo4jTransaction", "RecordCursor"]

logger = get_logger(__name__)

T = TypeVar("T")


def translate_error(error: Exception, *, statement: str | None = None) -> StoreError:
    """Map a driver exception onto the write-bench hierarchy."""
    if isinstance(error, ConstraintError):
        return ConstraintViolation(error.message or str(error), statement=statement)
    if isinstance(error, Neo4jError):
        return StoreError(f"{error.code}: {error.message}", statement=statement)
    return StoreError(str(error), statement=statement)


class RecordCursor:
    """Materialized result records."""

    __slots__ = ("_records",)

    def __init__(self, records: list[dict[str, Any]]) -> None:
        self._records = records

    def collect(self) -> list[dict[str, Any]]:
        return self._records


class Neo4jTransaction:
    """Adapter from a driver transaction to the Transaction protocol."""

    def __init__(self, tx: Any) -> None:
        self._tx = tx

    def run(self, text: str, parameters: dict[str, Any]) -> RecordCursor:
        # Failures can surface while records stream, so consume eagerly
        try:
            result = self._tx.run(text, parameters)
            return RecordCursor([record.data() for record in result])
        except (Neo4jError, DriverError) as e:
            if e.is_retryable():
                raise
            raise translate_error(e, statement=text) from e


class Neo4jSession:
    """Adapter from a driver session to the StoreSession protocol."""

    def __init__(self, session: Any) -> None:
        self._session = session

    def execute_write(self, work: Callable[[Transaction], T]) -> T:
        """Run ``work`` in one managed write transaction.

        The driver commits when ``work`` returns, rolls back when it raises,
        and reruns it on transient failures. ``work`` must not leak state
        from a rolled-back attempt.

        Args:
            work: Callable receiving the transaction.

        Returns:
            Whatever ``work`` returns.

        Raises:
            ConstraintViolation: If a statement hit a uniqueness constraint.
            StoreError: If a statement or the commit failed for good.
        """
        try:
            return self._session.execute_write(lambda tx: work(Neo4jTransaction(tx)))
        except (Neo4jError, DriverError) as e:
            raise translate_error(e) from e

    def run_autocommit(self, text: str) -> None:
        """Run a statement in an auto-commit transaction."""
        try:
            self._session.run(text).consume()
        except (Neo4jError, DriverError) as e:
            raise translate_error(e, statement=text) from e

    def close(self) -> None:
        self._session.close()


@StoreRegistry.register("neo4j")
class Neo4jStore(BaseStore):
    """Neo4j graph store."""

    default_uri = "bolt://localhost:7687"
    env_prefix = "NEO4J"

    def __init__(self) -> None:
        self._driver: Any = None
        self._database: str | None = None
        self._connected = False

    @property
    def name(self) -> str:
        return "Neo4j"

    @property
    def version(self) -> str:
        if not self._connected or self._driver is None:
            return "unknown"
        info = self._driver.get_server_info()
        return info.agent or "unknown"

    def _auth(self, **kwargs: Any) -> tuple[str, str] | None:
        user = kwargs.get("user") or get_env(f"{self.env_prefix}_USER", default="neo4j")
        password = kwargs.get("password") or get_env(f"{self.env_prefix}_PASSWORD", default="benchmark")
        return (user, password) if password else None

    def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        uri = uri or get_env(f"{self.env_prefix}_URI", default=self.default_uri)
        if uri is None:
            msg = f"{self.name} URI required"
            raise ValueError(msg)

        self._database = kwargs.get("database") or get_env(f"{self.env_prefix}_DATABASE")
        try:
            self._driver = GraphDatabase.driver(uri, auth=self._auth(**kwargs))
            self._driver.verify_connectivity()
        except (Neo4jError, DriverError) as e:
            if self._driver is not None:
                self._driver.close()
                self._driver = None
            msg = f"Cannot connect to {self.name} at {uri}: {e}"
            raise StoreError(msg) from e

        self._connected = True
        logger.info("store_connected", store=self.name, uri=uri)

    def disconnect(self) -> None:
        if self._driver:
            self._driver.close()
            self._driver = None
        self._connected = False

    def open_session(self) -> Neo4jSession:
        if self._driver is None:
            msg = f"{self.name} store is not connected"
            raise StoreError(msg)
        return Neo4jSession(self._driver.session(database=self._database))

    def run_schema(self, text: str) -> None:
        with self.session() as session:
            session.run_autocommit(text)

    def constraint_statements(
        self,
        node_labels: Sequence[str],
        relationship_types: Sequence[str],
    ) -> list[str]:
        statements = [
            f"CREATE CONSTRAINT {label.lower()}_id IF NOT EXISTS FOR (n:{label}) REQUIRE n.`~id` IS UNIQUE"
            for label in node_labels
        ]
        statements.extend(
            f"CREATE CONSTRAINT {rel_type.lower()}_id IF NOT EXISTS "
            f"FOR ()-[r:{rel_type}]-() REQUIRE r.`~id` IS UNIQUE"
            for rel_type in relationship_types
        )
        return statements
