r"""
Shared pytest fixtures for write-bench tests.

FakeGraphStore keeps graph state in dictionaries and understands exactly the
statement shapes write-bench emits: wipe, node CREATE/MERGE, name updates,
binding creation and the three existence checks, each in row or UNWIND form.
Transactions work on a snapshot and replay their writes onto the live state
under the lock on commit, so concurrent sessions interleave. A CREATE on an
existing key raises ConstraintViolation like a unique constraint.
"""

import copy
import re
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import pytest

from write_bench.errors import ConstraintViolation, StoreError
from write_bench.metrics.collector import MetricsCollector
from write_bench.statements import EXISTING_KEYS_FIELD, ROW_VARIABLE, ROWS_PARAMETER
from write_bench.stores.base import WIPE_STATEMENT, BaseStore
from write_bench.types import SweepConfig
from write_bench.workload.generator import WorkloadGenerator

T = TypeVar("T")

_BATCH_PREFIX = f"UNWIND ${ROWS_PARAMETER} AS {ROW_VARIABLE} "
_P = rf"(?:\$|{ROW_VARIABLE}\.)"

_MEMBERSHIP = re.compile(r"^MATCH \(n:(\w+)\) WHERE n\.`~id` IN \$_ids RETURN ")
_SET_JOIN = re.compile(r"^UNWIND \$_ids AS _id MATCH \(n:(\w+)\) WHERE n\.`~id` = _id RETURN ")
_POINT = re.compile(r"^MATCH \(n:(\w+)\{`~id`: \$_id\}\) RETURN ")
_WRITE_NODE = re.compile(rf"^(CREATE|MERGE) \(n:(\w+)\{{`~id`: {_P}_id\}}\) SET n \+= ")
_UPDATE_NAME = re.compile(rf"^MATCH \(n:(\w+)\{{`~id`: {_P}_id\}}\) SET n \+= \{{name: {_P}name \+ \"-Altered\"")
_BIND = re.compile(
    rf"^MATCH \(u:(\w+)\{{`~id`: {_P}user_id\}}\), \(g:(\w+)\{{`~id`: {_P}group_id\}}\) "
    rf"CREATE \(g\)-\[r:(\w+)\{{`~id`: {_P}_id\}}\]->\(u\)"
)


class FakeCursor:
    def __init__(self, records: list[dict[str, Any]]) -> None:
        self._records = records

    def collect(self) -> list[dict[str, Any]]:
        return self._records


class FakeTransaction:
    def __init__(self, store: "FakeGraphStore", data: dict[str, dict[str, dict[str, Any]]]) -> None:
        self._store = store
        self._data = data
        self.log: list[tuple[str, dict[str, Any] | None]] = []

    def run(self, text: str, parameters: dict[str, Any]) -> FakeCursor:
        self._store.statements.append(text)
        if self._store.fail_on and self._store.fail_on in text:
            if self._store.fail_gate is not None:
                self._store.fail_gate.wait(timeout=5)
            msg = f"Injected failure on: {text}"
            raise StoreError(msg, statement=text)
        return FakeCursor(self._execute(text, parameters))

    def _execute(self, text: str, parameters: dict[str, Any]) -> list[dict[str, Any]]:
        if text == WIPE_STATEMENT:
            self._data.clear()
            self.log.append((text, None))
            return []

        match = _MEMBERSHIP.match(text) or _SET_JOIN.match(text)
        if match:
            stored = self._data.get(match.group(1), {})
            return [{EXISTING_KEYS_FIELD: [k for k in parameters["_ids"] if k in stored]}]

        match = _POINT.match(text)
        if match:
            key = parameters["_id"]
            return [{"id": key}] if key in self._data.get(match.group(1), {}) else []

        if text.startswith(_BATCH_PREFIX):
            body = text[len(_BATCH_PREFIX) :]
            rows = parameters[ROWS_PARAMETER]
        else:
            body = text
            rows = [parameters]
        for row in rows:
            apply_write(self._data, body, row)
            self.log.append((body, row))
        return []


def apply_write(data: dict[str, dict[str, dict[str, Any]]], body: str, row: dict[str, Any] | None) -> None:
    """Apply one row of a write statement to ``data``."""
    if body == WIPE_STATEMENT:
        data.clear()
        return

    match = _WRITE_NODE.match(body)
    if match:
        verb, label = match.groups()
        nodes = data.setdefault(label, {})
        if verb == "CREATE" and row["_id"] in nodes:
            msg = f"Node({label}) already exists with `~id` = '{row['_id']}'"
            raise ConstraintViolation(msg, statement=body)
        nodes[row["_id"]] = dict(row)
        return

    match = _UPDATE_NAME.match(body)
    if match:
        node = data.get(match.group(1), {}).get(row["_id"])
        if node is not None:
            node["name"] = row["name"] + "-Altered"
            node["updatedAt"] = row["updatedAt"]
        return

    match = _BIND.match(body)
    if match:
        user_label, group_label, rel_type = match.groups()
        if row["user_id"] not in data.get(user_label, {}):
            return
        if row["group_id"] not in data.get(group_label, {}):
            return
        rels = data.setdefault(rel_type, {})
        if row["_id"] in rels:
            msg = f"Relationship({rel_type}) already exists with `~id` = '{row['_id']}'"
            raise ConstraintViolation(msg, statement=body)
        rels[row["_id"]] = {"user": row["user_id"], "group": row["group_id"]}
        return

    msg = f"Unsupported statement: {body}"
    raise StoreError(msg, statement=body)


class FakeSession:
    def __init__(self, store: "FakeGraphStore") -> None:
        self._store = store
        self.closed = False

    def execute_write(self, work: Callable[[FakeTransaction], T]) -> T:
        # Work runs on a snapshot; only the commit holds the lock
        with self._store.lock:
            snapshot = copy.deepcopy(self._store.data)
            self._store.transactions += 1
        tx = FakeTransaction(self._store, snapshot)
        try:
            result = work(tx)
            self._store.commit(tx.log)
        except BaseException:
            with self._store.lock:
                self._store.rollbacks += 1
            raise
        return result

    def close(self) -> None:
        self.closed = True
        self._store.open_sessions -= 1


class FakeGraphStore(BaseStore):
    """In-memory store speaking write-bench's statement dialect."""

    def __init__(self, *, fail_on: str | None = None, fail_gate: threading.Event | None = None) -> None:
        self.data: dict[str, dict[str, dict[str, Any]]] = {}
        self.lock = threading.Lock()
        self.fail_on = fail_on
        self.fail_gate = fail_gate
        self.on_commit: Callable[[list[str]], None] | None = None
        self.statements: list[str] = []
        self.constraints: list[str] = []
        self.transactions = 0
        self.rollbacks = 0
        self.open_sessions = 0
        self._connected = False

    def commit(self, log: list[tuple[str, dict[str, Any] | None]]) -> None:
        """Replay a transaction's writes onto the live state."""
        with self.lock:
            data = copy.deepcopy(self.data)
            for body, row in log:
                apply_write(data, body, row)
            self.data = data
        if self.on_commit is not None:
            self.on_commit([body for body, _ in log])

    @property
    def name(self) -> str:
        return "Fake"

    def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def open_session(self) -> FakeSession:
        self.open_sessions += 1
        return FakeSession(self)

    def constraint_statements(self, node_labels: Sequence[str], relationship_types: Sequence[str]) -> list[str]:
        return [f"UNIQUE {name}.`~id`" for name in (*node_labels, *relationship_types)]

    def run_schema(self, text: str) -> None:
        self.constraints.append(text)

    def keys(self, label: str) -> set[str]:
        return set(self.data.get(label, {}))

    def count(self, label: str) -> int:
        return len(self.data.get(label, {}))


@pytest.fixture
def store() -> FakeGraphStore:
    """Connected in-memory store."""
    fake = FakeGraphStore()
    fake.connect()
    return fake


@pytest.fixture
def collector() -> MetricsCollector:
    """Fresh metrics collector."""
    return MetricsCollector()


@pytest.fixture
def generator() -> WorkloadGenerator:
    """Seeded generator over 100 objects."""
    return WorkloadGenerator(100, seed=7)


@pytest.fixture
def tiny_sweep() -> SweepConfig:
    """Tiny sweep for orchestrator tests."""
    return SweepConfig(
        name="tiny",
        total_objects=16,
        batch_sizes=(4,),
        contention_ratios=(0.5,),
        runs=1,
        seed=1,
    )
