r"""
Workload generation for the write-strategy sweep.

Two workload shapes are produced per sweep cell:

- Node workload: User objects. A partial-create set (the objects that exist
  before the measured strategy runs) plus full create and full upsert sets.
- Edge workload: User and Group objects joined by GROUP_USER_BINDING
  relationships, plus name updates for a contended subset of both.

Parameter maps depend only on the object index, so the same index yields the
same field values in every run.

    from write_bench.workload import WorkloadGenerator

    generator = WorkloadGenerator(10_000, seed=7)
    nodes = generator.node_workload(0.5)
    len(nodes.partial_create)  # 5000
"""

import math
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from write_bench.statements import ParameterizedStatement, StatementTemplate
from write_bench.workload.sampling import sample

__all__ = [
    "USER_LABEL",
    "GROUP_LABEL",
    "BINDING_TYPE",
    "NodeWorkload",
    "EdgeWorkload",
    "WorkloadGenerator",
    "user_params",
    "group_params",
    "binding_params",
]

USER_LABEL = "User"
GROUP_LABEL = "Group"
BINDING_TYPE = "GROUP_USER_BINDING"

# Fixed so that updatedAt is a pure function of the index.
BASE_UPDATED_AT = 1_700_000_000
TENANT_ID = "tenant-X"

_USER_FIELDS = ("_id", "email", "id", "name", "tenantId", "updatedAt")
_GROUP_FIELDS = ("_id", "id", "name", "tenantId", "updatedAt")
_USER_SET = (
    "SET n += {email: $email, id: $id, name: $name, tenantId: $tenantId, updatedAt: $updatedAt, "
    "isShellEntity: (coalesce(n.isShellEntity, true) AND false), deletedAt: null}"
)
_GROUP_SET = (
    "SET n += {id: $id, name: $name, tenantId: $tenantId, updatedAt: $updatedAt, "
    "isShellEntity: (coalesce(n.isShellEntity, true) AND false), deletedAt: null}"
)

USER_CREATE = StatementTemplate.parse(f"CREATE (n:{USER_LABEL}{{`~id`: $_id}}) {_USER_SET}", _USER_FIELDS)
USER_UPSERT = StatementTemplate.parse(f"MERGE (n:{USER_LABEL}{{`~id`: $_id}}) {_USER_SET}", _USER_FIELDS)
GROUP_CREATE = StatementTemplate.parse(f"CREATE (n:{GROUP_LABEL}{{`~id`: $_id}}) {_GROUP_SET}", _GROUP_FIELDS)
USER_UPDATE = StatementTemplate.parse(
    f'MATCH (n:{USER_LABEL}{{`~id`: $_id}}) SET n += {{name: $name + "-Altered", updatedAt: $updatedAt}}',
    ("_id", "name", "updatedAt"),
)
GROUP_UPDATE = StatementTemplate.parse(
    f'MATCH (n:{GROUP_LABEL}{{`~id`: $_id}}) SET n += {{name: $name + "-Altered", updatedAt: $updatedAt}}',
    ("_id", "name", "updatedAt"),
)
BINDING_CREATE = StatementTemplate.parse(
    f"MATCH (u:{USER_LABEL}{{`~id`: $user_id}}), (g:{GROUP_LABEL}{{`~id`: $group_id}}) "
    f"CREATE (g)-[r:{BINDING_TYPE}{{`~id`: $_id}}]->(u)",
    ("_id", "user_id", "group_id"),
)


def user_params(index: int) -> dict[str, Any]:
    """Field values of User ``index``."""
    return {
        "_id": f"user-{index}",
        "id": f"user-{index}",
        "email": f"user-{index}@example.com",
        "name": f"User-{index}",
        "tenantId": TENANT_ID,
        "updatedAt": BASE_UPDATED_AT + index,
    }


def group_params(index: int) -> dict[str, Any]:
    """Field values of Group ``index``."""
    return {
        "_id": f"group-{index}",
        "id": f"group-{index}",
        "name": f"Group-{index}",
        "tenantId": TENANT_ID,
        "updatedAt": BASE_UPDATED_AT + index,
    }


def binding_params(user_index: int, group_index: int) -> dict[str, Any]:
    """Endpoints and key of the binding between a user and a group."""
    user_id = f"user-{user_index}"
    group_id = f"group-{group_index}"
    return {"_id": f"{user_id}.{group_id}", "user_id": user_id, "group_id": group_id}


@dataclass(frozen=True, slots=True)
class NodeWorkload:
    """Statement sets for one node-sweep cell.

    Attributes:
        contention_ratio: Fraction of objects created before measurement.
        pre_created: Indices of the pre-existing objects.
        partial_create: CREATE statements for ``pre_created``.
        full_create: CREATE statements for every index.
        full_upsert: MERGE statements for every index.
    """

    contention_ratio: float
    pre_created: tuple[int, ...]
    partial_create: tuple[ParameterizedStatement, ...]
    full_create: tuple[ParameterizedStatement, ...]
    full_upsert: tuple[ParameterizedStatement, ...]

    def statements(self, kind: str) -> tuple[ParameterizedStatement, ...]:
        """Look up a statement set by name ("create" or "upsert")."""
        if kind == "create":
            return self.full_create
        if kind == "upsert":
            return self.full_upsert
        msg = f"Unknown node statement set '{kind}'"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class EdgeWorkload:
    """Statement sets for one edge-sweep cell.

    Attributes:
        contention_ratio: Fraction of each domain that is updated.
        domain_size: Members per entity domain.
        updated: Indices whose user and group get updated.
        users: CREATE statements for every user.
        groups: CREATE statements for every group.
        bindings: One binding per (user, group) pair.
        user_updates: Name updates for the updated users.
        group_updates: Name updates for the updated groups.
    """

    contention_ratio: float
    domain_size: int
    updated: tuple[int, ...]
    users: tuple[ParameterizedStatement, ...]
    groups: tuple[ParameterizedStatement, ...]
    bindings: tuple[ParameterizedStatement, ...]
    user_updates: tuple[ParameterizedStatement, ...]
    group_updates: tuple[ParameterizedStatement, ...]


def _bind(template: StatementTemplate, label: str, params: Sequence[dict[str, Any]]) -> tuple[ParameterizedStatement, ...]:
    return tuple(ParameterizedStatement(template, label, p) for p in params)


def _check_ratio(contention_ratio: float) -> None:
    if not 0.0 <= contention_ratio <= 1.0:
        msg = f"Contention ratio must be within [0, 1], got {contention_ratio}"
        raise ValueError(msg)


class WorkloadGenerator:
    """Generates contention-controlled statement sets."""

    def __init__(self, total_objects: int, *, seed: int | None = None) -> None:
        """Initialize generator.

        Args:
            total_objects: Size of the node domain; the edge workload uses
                ``isqrt(total_objects)`` users and as many groups.
            seed: Random seed for reproducible samples.
        """
        if total_objects < 0:
            msg = f"total_objects must be non-negative, got {total_objects}"
            raise ValueError(msg)
        self._total_objects = total_objects
        self._rng = random.Random(seed)

    @property
    def total_objects(self) -> int:
        return self._total_objects

    @property
    def edge_domain_size(self) -> int:
        return math.isqrt(self._total_objects)

    def node_workload(self, contention_ratio: float) -> NodeWorkload:
        """Generate the node workload for one cell."""
        _check_ratio(contention_ratio)
        count = round(contention_ratio * self._total_objects)
        pre_created = tuple(sample(0, self._total_objects, count, rng=self._rng))

        all_params = [user_params(i) for i in range(self._total_objects)]
        return NodeWorkload(
            contention_ratio=contention_ratio,
            pre_created=pre_created,
            partial_create=_bind(USER_CREATE, USER_LABEL, [all_params[i] for i in pre_created]),
            full_create=_bind(USER_CREATE, USER_LABEL, all_params),
            full_upsert=_bind(USER_UPSERT, USER_LABEL, all_params),
        )

    def edge_workload(self, contention_ratio: float) -> EdgeWorkload:
        """Generate the edge workload for one cell."""
        _check_ratio(contention_ratio)
        size = self.edge_domain_size
        updated = tuple(sample(0, size, round(size * contention_ratio), rng=self._rng))

        bindings = [binding_params(u, g) for u in range(size) for g in range(size)]
        return EdgeWorkload(
            contention_ratio=contention_ratio,
            domain_size=size,
            updated=updated,
            users=_bind(USER_CREATE, USER_LABEL, [user_params(i) for i in range(size)]),
            groups=_bind(GROUP_CREATE, GROUP_LABEL, [group_params(i) for i in range(size)]),
            bindings=_bind(BINDING_CREATE, BINDING_TYPE, bindings),
            user_updates=_bind(USER_UPDATE, USER_LABEL, [user_params(i) for i in updated]),
            group_updates=_bind(GROUP_UPDATE, GROUP_LABEL, [group_params(i) for i in updated]),
        )
