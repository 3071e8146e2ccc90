r"""
Tests for write_bench.workload package.
"""

import random

import pytest

from write_bench.workload import WorkloadGenerator, sample
from write_bench.workload.generator import (
    BINDING_TYPE,
    GROUP_LABEL,
    USER_LABEL,
    binding_params,
    group_params,
    user_params,
)


class TestSample:
    @pytest.mark.parametrize(("start", "end", "count"), [(0, 10, 0), (0, 10, 5), (0, 10, 10), (5, 8, 3), (-3, 3, 4)])
    def test_distinct_and_in_range(self, start, end, count):
        values = sample(start, end, count, rng=random.Random(1))
        assert len(values) == count
        assert len(set(values)) == count
        assert all(start <= v < end for v in values)

    def test_count_too_large(self):
        with pytest.raises(ValueError, match="distinct values"):
            sample(0, 5, 6)

    def test_negative_count(self):
        with pytest.raises(ValueError):
            sample(0, 5, -1)

    def test_empty_range(self):
        assert sample(5, 5, 0) == []
        with pytest.raises(ValueError):
            sample(5, 2, 1)

    def test_seeded_is_reproducible(self):
        assert sample(0, 100, 10, rng=random.Random(3)) == sample(0, 100, 10, rng=random.Random(3))


class TestParams:
    def test_user_params(self):
        params = user_params(7)
        assert params["_id"] == "user-7"
        assert params["id"] == "user-7"
        assert params["name"] == "User-7"
        assert params["email"] == "user-7@example.com"
        assert params["tenantId"] == "tenant-X"

    def test_params_are_deterministic(self):
        assert user_params(3) == user_params(3)
        assert group_params(3) == group_params(3)
        assert user_params(3)["updatedAt"] < user_params(4)["updatedAt"]

    def test_group_params_have_no_email(self):
        assert "email" not in group_params(1)
        assert group_params(1)["_id"] == "group-1"

    def test_binding_key(self):
        params = binding_params(2, 5)
        assert params == {"_id": "user-2.group-5", "user_id": "user-2", "group_id": "group-5"}


class TestNodeWorkload:
    def test_end_to_end_partial_size(self, generator):
        workload = generator.node_workload(0.5)

        assert len(workload.pre_created) == 50
        assert len(set(workload.pre_created)) == 50
        assert len(workload.partial_create) == 50
        assert len(workload.full_create) == 100
        assert len(workload.full_upsert) == 100

    def test_partial_is_subset_of_full(self, generator):
        workload = generator.node_workload(0.1)
        full_keys = {s.key for s in workload.full_create}
        partial_keys = {s.key for s in workload.partial_create}
        assert partial_keys <= full_keys
        assert partial_keys == {f"user-{i}" for i in workload.pre_created}

    def test_create_and_upsert_templates(self, generator):
        workload = generator.node_workload(0.5)
        assert workload.full_create[0].text.startswith("CREATE (n:User")
        assert workload.full_upsert[0].text.startswith("MERGE (n:User")
        assert workload.statements("create") is workload.full_create
        assert workload.statements("upsert") is workload.full_upsert

    def test_unknown_statement_set(self, generator):
        with pytest.raises(ValueError, match="Unknown node statement set"):
            generator.node_workload(0.5).statements("delete")

    @pytest.mark.parametrize(("ratio", "expected"), [(0.0, 0), (1.0, 100), (0.9, 90)])
    def test_ratio_bounds(self, generator, ratio, expected):
        assert len(generator.node_workload(ratio).partial_create) == expected

    @pytest.mark.parametrize("ratio", [-0.1, 1.5])
    def test_invalid_ratio(self, generator, ratio):
        with pytest.raises(ValueError, match="within"):
            generator.node_workload(ratio)

    def test_seed_reproducible(self):
        a = WorkloadGenerator(50, seed=11).node_workload(0.5)
        b = WorkloadGenerator(50, seed=11).node_workload(0.5)
        assert a.pre_created == b.pre_created

    def test_negative_total(self):
        with pytest.raises(ValueError):
            WorkloadGenerator(-1)


class TestEdgeWorkload:
    def test_domain_is_square_root(self, generator):
        workload = generator.edge_workload(0.5)

        assert workload.domain_size == 10
        assert len(workload.users) == 10
        assert len(workload.groups) == 10
        assert len(workload.bindings) == 100
        assert len(workload.updated) == 5
        assert len(workload.user_updates) == 5
        assert len(workload.group_updates) == 5

    def test_labels(self, generator):
        workload = generator.edge_workload(0.5)
        assert {s.label for s in workload.users} == {USER_LABEL}
        assert {s.label for s in workload.groups} == {GROUP_LABEL}
        assert {s.label for s in workload.bindings} == {BINDING_TYPE}

    def test_binding_keys_unique(self, generator):
        workload = generator.edge_workload(0.1)
        keys = [s.key for s in workload.bindings]
        assert len(keys) == len(set(keys))

    def test_updates_target_sampled_subset(self, generator):
        workload = generator.edge_workload(0.5)
        assert {s.key for s in workload.user_updates} == {f"user-{i}" for i in workload.updated}
        assert {s.key for s in workload.group_updates} == {f"group-{i}" for i in workload.updated}
        assert 'name: param.name + "-Altered"' in workload.user_updates[0].template.batched_text
