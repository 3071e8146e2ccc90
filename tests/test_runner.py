r"""
Tests for write_bench.runner package and timing helpers.
"""

import threading

import pytest

from conftest import FakeGraphStore
from write_bench.errors import StoreError, StrategyCancelled
from write_bench.runner import NODE_EXPERIMENTS, BenchmarkOrchestrator, OrchestratorConfig, run_concurrently
from write_bench.runner.experiments import CONCURRENT_UPDATES, EDGE_BINDINGS, EDGE_USERS, Experiment
from write_bench.strategies import StrategyRegistry
from write_bench.timing import Timer, timed_section
from write_bench.types import MetricsKey


class TestTimer:
    def test_timer_context_manager(self):
        with Timer() as t:
            sum(range(1000))

        assert t.elapsed_ns > 0
        assert t.elapsed_ms == t.elapsed_ns / 1_000_000
        assert t.elapsed_seconds == t.elapsed_ns / 1_000_000_000

    def test_timer_stops_on_error(self):
        timer = Timer()
        with pytest.raises(RuntimeError):
            with timer:
                raise RuntimeError("boom")
        first = timer.elapsed_ns
        assert timer.elapsed_ns == first

    def test_timed_section_callback(self):
        seen = []
        with timed_section("cell", callback=lambda name, ns: seen.append((name, ns))):
            pass
        assert seen and seen[0][0] == "cell"


class TestExperiments:
    def test_twelve_ordered_experiments(self):
        assert len(NODE_EXPERIMENTS) == 12
        assert len({e.name for e in NODE_EXPERIMENTS}) == 12

    def test_names(self):
        experiment = Experiment("batch_guarded_in", "create", seed_strategy="batch")
        assert experiment.name == "batch_guarded_in:create"
        assert experiment.seed_name == "batch_guarded_in:create:seed"

    def test_strategies_registered(self):
        registered = set(StrategyRegistry.list())
        for experiment in NODE_EXPERIMENTS:
            assert experiment.strategy in registered
            assert experiment.seed_strategy in registered

    def test_seed_strategies(self):
        seeds = {e.name: e.seed_strategy for e in NODE_EXPERIMENTS}
        assert seeds["row:upsert"] == "row"
        assert seeds["txn_batch:upsert"] == "batch"
        assert seeds["row_guarded:create"] == "batch"
        assert seeds["txn_batch_guarded_in:create"] == "txn_batch"

    def test_blind_experiments_only_upsert(self):
        for experiment in NODE_EXPERIMENTS:
            if experiment.strategy in ("row", "batch", "txn_batch"):
                assert experiment.statements == "upsert"


class TestRunConcurrently:
    def test_results_in_task_order(self):
        results = run_concurrently({"a": lambda cancel: 1, "b": lambda cancel: 2})
        assert results == {"a": 1, "b": 2}

    def test_empty(self):
        assert run_concurrently({}) == {}

    def test_failure_cancels_siblings_and_reraises_original(self):
        started = threading.Event()
        observed = []

        def failing(cancel):
            started.wait(timeout=5)
            raise StoreError("first failure")

        def sibling(cancel):
            started.set()
            if cancel.wait(timeout=5):
                observed.append("cancelled")
                raise StrategyCancelled("stopped")
            return "finished"

        with pytest.raises(StoreError, match="first failure"):
            run_concurrently({"failing": failing, "sibling": sibling})

        assert observed == ["cancelled"]

    def test_join_waits_for_all_tasks(self):
        finished = []

        def slow(cancel):
            cancel.wait(timeout=5)
            finished.append("slow")
            return "slow"

        def failing(cancel):
            raise ValueError("bad")

        with pytest.raises(ValueError):
            run_concurrently({"slow": slow, "failing": failing})

        assert finished == ["slow"]


class TestOrchestratorConfig:
    def test_defaults(self):
        config = OrchestratorConfig()
        assert config.profile == "default"
        assert config.workloads == ("nodes", "edges")
        assert config.experiments == NODE_EXPERIMENTS

    def test_unknown_workload(self, store):
        with pytest.raises(ValueError, match="Unknown workloads"):
            BenchmarkOrchestrator(store, config=OrchestratorConfig(workloads=("nodes", "paths")))

    def test_profile_resolution(self, store):
        orchestrator = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile="smoke"))
        assert orchestrator.sweep.total_objects == 100


class TestBenchmarkOrchestrator:
    def test_full_sweep(self, store, tiny_sweep):
        result = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile=tiny_sweep)).run()

        # 12 experiments x (seed + measured) + users, groups, 3 streams, joined
        assert result.sample_count == 30
        assert len(result.summaries) == 30
        assert store.constraints == ["UNIQUE User.`~id`", "UNIQUE Group.`~id`", "UNIQUE GROUP_USER_BINDING.`~id`"]
        assert store.data == {} or all(not rows for rows in store.data.values())
        assert result.completed_at >= result.started_at
        assert result.collector.session.profile == "tiny"

    def test_node_counts(self, store, tiny_sweep):
        config = OrchestratorConfig(profile=tiny_sweep, workloads=("nodes",))
        collector = BenchmarkOrchestrator(store, config=config).run().collector

        (guarded,) = collector.samples(MetricsKey("batch_guarded_unwind:create", 4, 0.5))
        assert guarded.read_objects == 8
        assert guarded.write_objects == 8
        assert guarded.read_queries == 4
        assert guarded.write_queries == 4

        (seed,) = collector.samples(MetricsKey("row:upsert:seed", 4, 0.5))
        assert seed.write_objects == 8
        assert seed.write_queries == 8

        (upsert,) = collector.samples(MetricsKey("txn_batch:upsert", 4, 0.5))
        assert upsert.write_objects == 16

    def test_edge_counts(self, store, tiny_sweep):
        config = OrchestratorConfig(profile=tiny_sweep, workloads=("edges",))
        collector = BenchmarkOrchestrator(store, config=config).run().collector

        (users,) = collector.samples(MetricsKey(EDGE_USERS, 4, 0.5))
        assert users.write_objects == 4
        (bindings,) = collector.samples(MetricsKey(EDGE_BINDINGS, 4, 0.5))
        assert bindings.write_objects == 16
        (joined,) = collector.samples(MetricsKey(CONCURRENT_UPDATES, 4, 0.5))
        assert joined.write_objects == 16 + 2 + 2
        assert joined.write_queries == 4 + 1 + 1

    def test_progress_callback(self, store, tiny_sweep):
        seen = []
        orchestrator = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile=tiny_sweep))
        orchestrator.set_progress_callback(lambda phase, cell, experiment: seen.append((phase, experiment)))
        orchestrator.run()

        assert seen[0] == ("nodes", NODE_EXPERIMENTS[0].name)
        assert ("edges", CONCURRENT_UPDATES) in seen

    def test_failure_halts_sweep(self, tiny_sweep):
        store = FakeGraphStore(fail_on="MERGE")
        orchestrator = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile=tiny_sweep))

        with pytest.raises(StoreError):
            orchestrator.run()

    def test_edge_failure_propagates_from_join(self, tiny_sweep):
        store = FakeGraphStore(fail_on="GROUP_USER_BINDING")
        config = OrchestratorConfig(profile=tiny_sweep, workloads=("edges",))

        with pytest.raises(StoreError, match="Injected"):
            BenchmarkOrchestrator(store, config=config).run()

    def test_sibling_commits_survive_join_failure(self, tiny_sweep):
        bindings_committed = threading.Event()
        store = FakeGraphStore(fail_on='"-Altered"', fail_gate=bindings_committed)

        def watch(bodies):
            if any("GROUP_USER_BINDING" in body for body in bodies):
                bindings_committed.set()

        store.on_commit = watch
        config = OrchestratorConfig(profile=tiny_sweep, workloads=("edges",))

        with pytest.raises(StoreError, match="Injected"):
            BenchmarkOrchestrator(store, config=config).run()

        # Users and groups from the setup phase, plus at least one binding chunk
        assert store.count("User") == 4
        assert store.count("Group") == 4
        assert 4 <= store.count("GROUP_USER_BINDING") <= 16
        assert not any(node["name"].endswith("-Altered") for node in store.data["User"].values())
