r"""
Workload generation.

    from write_bench.workload import WorkloadGenerator, sample

    nodes = WorkloadGenerator(10_000).node_workload(0.5)
"""

from write_bench.workload.generator import EdgeWorkload, NodeWorkload, WorkloadGenerator
from write_bench.workload.sampling import sample

__all__ = [
    "EdgeWorkload",
    "NodeWorkload",
    "WorkloadGenerator",
    "sample",
]
