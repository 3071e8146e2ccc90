r"""
Command-line interface for write-bench.

    write-bench run -s neo4j -p default
    write-bench report results/sweep.json -f md
"""

from write_bench.cli.main import app, main

__all__ = [
    "app",
    "main",
]
