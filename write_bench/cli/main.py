r"""
Command-line interface for write-bench.

    write-bench run -s neo4j -p default -f csv,json
    write-bench report results/sweep_20250101_120000.json -f md
    write-bench stores test -n memgraph
"""

import dataclasses
from pathlib import Path
from typing import Annotated

import typer

from write_bench.errors import WriteBenchError

__all__ = ["app", "main"]

app = typer.Typer(
    name="write-bench",
    help="Compare guarded and blind write strategies on Bolt graph databases.",
    no_args_is_help=True,
)


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@app.command()
def run(
    store_name: Annotated[str, typer.Option("-s", "--store", help="Store to benchmark")] = "neo4j",
    profile: Annotated[str, typer.Option("-p", "--profile", help="Profile: default, small, smoke")] = "default",
    workloads: Annotated[str, typer.Option("-w", "--workloads", help="Workloads (comma-separated): nodes, edges")] = "nodes,edges",
    uri: Annotated[str | None, typer.Option("--uri", help="Connection URI")] = None,
    runs: Annotated[int | None, typer.Option("--runs", help="Override repetitions per cell")] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Random seed")] = None,
    output: Annotated[Path, typer.Option("-o", "--output", help="Output directory")] = Path("./results"),
    format_: Annotated[str, typer.Option("-f", "--format", help="Output format: csv, json, md, all")] = "csv,json",
    log_level: Annotated[str, typer.Option("--log-level", help="Log level")] = "INFO",
    log_format: Annotated[str, typer.Option("--log-format", help="Log format: console, json")] = "console",
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Verbose output")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would run")] = False,
) -> None:
    """Run the write-strategy sweep against one store."""
    from write_bench.config import get_profile
    from write_bench.log import configure_logging
    from write_bench.reporting import EXPORTERS
    from write_bench.runner import NODE_EXPERIMENTS, BenchmarkOrchestrator, OrchestratorConfig
    from write_bench.stores import StoreRegistry
    from write_bench.types import BenchmarkMatrix

    try:
        configure_logging(log_level, format="json" if log_format == "json" else "console")
        sweep = get_profile(profile)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    if runs is not None:
        sweep = dataclasses.replace(sweep, runs=runs)
    if seed is not None:
        sweep = dataclasses.replace(sweep, seed=seed)

    formats = _split(format_)
    if "all" in formats:
        formats = list(EXPORTERS)
    unknown = [f for f in formats if f not in EXPORTERS]
    if unknown:
        typer.echo(f"Error: Unknown format(s) {', '.join(unknown)}", err=True)
        raise typer.Exit(1)

    workload_list = tuple(_split(workloads))

    if verbose or dry_run:
        typer.echo(f"Store: {store_name}")
        typer.echo(f"Profile: {sweep.name} ({sweep.total_objects:,} objects, {sweep.runs} runs)")
        typer.echo(f"Batch sizes: {', '.join(str(b) for b in sweep.batch_sizes)}")
        typer.echo(f"Contention ratios: {', '.join(str(r) for r in sweep.contention_ratios)}")
        typer.echo(f"Workloads: {', '.join(workload_list)}")

    if dry_run:
        typer.echo(f"\n[DRY RUN] Would run {len(BenchmarkMatrix(sweep))} cells:")
        if "nodes" in workload_list:
            for experiment in NODE_EXPERIMENTS:
                typer.echo(f"  nodes: {experiment.name} (seeded by {experiment.seed_strategy})")
        if "edges" in workload_list:
            typer.echo("  edges: users, groups, then bindings + user updates + group updates concurrently")
        return

    try:
        store = StoreRegistry.create(store_name)
        orchestrator = BenchmarkOrchestrator(store, config=OrchestratorConfig(profile=sweep, workloads=workload_list))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    def progress(phase: str, cell: str, experiment: str) -> None:
        typer.echo(f"  [{phase}] {cell}: {experiment}")

    if verbose:
        orchestrator.set_progress_callback(progress)

    try:
        kwargs = {"uri": uri} if uri else {}
        store.connect(**kwargs)
        if verbose:
            typer.echo(f"Connected to {store.name}")
        typer.echo(f"\nRunning sweep '{sweep.name}' on {store.name}...")
        result = orchestrator.run()
    except WriteBenchError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    finally:
        store.disconnect()

    output.mkdir(parents=True, exist_ok=True)
    session_id = result.collector.session.session_id
    for fmt in formats:
        exporter = EXPORTERS[fmt]()
        path = output / f"{session_id}.{exporter.extension}"
        exporter.export(result.collector, path)
        typer.echo(f"Exported {fmt.upper()}: {path}")

    typer.echo(f"\nCompleted: {result.sample_count} samples in {result.duration_seconds:.1f}s")


@app.command()
def report(
    results_path: Annotated[Path, typer.Argument(help="Path to results JSON file or directory")],
    format_: Annotated[str, typer.Option("-f", "--format", help="Output format: csv, json, md")] = "md",
    output: Annotated[Path | None, typer.Option("-o", "--output", help="Output file path")] = None,
) -> None:
    """Regenerate reports and medians from a JSON export."""
    from write_bench.errors import AggregationError
    from write_bench.metrics import summarize
    from write_bench.reporting import EXPORTERS, load_collector

    if results_path.is_dir():
        json_files = list(results_path.glob("*.json"))
        if not json_files:
            typer.echo(f"No JSON files found in {results_path}", err=True)
            raise typer.Exit(1)
        results_path = max(json_files, key=lambda p: p.stat().st_mtime)

    if not results_path.exists():
        typer.echo(f"File not found: {results_path}", err=True)
        raise typer.Exit(1)

    exporter_cls = EXPORTERS.get(format_)
    if exporter_cls is None:
        typer.echo(f"Unknown format: {format_}", err=True)
        raise typer.Exit(1)

    try:
        collector = load_collector(results_path)
        summaries = summarize(collector)
    except (ValueError, AggregationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    exporter = exporter_cls()
    if output is None:
        output = results_path.with_suffix(f".{exporter.extension}")
    exporter.export(collector, output)
    typer.echo(f"Generated report: {output}")

    typer.echo("\nMedians:")
    for summary in summaries:
        key = summary.key
        typer.echo(
            f"  {key.strategy_name} batch={key.batch_size} ratio={key.contention_ratio}: "
            f"{summary.median_elapsed_ms:.2f} ms, {summary.median_throughput:.2f} obj/s"
        )


@app.command()
def stores(
    action: Annotated[str, typer.Argument(help="Action: list, test")] = "list",
    name: Annotated[str | None, typer.Option("-n", "--name", help="Store name")] = None,
    uri: Annotated[str | None, typer.Option("--uri", help="Connection URI")] = None,
) -> None:
    """List and test graph stores."""
    from write_bench.stores import StoreRegistry

    if action == "list":
        typer.echo("Available stores:")
        for store_name in StoreRegistry.list():
            typer.echo(f"  - {store_name}")
    elif action == "test":
        if not name:
            typer.echo("Error: --name required for test", err=True)
            raise typer.Exit(1)

        try:
            store = StoreRegistry.create(name)
            kwargs = {"uri": uri} if uri else {}
            store.connect(**kwargs)
            typer.echo(f"Successfully connected to {store.name} (version: {store.version})")
            store.disconnect()
        except (ValueError, WriteBenchError) as e:
            typer.echo(f"Failed to connect to {name}: {e}", err=True)
            raise typer.Exit(1) from e
    else:
        typer.echo(f"Unknown action: {action}", err=True)
        raise typer.Exit(1)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
