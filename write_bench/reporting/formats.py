r"""
Export formats for sweep results.

CSV carries one row per recorded sample; JSON carries the session and every
raw sample so reports can be regenerated later; Markdown renders the
per-key medians.

    from write_bench.reporting.formats import CsvExporter, load_collector

    CsvExporter().export(collector, "results.csv")
    collector = load_collector("results.json")
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from write_bench.metrics.aggregate import summarize
from write_bench.metrics.collector import MetricsCollector

__all__ = [
    "BaseExporter",
    "JsonExporter",
    "CsvExporter",
    "MarkdownExporter",
    "EXPORTERS",
    "CSV_HEADER",
    "load_collector",
]

CSV_HEADER = "Name,Batch Size,Contention Ratio,Total Time (ms),Effective Throughput"


def _format_rate(value: float) -> str:
    return "inf" if value == float("inf") else f"{value:.2f}"


class BaseExporter(ABC):
    """Base class for result exporters."""

    extension: str = ""

    def export(self, collector: MetricsCollector, path: str | Path) -> None:
        """Export results to file."""
        Path(path).write_text(self.to_string(collector))

    @abstractmethod
    def to_string(self, collector: MetricsCollector) -> str:
        """Export results to string."""
        ...


class JsonExporter(BaseExporter):
    """Export session and raw samples to JSON format."""

    extension = "json"

    def __init__(self, *, indent: int = 2) -> None:
        self._indent = indent

    def to_string(self, collector: MetricsCollector) -> str:
        return json.dumps(collector.to_dict(), indent=self._indent)


class CsvExporter(BaseExporter):
    """Export one CSV row per recorded sample."""

    extension = "csv"

    def to_string(self, collector: MetricsCollector) -> str:
        lines = [CSV_HEADER]
        for key, sample in collector.records():
            line = ",".join([
                key.strategy_name,
                str(key.batch_size),
                str(key.contention_ratio),
                f"{sample.elapsed_ms:.3f}",
                _format_rate(sample.throughput),
            ])
            lines.append(line)
        return "\n".join(lines) + "\n"


class MarkdownExporter(BaseExporter):
    """Export per-key medians to a Markdown report."""

    extension = "md"

    def to_string(self, collector: MetricsCollector) -> str:
        lines: list[str] = []
        session = collector.session

        lines.append("# Write Strategy Benchmark Report")
        lines.append("")
        lines.append(f"**Session:** {session.session_id or 'N/A'}")
        lines.append(f"**Store:** {session.store or 'N/A'}")
        lines.append(f"**Profile:** {session.profile or 'N/A'}")
        lines.append(f"**Date:** {session.started_at[:10] if session.started_at else 'N/A'}")
        lines.append("")

        summaries = summarize(collector)
        if not summaries:
            lines.append("No samples recorded.")
            lines.append("")
            return "\n".join(lines)

        lines.append("## Medians")
        lines.append("")
        lines.append("| Name | Batch Size | Contention Ratio | Samples | Time (ms) | Throughput (obj/s) | Write Throughput (obj/s) |")
        lines.append("|------|------------|------------------|---------|-----------|--------------------|--------------------------|")
        for summary in summaries:
            lines.append(
                f"| {summary.key.strategy_name} | {summary.key.batch_size} | {summary.key.contention_ratio} "
                f"| {summary.samples} | {summary.median_elapsed_ms:.2f} "
                f"| {_format_rate(summary.median_throughput)} | {_format_rate(summary.median_write_throughput)} |"
            )
        lines.append("")
        lines.append("*Throughput counts objects read by existence checks plus objects written*")
        lines.append("")
        return "\n".join(lines)


EXPORTERS: dict[str, type[BaseExporter]] = {
    "json": JsonExporter,
    "csv": CsvExporter,
    "md": MarkdownExporter,
}


def load_collector(path: str | Path) -> MetricsCollector:
    """Load a collector from a JSON export.

    Args:
        path: File written by JsonExporter.

    Returns:
        Collector holding the session and every sample.

    Raises:
        ValueError: If the file is not a JSON export.
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict) or "samples" not in data:
        msg = f"{path} is not a write-bench JSON export"
        raise ValueError(msg)
    return MetricsCollector.from_dict(data)
