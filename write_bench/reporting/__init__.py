r"""
Result reporting.

Exports recorded samples to JSON, CSV, and Markdown formats.

    from write_bench.reporting import CsvExporter, MarkdownExporter

    CsvExporter().export(collector, "results.csv")
    MarkdownExporter().export(collector, "report.md")
"""

from write_bench.reporting.formats import (
    CSV_HEADER,
    EXPORTERS,
    BaseExporter,
    CsvExporter,
    JsonExporter,
    MarkdownExporter,
    load_collector,
)

__all__ = [
    "BaseExporter",
    "CSV_HEADER",
    "CsvExporter",
    "EXPORTERS",
    "JsonExporter",
    "MarkdownExporter",
    "load_collector",
]
