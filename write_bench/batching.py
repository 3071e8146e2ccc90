r"""
Statement batching.

Splits a workload into fixed-size chunks and rewrites each chunk into one
composite statement that unwinds an array of per-item parameter maps, so a
chunk costs a single round trip.

    from write_bench.batching import batch, rewrite

    for chunk in batch(statements, 500):
        composite = rewrite(chunk)
        tx.run(composite.text, composite.as_dict())
"""

from collections.abc import Collection, Sequence
from typing import Any

from write_bench.statements import ROWS_PARAMETER, ParameterizedStatement, StatementTemplate

__all__ = ["batch", "rewrite", "CompositeStatement"]


class CompositeStatement:
    """Set-form statement built from a chunk of row statements."""

    __slots__ = ("template", "label", "rows")

    def __init__(self, template: StatementTemplate, label: str, rows: list[dict[str, Any]]) -> None:
        self.template = template
        self.label = label
        self.rows = rows

    @property
    def text(self) -> str:
        return self.template.batched_text

    def as_dict(self) -> dict[str, Any]:
        return {ROWS_PARAMETER: self.rows}

    def __len__(self) -> int:
        return len(self.rows)


def batch(statements: Sequence[ParameterizedStatement], size: int) -> list[list[ParameterizedStatement]]:
    """Split statements into consecutive chunks of at most ``size``.

    Args:
        statements: Statements in workload order.
        size: Maximum chunk size.

    Returns:
        Chunks whose concatenation equals ``statements``.

    Raises:
        ValueError: If size is smaller than 1.
    """
    if size < 1:
        msg = f"Batch size must be at least 1, got {size}"
        raise ValueError(msg)
    return [list(statements[i : i + size]) for i in range(0, len(statements), size)]


def rewrite(chunk: Sequence[ParameterizedStatement], *, exclude: Collection[Any] = frozenset()) -> CompositeStatement:
    """Build the composite statement for a chunk.

    Only the first statement's template is used; every statement in the
    chunk is expected to share it.

    Args:
        chunk: Non-empty chunk of statements.
        exclude: Keys whose rows are left out (already present in the store).

    Returns:
        Composite statement; its row array may be empty.

    Raises:
        ValueError: If the chunk is empty.
    """
    if not chunk:
        msg = "Cannot rewrite an empty chunk"
        raise ValueError(msg)

    head = chunk[0]
    if exclude:
        rows = [s.as_dict() for s in chunk if s.key not in exclude]
    else:
        rows = [s.as_dict() for s in chunk]
    return CompositeStatement(head.template, head.label, rows)
