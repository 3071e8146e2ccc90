r"""
Unique random sampling of object indices.

    from write_bench.workload.sampling import sample

    pre_existing = sample(0, 10_000, 5_000)
"""

import random

__all__ = ["sample"]


def sample(start: int, end: int, count: int, *, rng: random.Random | None = None) -> list[int]:
    """Draw ``count`` distinct integers uniformly from ``[start, end)``.

    Args:
        start: Inclusive lower bound.
        end: Exclusive upper bound.
        count: Number of values to draw.
        rng: Random source (defaults to the module-level generator).

    Returns:
        Distinct values in arbitrary order.

    Raises:
        ValueError: If count is negative or exceeds ``end - start``.
    """
    available = max(end - start, 0)
    if count < 0 or count > available:
        msg = f"Cannot draw {count} distinct values from [{start}, {end})"
        raise ValueError(msg)
    return (rng or random).sample(range(start, end), count)
