r"""
Sweep profiles and environment settings.

Profiles:
    - default: 10K objects, batch sizes 100/500/1000/5000, ratios 0.1/0.5/0.9, 10 runs
    - small: 1K objects, batch sizes 100/500, ratios 0.1/0.5/0.9, 3 runs
    - smoke: 100 objects, batch size 10, ratio 0.5, 1 run (quick validation)

    from write_bench.config import get_profile, get_env

    sweep = get_profile("default")
    uri = get_env("NEO4J_URI", default="bolt://localhost:7687")
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from write_bench.types import SweepConfig

# Look for .env in current dir or the project root
_env_file = Path(".env")
if not _env_file.exists():
    _env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

__all__ = [
    "PROFILES",
    "DEFAULT_PROFILE",
    "get_profile",
    "get_env",
    "ENV_PREFIX",
]

ENV_PREFIX = "WRITE_BENCH_"

PROFILES: dict[str, SweepConfig] = {
    "default": SweepConfig(
        name="default",
        total_objects=10_000,
        batch_sizes=(100, 500, 1000, 5000),
        contention_ratios=(0.1, 0.5, 0.9),
        runs=10,
    ),
    "small": SweepConfig(
        name="small",
        total_objects=1_000,
        batch_sizes=(100, 500),
        contention_ratios=(0.1, 0.5, 0.9),
        runs=3,
    ),
    "smoke": SweepConfig(
        name="smoke",
        total_objects=100,
        batch_sizes=(10,),
        contention_ratios=(0.5,),
        runs=1,
        seed=42,
    ),
}

DEFAULT_PROFILE = "default"


def get_profile(name: str) -> SweepConfig:
    """Get sweep profile by name.

    Args:
        name: Profile name (default, small, smoke).

    Returns:
        SweepConfig for the requested profile.

    Raises:
        ValueError: If profile name is not recognized.
    """
    if name not in PROFILES:
        valid = ", ".join(PROFILES.keys())
        msg = f"Unknown profile '{name}'. Valid profiles: {valid}"
        raise ValueError(msg)
    return PROFILES[name]


def get_env(key: str, *, default: str | None = None) -> str | None:
    """Get environment variable with WRITE_BENCH_ prefix.

    Args:
        key: Variable name without prefix (e.g., "NEO4J_URI").
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(f"{ENV_PREFIX}{key}", default)
