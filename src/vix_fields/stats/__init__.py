"""Rolling rank/percentile statistics.

- rolling: Fixed-capacity window and rank/percentile formulas
- store: Per-underlying window store
"""

from vix_fields.stats.rolling import (
    WindowStats,
    RollingWindow,
    compute_rank,
    compute_percentile,
    rank_and_percentile,
)

from vix_fields.stats.store import (
    UnderlyingWindows,
    WindowStore,
)

__all__ = [
    "WindowStats",
    "RollingWindow",
    "compute_rank",
    "compute_percentile",
    "rank_and_percentile",
    "UnderlyingWindows",
    "WindowStore",
]
