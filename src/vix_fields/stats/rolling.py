"""Trailing-window rank and percentile statistics.

IV rank and IV percentile over the past trading year:

    rank       = (current - min) / (max - min)
    percentile = #(values < current) / #values

Both are computed over the window including the current observation.
Missing observations (None) occupy a slot but are ignored by the stats.
"""

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from vix_fields.config import WINDOW_CAPACITY
from vix_fields.errors import UndefinedRank


@dataclass(frozen=True)
class WindowStats:
    """Rank/percentile of the current observation. None means undefined."""

    rank: Optional[float] = None
    percentile: Optional[float] = None


def compute_rank(values: Sequence[float], current: float) -> float:
    """Position of ``current`` within the range of ``values``.

    Raises:
        UndefinedRank: If all values are equal
    """
    arr = np.asarray(values, dtype=float)
    low = float(arr.min())
    high = float(arr.max())
    if high == low:
        raise UndefinedRank(f"degenerate range: all {len(arr)} values equal {low}")
    return (current - low) / (high - low)


def compute_percentile(values: Sequence[float], current: float) -> float:
    """Share of ``values`` strictly below ``current``.

    Raises:
        UndefinedRank: If ``values`` is empty
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise UndefinedRank("empty window")
    return float(np.count_nonzero(arr < current)) / arr.size


def rank_and_percentile(values: Sequence[Optional[float]]) -> WindowStats:
    """Rank and percentile of the last element of ``values`` against all of them.

    A missing last element, or a degenerate range, yields undefined figures.
    """
    if not values or values[-1] is None:
        return WindowStats()

    current = values[-1]
    present = [v for v in values if v is not None]

    try:
        rank = compute_rank(present, current)
    except UndefinedRank:
        rank = None

    return WindowStats(rank=rank, percentile=compute_percentile(present, current))


class RollingWindow:
    """Fixed-capacity trailing series with ring-buffer eviction."""

    def __init__(self, capacity: int = WINDOW_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._values: deque = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    @property
    def is_full(self) -> bool:
        return len(self._values) == self.capacity

    def values(self) -> list[Optional[float]]:
        """Window contents, oldest first."""
        return list(self._values)

    def append(self, value: Optional[float]) -> None:
        """Add one observation, evicting the oldest when at capacity."""
        self._values.append(None if value is None else float(value))

    def warm_up(self, prior_values: Iterable[Optional[float]]) -> None:
        """Replay prior daily observations, oldest first."""
        for value in prior_values:
            self.append(value)

    def observe(self, value: Optional[float], require_full: bool = False) -> WindowStats:
        """Append the current observation and return its rank and percentile.

        Args:
            value: Current observation (None when missing)
            require_full: Withhold the stats unless the window is at capacity

        Returns:
            WindowStats over the window including the current value
        """
        self.append(value)
        if require_full and not self.is_full:
            return WindowStats()
        return rank_and_percentile(self.values())
