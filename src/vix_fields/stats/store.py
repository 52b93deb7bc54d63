"""Per-underlying rolling window state."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from vix_fields.config import WINDOW_CAPACITY
from vix_fields.stats.rolling import RollingWindow


@dataclass
class UnderlyingWindows:
    """Trailing ATM implied volatility and volatility index series."""

    iv: RollingWindow
    vix: RollingWindow

    # Last processing date consumed; dates must strictly increase
    last_date: Optional[date] = None


@dataclass
class WindowStore:
    """Mapping from underlying identity to its rolling windows.

    Owned by the caller and passed into each computation; windows are never
    shared between underlyings.
    """

    capacity: int = WINDOW_CAPACITY
    _windows: dict[str, UnderlyingWindows] = field(default_factory=dict)

    def __contains__(self, underlying: str) -> bool:
        return underlying in self._windows

    def __len__(self) -> int:
        return len(self._windows)

    def underlyings(self) -> list[str]:
        return list(self._windows)

    def windows_for(self, underlying: str) -> UnderlyingWindows:
        """Windows for an underlying, created empty on first use."""
        if underlying not in self._windows:
            self._windows[underlying] = UnderlyingWindows(
                iv=RollingWindow(self.capacity),
                vix=RollingWindow(self.capacity),
            )
        return self._windows[underlying]

    def warm_up(
        self,
        underlying: str,
        ivs: Iterable[Optional[float]],
        vixes: Optional[Iterable[Optional[float]]] = None,
    ) -> UnderlyingWindows:
        """Replay prior daily values (oldest first) into an underlying's windows."""
        windows = self.windows_for(underlying)
        windows.iv.warm_up(ivs)
        if vixes is not None:
            windows.vix.warm_up(vixes)
        return windows
