"""Additional universe fields per derivative class.

Two variants share one rendering interface:
- GENERIC: iv_rank, iv_percentile
- OPTION:  iv_rank, iv_percentile, vix, vix_iv_rank, vix_iv_percentile

The variant is chosen by configuration, not by subclassing. Missing values
render as empty fields.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

import polars as pl

from vix_fields.contracts import ChainSnapshot
from vix_fields.stats.store import WindowStore
from vix_fields.vix.daily import DailyVixResult, compute_daily_vix

logger = logging.getLogger(__name__)


class DerivativeKind(Enum):
    """Derivative class whose universe files get augmented."""

    GENERIC = "generic"
    OPTION = "option"


FIELD_NAMES: dict[DerivativeKind, tuple[str, ...]] = {
    DerivativeKind.GENERIC: ("iv_rank", "iv_percentile"),
    DerivativeKind.OPTION: (
        "iv_rank",
        "iv_percentile",
        "vix",
        "vix_iv_rank",
        "vix_iv_percentile",
    ),
}


def _render(value: Optional[float]) -> str:
    return "" if value is None else str(value)


@dataclass
class AdditionalFields:
    """Computed fields for one underlying on one date."""

    kind: DerivativeKind
    iv_rank: Optional[float] = None
    iv_percentile: Optional[float] = None
    vix: Optional[float] = None
    vix_iv_rank: Optional[float] = None
    vix_iv_percentile: Optional[float] = None

    # Diagnostics from the VIX computation (OPTION only)
    vix_result: Optional[DailyVixResult] = None

    @property
    def names(self) -> tuple[str, ...]:
        return FIELD_NAMES[self.kind]

    @property
    def header(self) -> str:
        return ",".join(self.names)

    @property
    def content(self) -> str:
        return ",".join(_render(getattr(self, name)) for name in self.names)

    def as_dict(self) -> dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in self.names}


def compute_additional_fields(
    kind: DerivativeKind,
    store: WindowStore,
    underlying: str,
    snapshot_date: date,
    atm_iv: Optional[float],
    underlying_price: Optional[float] = None,
    chain: Optional[ChainSnapshot] = None,
    rate_provider: Optional[Callable[[date], float]] = None,
) -> AdditionalFields:
    """Update the underlying's windows with today's values and derive the fields.

    Args:
        kind: Which field set to produce
        store: Window store owned by the caller
        underlying: Underlying identity (window key)
        snapshot_date: Processing date
        atm_iv: Today's ATM implied volatility (None when unavailable)
        underlying_price: Underlying price (OPTION only)
        chain: Chain snapshot (OPTION only)
        rate_provider: Risk-free rate lookup (OPTION only)

    Returns:
        AdditionalFields for the requested variant

    Raises:
        ValueError: If OPTION is requested without chain, price or rates
    """
    windows = store.windows_for(underlying)

    if kind is DerivativeKind.OPTION and (
        chain is None or underlying_price is None or rate_provider is None
    ):
        raise ValueError("OPTION fields need chain, underlying_price and rate_provider")

    if windows.last_date is not None and snapshot_date <= windows.last_date:
        raise ValueError(
            f"{underlying}: {snapshot_date} is not after last processed date {windows.last_date}"
        )
    vix_result = None
    if kind is DerivativeKind.OPTION:
        vix_result = compute_daily_vix(chain, snapshot_date, underlying_price, rate_provider)
        if not vix_result.success:
            logger.debug(
                "%s %s: VIX not computable (%s)",
                underlying, snapshot_date, vix_result.skip_reason,
            )

    # Window state only changes once every computation for the date is done
    windows.last_date = snapshot_date
    iv_stats = windows.iv.observe(atm_iv)
    fields = AdditionalFields(
        kind=kind,
        iv_rank=iv_stats.rank,
        iv_percentile=iv_stats.percentile,
    )

    if vix_result is not None:
        # The index's own rank needs a full year of history
        vix_stats = windows.vix.observe(vix_result.index, require_full=True)
        fields.vix = vix_result.index
        fields.vix_iv_rank = vix_stats.rank
        fields.vix_iv_percentile = vix_stats.percentile
        fields.vix_result = vix_result

    return fields


def augment_csv_lines(lines: list[str], fields: AdditionalFields) -> list[str]:
    """Append the field columns to CSV text lines.

    Blank lines are dropped; the first remaining line is the header.
    """
    kept = [line for line in lines if line.strip()]
    return [
        f"{line},{fields.header}" if i == 0 else f"{line},{fields.content}"
        for i, line in enumerate(kept)
    ]


def augment_frame(df: pl.DataFrame, fields: AdditionalFields) -> pl.DataFrame:
    """Add the field columns (constant per row) to a polars frame."""
    return df.with_columns([
        pl.lit(value, dtype=pl.Float64).alias(name)
        for name, value in fields.as_dict().items()
    ])
