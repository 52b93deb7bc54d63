"""Risk-free rate providers.

A provider is any callable mapping an expiry date to a continuously
compounded rate in decimal form (0.05 == 5%).
"""

from datetime import date
from typing import Optional, Protocol

import numpy as np
import polars as pl

from vix_fields.config import DEFAULT_RISK_FREE_RATE


class InterestRateProvider(Protocol):
    def __call__(self, expiry: date) -> float: ...


class ConstantRateProvider:
    """Same rate for every expiry."""

    def __init__(self, rate: float = DEFAULT_RISK_FREE_RATE):
        self.rate = rate

    def __call__(self, expiry: date) -> float:
        return self.rate


class SeriesRateProvider:
    """Rate lookup against a dated series.

    Returns the last observation on or before the requested date. Dates
    before the first observation get the earliest rate; an empty series
    falls back to ``default``.
    """

    def __init__(
        self,
        df: pl.DataFrame,
        date_col: str = "date",
        rate_col: str = "rate",
        default: float = DEFAULT_RISK_FREE_RATE,
    ):
        clean = df.select([date_col, rate_col]).drop_nulls().sort(date_col)
        self._dates = np.array(clean[date_col].to_list(), dtype="datetime64[D]")
        self._rates = clean[rate_col].to_numpy().astype(float)
        self.default = default

    def __len__(self) -> int:
        return len(self._rates)

    def __call__(self, expiry: date) -> float:
        if len(self._rates) == 0:
            return self.default
        idx = int(np.searchsorted(self._dates, np.datetime64(expiry, "D"), side="right")) - 1
        return float(self._rates[max(idx, 0)])


def rate_provider_from_parquet(path, default: Optional[float] = None) -> SeriesRateProvider:
    """SeriesRateProvider over a parquet file with date and rate columns."""
    df = pl.read_parquet(path)
    if default is None:
        return SeriesRateProvider(df)
    return SeriesRateProvider(df, default=default)
