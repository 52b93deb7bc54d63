"""Chronological driver for one underlying.

Feeds daily inputs, oldest first, through ``compute_additional_fields`` and
collects the results. Observation-level failures show up as missing values;
they never stop the batch.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional

import polars as pl

from vix_fields.contracts import ChainSnapshot
from vix_fields.fields import AdditionalFields, DerivativeKind, compute_additional_fields
from vix_fields.stats.store import WindowStore

logger = logging.getLogger(__name__)


@dataclass
class DailyInput:
    """Everything the core needs for one underlying on one date."""

    quote_date: date
    atm_iv: Optional[float]
    underlying_price: Optional[float] = None
    chain: Optional[ChainSnapshot] = None


@dataclass
class DailyFields:
    """Fields computed for one underlying on one date."""

    underlying: str
    quote_date: date
    fields: AdditionalFields

    @property
    def skip_reason(self) -> Optional[str]:
        if self.fields.vix_result is None:
            return None
        return self.fields.vix_result.skip_reason


def process_underlying(
    underlying: str,
    days: Iterable[DailyInput],
    store: WindowStore,
    kind: DerivativeKind = DerivativeKind.OPTION,
    rate_provider: Optional[Callable[[date], float]] = None,
) -> list[DailyFields]:
    """Compute additional fields for consecutive processing dates.

    Args:
        underlying: Underlying identity
        days: Daily inputs in strictly increasing date order
        store: Window store (warm it up beforehand if history exists)
        kind: Field variant to compute
        rate_provider: Risk-free rate lookup (OPTION only)

    Returns:
        One DailyFields per input day

    Raises:
        ValueError: If dates are not strictly increasing
    """
    results = []
    for day in days:
        fields = compute_additional_fields(
            kind,
            store,
            underlying,
            day.quote_date,
            atm_iv=day.atm_iv,
            underlying_price=day.underlying_price,
            chain=day.chain,
            rate_provider=rate_provider,
        )
        results.append(DailyFields(underlying, day.quote_date, fields))

    if kind is DerivativeKind.OPTION and results:
        reasons = summarize_skip_reasons(results)
        n_missing = sum(reasons.values())
        logger.info(
            "%s: %d days processed, %d without VIX %s",
            underlying, len(results), n_missing, dict(reasons),
        )

    return results


def summarize_skip_reasons(results: Iterable[DailyFields]) -> Counter:
    """Count VIX skip reasons across results."""
    return Counter(r.skip_reason for r in results if r.skip_reason is not None)


def results_to_frame(results: list[DailyFields]) -> pl.DataFrame:
    """One row per (underlying, date) with the field columns and skip reason."""
    rows = []
    for r in results:
        row = {"underlying": r.underlying, "quote_date": r.quote_date}
        row.update(r.fields.as_dict())
        row["skip_reason"] = r.skip_reason
        rows.append(row)
    # Use infer_schema_length=None to scan all rows (handles leading None values)
    return pl.DataFrame(rows, infer_schema_length=None)
