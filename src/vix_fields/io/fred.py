"""Treasury yields from the FRED API as risk-free rates.

Yields are quoted in percent (DGS1MO by default) and stored as decimal
rates in a ``date, rate`` parquet file shared by all underlyings.
"""

import logging
import os
from datetime import date
from typing import Iterable, Optional

import polars as pl
import requests

from vix_fields.config import DEFAULT_RATE_SERIES, RATES_PARQUET

logger = logging.getLogger(__name__)

FRED_API_BASE = "https://api.stlouisfed.org/fred/series/observations"

# FRED marks holidays and missing prints with "."
MISSING_VALUE = "."


def get_fred_api_key() -> Optional[str]:
    return os.environ.get("FRED_API_KEY")


def _parse_observations(observations: Iterable[dict], column: str) -> pl.DataFrame:
    dates, values = [], []
    for obs in observations:
        raw = obs.get("value", MISSING_VALUE)
        if raw == MISSING_VALUE:
            continue
        try:
            values.append(float(raw))
        except ValueError:
            logger.warning("Skipping unparseable FRED value %r on %s", raw, obs.get("date"))
            continue
        dates.append(date.fromisoformat(obs["date"]))

    return pl.DataFrame(
        {"date": dates, column: values},
        schema={"date": pl.Date, column: pl.Float64},
    )


def download_fred_series(
    series_id: str,
    start_date: date,
    end_date: date,
    api_key: Optional[str] = None,
) -> pl.DataFrame:
    """Download one FRED series.

    Args:
        series_id: FRED series ID (e.g., "DGS1MO")
        start_date: First observation date
        end_date: Last observation date
        api_key: FRED API key (FRED_API_KEY from the environment if None)

    Returns:
        DataFrame with columns: date, <series_id lowercased>

    Raises:
        ValueError: If no API key is available or the payload has no observations
    """
    api_key = api_key or get_fred_api_key()
    if not api_key:
        raise ValueError("FRED API key not found; set FRED_API_KEY or pass api_key")

    logger.info("Requesting %s from FRED for %s..%s", series_id, start_date, end_date)
    response = requests.get(
        FRED_API_BASE,
        params={
            "series_id": series_id,
            "api_key": api_key,
            "file_type": "json",
            "observation_start": start_date.isoformat(),
            "observation_end": end_date.isoformat(),
        },
        timeout=30,
    )
    response.raise_for_status()

    payload = response.json()
    if "observations" not in payload:
        raise ValueError(f"Unexpected FRED response for {series_id}: {payload}")

    df = _parse_observations(payload["observations"], series_id.lower())
    logger.info(
        "%s: %d of %d observations usable",
        series_id, len(df), len(payload["observations"]),
    )
    return df


def download_treasury_rates(
    start_date: date,
    end_date: date,
    series_id: str = DEFAULT_RATE_SERIES,
    api_key: Optional[str] = None,
    save_path=None,
) -> pl.DataFrame:
    """Download a treasury yield series as decimal rates.

    Returns:
        DataFrame with columns: date, rate (0.05 == 5%)
    """
    yields = download_fred_series(series_id, start_date, end_date, api_key=api_key)
    df = yields.select(
        pl.col("date"),
        (pl.col(series_id.lower()) / 100.0).alias("rate"),
    )

    if save_path:
        df.write_parquet(save_path)
        logger.info("Saved %d rates to %s", len(df), save_path)

    return df


def load_rates(path=None) -> pl.DataFrame:
    """Saved rate series (date, rate); defaults to the shared parquet file."""
    return pl.read_parquet(path or RATES_PARQUET)
