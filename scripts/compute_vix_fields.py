#!/usr/bin/env python3
"""Compute VIX and IV rank/percentile fields for all trading days of a ticker.

Reads per-day option frames from data/processed/<ticker>_options_by_date/
(one quote_date=YYYY-MM-DD/data.parquet partition per day).

Usage:
    python scripts/compute_vix_fields.py --ticker SPY
    python scripts/compute_vix_fields.py --ticker SPY --rate 0.02
    python scripts/compute_vix_fields.py --ticker SPY --limit 50 --kind generic
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import polars as pl
from tqdm import tqdm

from vix_fields.config import (
    RATES_PARQUET,
    ensure_directories,
    load_settings,
    options_by_date_dir,
    vix_fields_parquet,
)
from vix_fields.fields import DerivativeKind
from vix_fields.io import (
    ConstantRateProvider,
    atm_implied_volatility,
    chain_from_frame,
    rate_provider_from_parquet,
    underlying_price_from_frame,
)
from vix_fields.pipeline import (
    DailyInput,
    process_underlying,
    results_to_frame,
    summarize_skip_reasons,
)
from vix_fields.stats import WindowStore


def get_available_dates(data_dir: Path) -> list[date]:
    """Get sorted list of available trading dates from partitioned data."""
    dates = []
    for partition in data_dir.glob("quote_date=*"):
        date_str = partition.name.split("=")[1]
        dates.append(date.fromisoformat(date_str))
    return sorted(dates)


def load_day_input(data_dir: Path, quote_date: date) -> DailyInput:
    """Load one day's partition and assemble the core inputs."""
    date_str = quote_date.strftime("%Y-%m-%d")
    day_df = pl.read_parquet(data_dir / f"quote_date={date_str}" / "data.parquet")
    return DailyInput(
        quote_date=quote_date,
        atm_iv=atm_implied_volatility(day_df),
        underlying_price=underlying_price_from_frame(day_df),
        chain=chain_from_frame(day_df),
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Compute VIX and IV rank fields for a ticker")
    parser.add_argument("--ticker", type=str, default="SPY", help="Ticker symbol")
    parser.add_argument("--start", type=str, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, help="End date (YYYY-MM-DD)")
    parser.add_argument("--limit", type=int, help="Max days to process")
    parser.add_argument(
        "--kind",
        choices=[k.value for k in DerivativeKind],
        default=DerivativeKind.OPTION.value,
        help="Field variant",
    )
    parser.add_argument(
        "--rate",
        type=float,
        help=f"Constant risk-free rate (default: rates from {RATES_PARQUET})",
    )
    args = parser.parse_args()

    ticker = args.ticker.upper()
    kind = DerivativeKind(args.kind)
    settings = load_settings()
    ensure_directories()

    data_dir = options_by_date_dir(ticker)
    if not data_dir.exists():
        print(f"ERROR: Data directory not found: {data_dir}")
        sys.exit(1)

    if args.rate is not None:
        rate_provider = ConstantRateProvider(args.rate)
    elif RATES_PARQUET.exists():
        rate_provider = rate_provider_from_parquet(RATES_PARQUET)
    else:
        print(f"ERROR: {RATES_PARQUET} not found; run scripts/download_rates.py or pass --rate")
        sys.exit(1)

    dates = get_available_dates(data_dir)
    if args.start:
        dates = [d for d in dates if d >= date.fromisoformat(args.start)]
    if args.end:
        dates = [d for d in dates if d <= date.fromisoformat(args.end)]
    if args.limit:
        dates = dates[:args.limit]

    if not dates:
        print(f"ERROR: No trading days to process for {ticker}")
        sys.exit(1)

    print(f"Processing {len(dates)} days for {ticker} ({dates[0]} to {dates[-1]})")

    store = WindowStore(capacity=settings.window_capacity)
    days = (load_day_input(data_dir, d) for d in tqdm(dates, desc=f"Computing {ticker} fields"))
    results = process_underlying(ticker, days, store, kind=kind, rate_provider=rate_provider)

    df = results_to_frame(results)
    output_path = vix_fields_parquet(ticker)
    df.write_parquet(output_path)

    print("\n" + "=" * 60)
    print(f"SUMMARY - {ticker}")
    print("=" * 60)
    print(f"  Days:           {len(results)}")
    if kind is DerivativeKind.OPTION:
        n_vix = df["vix"].is_not_null().sum()
        print(f"  VIX computed:   {n_vix}")
        for reason, count in summarize_skip_reasons(results).most_common():
            print(f"    {reason}: {count}")
        if n_vix:
            print(f"  VIX range:      {df['vix'].min():.2f} to {df['vix'].max():.2f}")
    print(f"  Output:         {output_path}")


if __name__ == "__main__":
    main()
