#!/usr/bin/env python3
"""Download risk-free rates from FRED.

Downloads a treasury yield series (DGS1MO unless VIX_RATE_SERIES says
otherwise) and saves it as decimal rates to parquet.

Usage:
    python scripts/download_rates.py
    python scripts/download_rates.py --start 2020-01-01 --end 2022-12-31
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from vix_fields.config import RATES_PARQUET, ensure_directories, load_settings
from vix_fields.io.fred import download_treasury_rates


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Download risk-free rates from FRED")
    parser.add_argument("--start", type=str, default="2020-01-01", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, default="2022-12-31", help="End date (YYYY-MM-DD)")
    parser.add_argument("--series", type=str, default=settings.rate_series, help="FRED series ID")
    parser.add_argument("--output", type=Path, default=RATES_PARQUET, help="Output parquet path")
    args = parser.parse_args()

    ensure_directories()

    if not settings.fred_api_key:
        print("ERROR: FRED_API_KEY not found in environment")
        print("Please set FRED_API_KEY in your .env file")
        print("\nYou can get a free API key from: https://fred.stlouisfed.org/docs/api/api_key.html")
        sys.exit(1)

    df = download_treasury_rates(
        start_date=date.fromisoformat(args.start),
        end_date=date.fromisoformat(args.end),
        series_id=args.series,
        api_key=settings.fred_api_key,
        save_path=args.output,
    )

    print("\n" + "=" * 60)
    print("DOWNLOAD COMPLETE")
    print("=" * 60)
    print(f"Observations: {len(df)}")
    if len(df):
        print(f"Date range:   {df['date'].min()} to {df['date'].max()}")
        print(f"Rate range:   {df['rate'].min():.4%} to {df['rate'].max():.4%}")
    print(f"Output:       {args.output}")


if __name__ == "__main__":
    main()
