"""IO adapters.

- chain: polars option frames -> ChainSnapshot, ATM implied volatility
- rates: Risk-free rate providers
- fred: FRED API client for treasury rates
"""

from vix_fields.io.chain import (
    Cols,
    chain_from_frame,
    underlying_price_from_frame,
    atm_implied_volatility,
)

from vix_fields.io.rates import (
    InterestRateProvider,
    ConstantRateProvider,
    SeriesRateProvider,
    rate_provider_from_parquet,
)

from vix_fields.io.fred import (
    download_fred_series,
    download_treasury_rates,
    load_rates,
)

__all__ = [
    # Chain
    "Cols",
    "chain_from_frame",
    "underlying_price_from_frame",
    "atm_implied_volatility",
    # Rates
    "InterestRateProvider",
    "ConstantRateProvider",
    "SeriesRateProvider",
    "rate_provider_from_parquet",
    # FRED
    "download_fred_series",
    "download_treasury_rates",
    "load_rates",
]
