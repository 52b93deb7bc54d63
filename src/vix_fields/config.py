"""Project configuration, methodology constants and paths.

Settings that vary between environments are read from the process
environment (optionally via a ``.env`` file).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =============================================================================
# Project Paths
# =============================================================================

# Project root (vix-fields/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Risk-free rate series (shared across all underlyings)
RATES_PARQUET = PROCESSED_DATA_DIR / "treasury_rates.parquet"


# =============================================================================
# Methodology Constants
# =============================================================================

# Expiry bracket windows, in calendar days after the snapshot date (inclusive)
NEAR_WINDOW_DAYS = (23, 30)
FAR_WINDOW_DAYS = (31, 37)

# Constant maturity target
TARGET_DAYS = 30
DAYS_PER_YEAR = 365

# One trading year of daily observations
WINDOW_CAPACITY = 252

# Minimum number of OTM strikes needed for a variance estimate
MIN_OTM_STRIKES = 3

# Used when a rate series has no observations at all
DEFAULT_RISK_FREE_RATE = 0.01

# FRED series used for the risk-free rate (1-month constant maturity treasury)
DEFAULT_RATE_SERIES = "DGS1MO"


# =============================================================================
# Runtime Settings
# =============================================================================

@dataclass
class Settings:
    """Environment-dependent settings."""

    # Capacity of every rolling window
    window_capacity: int = WINDOW_CAPACITY

    # FRED series ID for the risk-free rate
    rate_series: str = DEFAULT_RATE_SERIES

    # FRED API key (only needed to download rates)
    fred_api_key: Optional[str] = None


def load_settings() -> Settings:
    """Build settings from environment variables.

    Recognised variables:
        VIX_WINDOW_CAPACITY: rolling window capacity (positive integer)
        VIX_RATE_SERIES: FRED series ID for the risk-free rate
        FRED_API_KEY: FRED API key

    Raises:
        ValueError: If VIX_WINDOW_CAPACITY is not a positive integer
    """
    capacity_str = os.environ.get("VIX_WINDOW_CAPACITY")
    capacity = WINDOW_CAPACITY
    if capacity_str:
        capacity = int(capacity_str)
        if capacity <= 0:
            raise ValueError(f"VIX_WINDOW_CAPACITY must be positive, got {capacity_str}")

    return Settings(
        window_capacity=capacity,
        rate_series=os.environ.get("VIX_RATE_SERIES", DEFAULT_RATE_SERIES),
        fred_api_key=os.environ.get("FRED_API_KEY"),
    )


def options_by_date_dir(ticker: str) -> Path:
    """Partitioned per-day option frames for a ticker."""
    return PROCESSED_DATA_DIR / f"{ticker.lower()}_options_by_date"


def vix_fields_parquet(ticker: str) -> Path:
    """Computed additional fields for a ticker."""
    return PROCESSED_DATA_DIR / f"{ticker.lower()}_vix_fields.parquet"


# =============================================================================
# Directory Management
# =============================================================================

def ensure_directories():
    """Create all necessary data directories."""
    for dir_path in [RAW_DATA_DIR, PROCESSED_DATA_DIR]:
        dir_path.mkdir(parents=True, exist_ok=True)
