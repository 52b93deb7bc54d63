"""Chain snapshot assembly from parsed option frames.

Frames use the wide layout where each row holds both the call and the put
for one expiration / strike combination.
"""

import math
from typing import Optional

import polars as pl

from vix_fields.contracts import ChainSnapshot, ContractKey, OptionRight


# =============================================================================
# Logical column names
# =============================================================================

class Cols:
    """Clean column names for processed data."""

    # Identifier
    TICKER = "ticker"

    # Dates
    QUOTE_DATE = "quote_date"
    EXPIRATION = "expiration"

    # Prices
    UNDERLYING_PRICE = "underlying_price"
    STRIKE = "strike"

    # Midquotes
    C_MID = "c_mid"
    P_MID = "p_mid"

    # ATM implied volatility lookup
    DELTA = "delta"
    IMPLIED_VOLATILITY = "implied_volatility"


def _usable(value) -> bool:
    return value is not None and not math.isnan(value)


def chain_from_frame(df: pl.DataFrame) -> ChainSnapshot:
    """Build a ChainSnapshot from a wide-format options frame.

    Null or NaN midquotes are left out of the snapshot, so a strike with
    only one quoted leg yields a single contract.

    Args:
        df: Frame with expiration, strike, c_mid and p_mid columns

    Returns:
        Mapping from contract key to mid price
    """
    chain: ChainSnapshot = {}
    rows = df.select([Cols.EXPIRATION, Cols.STRIKE, Cols.C_MID, Cols.P_MID]).iter_rows()
    for expiration, strike, c_mid, p_mid in rows:
        if expiration is None or not _usable(strike):
            continue
        if _usable(c_mid):
            chain[ContractKey(expiration, float(strike), OptionRight.CALL)] = float(c_mid)
        if _usable(p_mid):
            chain[ContractKey(expiration, float(strike), OptionRight.PUT)] = float(p_mid)
    return chain


def underlying_price_from_frame(df: pl.DataFrame) -> Optional[float]:
    """First valid underlying price in the frame, or None."""
    if Cols.UNDERLYING_PRICE not in df.columns:
        return None
    prices = df[Cols.UNDERLYING_PRICE].drop_nulls().drop_nans()
    if len(prices) == 0:
        return None
    return float(prices.head(1).item())


def atm_implied_volatility(df: pl.DataFrame) -> Optional[float]:
    """Implied volatility of the contract whose delta is closest to 0.5.

    Returns None when the frame lacks delta or implied volatility data.
    """
    if Cols.DELTA not in df.columns or Cols.IMPLIED_VOLATILITY not in df.columns:
        return None

    valid = (
        df.select([Cols.DELTA, Cols.IMPLIED_VOLATILITY])
        .drop_nulls()
        .filter(pl.col(Cols.DELTA).is_not_nan() & pl.col(Cols.IMPLIED_VOLATILITY).is_not_nan())
    )
    if len(valid) == 0:
        return None

    # sort is stable, so the first row wins on equal distance
    closest = (
        valid.with_columns((pl.col(Cols.DELTA) - 0.5).abs().alias("atm_distance"))
        .sort("atm_distance", maintain_order=True)
        .head(1)
    )
    return float(closest[Cols.IMPLIED_VOLATILITY].item())
