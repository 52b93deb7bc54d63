"""Single-day VIX computation with full diagnostics.

Combines expiry selection, variance computation, and interpolation
into a single function that reports every soft failure as a skip reason
instead of a number.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from vix_fields.config import MIN_OTM_STRIKES
from vix_fields.contracts import ChainSnapshot, list_expiries
from vix_fields.errors import NoExpiryBracket, NotComputable
from vix_fields.vix.interpolate import compute_vix_index, interpolate_30d_variance
from vix_fields.vix.selection import select_expiry_bracket
from vix_fields.vix.variance import VarianceResult, compute_expiry_variance

logger = logging.getLogger(__name__)


@dataclass
class DailyVixResult:
    """Result of daily VIX computation with diagnostics."""

    # Core result
    quote_date: date
    index: Optional[float] = None  # VIX-like index (100 * sqrt(var_30d))
    var_30d: Optional[float] = None

    # Expiry info
    near_exp: Optional[date] = None
    far_exp: Optional[date] = None
    near_dte: Optional[int] = None
    far_dte: Optional[int] = None

    # Per-expiry variance
    sigma2_near: Optional[float] = None
    sigma2_far: Optional[float] = None

    # Forward prices
    forward_near: Optional[float] = None
    forward_far: Optional[float] = None
    k0_near: Optional[float] = None
    k0_far: Optional[float] = None

    # Strike counts
    n_strikes_near: Optional[int] = None
    n_strikes_far: Optional[int] = None

    underlying_price: Optional[float] = None

    # Status
    success: bool = False
    skip_reason: Optional[str] = None
    error_detail: Optional[str] = None


def compute_daily_vix(
    chain: ChainSnapshot,
    quote_date: date,
    underlying_price: float,
    rate_provider: Callable[[date], float],
    min_otm_strikes: int = MIN_OTM_STRIKES,
) -> DailyVixResult:
    """Compute the VIX-like index for one underlying on one day.

    Args:
        chain: Mid prices for all contracts of the underlying
        quote_date: The trading date
        underlying_price: Current price of the underlying
        rate_provider: Risk-free rate lookup by expiry date
        min_otm_strikes: Minimum OTM strikes required per expiry

    Returns:
        DailyVixResult; ``index`` is None unless ``success`` is True
    """
    result = DailyVixResult(quote_date=quote_date, underlying_price=underlying_price)

    # Step 1: Select expirations
    try:
        bracket = select_expiry_bracket(quote_date, list_expiries(chain))
    except NoExpiryBracket as e:
        result.skip_reason = e.code
        result.error_detail = e.message
        return result

    result.near_exp = bracket.near_exp
    result.far_exp = bracket.far_exp
    result.near_dte = bracket.near_dte
    result.far_dte = bracket.far_dte

    # Step 2: Per-expiry variance (the two legs are independent)
    legs: dict[str, VarianceResult] = {}
    for prefix, expiry in (("near", bracket.near_exp), ("far", bracket.far_exp)):
        var_result = compute_expiry_variance(
            chain,
            underlying_price=underlying_price,
            snapshot_date=quote_date,
            expiry=expiry,
            rate_provider=rate_provider,
            min_otm_strikes=min_otm_strikes,
        )
        setattr(result, f"forward_{prefix}", var_result.forward)
        setattr(result, f"k0_{prefix}", var_result.k0)
        setattr(result, f"n_strikes_{prefix}", var_result.n_strikes)
        setattr(result, f"sigma2_{prefix}", var_result.variance)
        legs[prefix] = var_result

    for prefix, var_result in legs.items():
        if not var_result.success:
            result.skip_reason = f"{var_result.skip_reason}_{prefix.upper()}"
            result.error_detail = var_result.error_detail
            logger.debug("%s: %s", quote_date, result.skip_reason)
            return result

    # Step 3: Interpolate to 30-day variance
    near, far = legs["near"], legs["far"]
    try:
        result.var_30d = interpolate_30d_variance(near.variance, near.T, far.variance, far.T)
        result.index = compute_vix_index(result.var_30d)
    except NotComputable as e:
        result.skip_reason = e.code
        result.error_detail = e.message
        logger.debug("%s: %s", quote_date, e)
        return result

    result.success = True
    return result


def result_to_dict(result: DailyVixResult) -> dict:
    """Convert DailyVixResult to a dictionary for DataFrame creation."""
    return {
        "quote_date": result.quote_date,
        "index": result.index,
        "var_30d": result.var_30d,
        "near_exp": result.near_exp,
        "far_exp": result.far_exp,
        "near_dte": result.near_dte,
        "far_dte": result.far_dte,
        "sigma2_near": result.sigma2_near,
        "sigma2_far": result.sigma2_far,
        "forward_near": result.forward_near,
        "forward_far": result.forward_far,
        "k0_near": result.k0_near,
        "k0_far": result.k0_far,
        "n_strikes_near": result.n_strikes_near,
        "n_strikes_far": result.n_strikes_far,
        "underlying_price": result.underlying_price,
        "success": result.success,
        "skip_reason": result.skip_reason,
    }
