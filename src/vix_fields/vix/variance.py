"""Model-free variance computation per VIX methodology.

The variance formula (per expiry T):

    sigma2(T) = (2/T) * sum[(delta_K / K^2) * exp(rT) * Q(K)] - (1/T) * (F/K0 - 1)^2

Where:
- T = time to expiry in years (DTE / 365)
- K = strike prices in the OTM strip
- delta_K = strike spacing
- Q(K) = OTM option midquote
- F = forward price
- K0 = ATM strike
- r = risk-free rate for the expiry

Negative variances are returned as-is; deciding what to do with them is
the caller's business.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

import numpy as np

from vix_fields.config import DAYS_PER_YEAR, MIN_OTM_STRIKES
from vix_fields.contracts import ChainSnapshot
from vix_fields.errors import NotComputable, VixFieldsError
from vix_fields.vix.parity import filter_chain

logger = logging.getLogger(__name__)


@dataclass
class VarianceResult:
    """Result of variance computation for a single expiry.

    ``variance`` is None whenever ``success`` is False.
    """

    success: bool

    # Model-free variance sigma^2 (may be negative)
    variance: Optional[float] = None

    # Forward price F and ATM strike K0
    forward: Optional[float] = None
    k0: Optional[float] = None

    # Time to expiry in years
    T: Optional[float] = None

    # Number of OTM strikes used
    n_strikes: int = 0

    # Failure code when success is False
    skip_reason: Optional[str] = None
    error_detail: Optional[str] = None


def compute_delta_k(strikes: np.ndarray) -> np.ndarray:
    """Compute strike spacing delta_K for each strike.

    - Interior strikes: delta_K = (K_{i+1} - K_{i-1}) / 2
    - First strike: delta_K = K_1 - K_0 (one-sided)
    - Last strike: delta_K = K_n - K_{n-1} (one-sided)

    Args:
        strikes: Sorted array of at least two strikes

    Returns:
        Array of delta_K values
    """
    n = len(strikes)
    delta_k = np.zeros(n)
    delta_k[0] = strikes[1] - strikes[0]
    delta_k[1:-1] = (strikes[2:] - strikes[:-2]) / 2
    delta_k[-1] = strikes[-1] - strikes[-2]
    return delta_k


def compute_variance(
    otm_mid_prices: dict[float, float],
    forward: float,
    k0: float,
    years_to_expiry: float,
    time_multiple: float,
) -> float:
    """Single-expiry annualized variance.

    Args:
        otm_mid_prices: OTM mid price per strike
        forward: Forward price F
        k0: ATM strike K0
        years_to_expiry: T in years
        time_multiple: exp(rT)

    Returns:
        Variance sigma^2, unclamped

    Raises:
        NotComputable: For fewer than two strikes, T <= 0, K0 <= 0 or non-finite results
    """
    if len(otm_mid_prices) < 2:
        raise NotComputable(f"need at least 2 strikes for delta_K, got {len(otm_mid_prices)}")
    if years_to_expiry <= 0:
        raise NotComputable(f"T must be positive, got {years_to_expiry}")
    if k0 <= 0:
        raise NotComputable(f"K0 must be positive, got {k0}")

    strikes = np.array(sorted(otm_mid_prices), dtype=float)
    quotes = np.array([otm_mid_prices[k] for k in strikes], dtype=float)
    delta_k = compute_delta_k(strikes)

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        # Per-strike contributions: (delta_K / K^2) * exp(rT) * Q(K)
        contributions = delta_k / strikes / strikes * time_multiple * quotes
        sum_term = 2 / years_to_expiry * float(np.sum(contributions))

        # Adjustment term: (1/T) * (F/K0 - 1)^2
        overflow = forward / k0 - 1
        adjustment_term = 1 / years_to_expiry * overflow * overflow

        variance = sum_term - adjustment_term

    if not np.isfinite(variance):
        raise NotComputable(f"non-finite variance (sum={sum_term}, adjustment={adjustment_term})")

    return float(variance)


def compute_expiry_variance(
    chain: ChainSnapshot,
    underlying_price: float,
    snapshot_date: date,
    expiry: date,
    rate_provider: Callable[[date], float],
    min_otm_strikes: int = MIN_OTM_STRIKES,
) -> VarianceResult:
    """Filter the chain and compute variance for one expiry.

    Soft failures are reported through ``success`` and ``skip_reason``.

    Args:
        chain: Mid prices for all contracts of the underlying
        underlying_price: Current underlying price
        snapshot_date: Date of the snapshot
        expiry: Expiration to compute variance for
        rate_provider: Risk-free rate lookup by expiry date
        min_otm_strikes: Minimum OTM strikes required

    Returns:
        VarianceResult with variance and diagnostics
    """
    T = (expiry - snapshot_date).days / DAYS_PER_YEAR
    result = VarianceResult(success=False, T=T)

    try:
        quote = filter_chain(
            chain,
            underlying_price=underlying_price,
            expiry=expiry,
            risk_free_rate=rate_provider(expiry),
            years_to_expiry=T,
            min_otm_strikes=min_otm_strikes,
        )
        result.forward = quote.forward
        result.k0 = quote.k0
        result.n_strikes = len(quote.otm_mid_prices)

        result.variance = compute_variance(
            quote.otm_mid_prices,
            forward=quote.forward,
            k0=quote.k0,
            years_to_expiry=T,
            time_multiple=quote.time_multiple,
        )
        result.success = True
    except VixFieldsError as e:
        logger.debug("Variance skipped for expiry %s: %s", expiry, e)
        result.variance = None
        result.skip_reason = e.code
        result.error_detail = e.message

    return result
