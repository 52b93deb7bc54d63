"""30-day constant maturity interpolation for VIX computation.

Per Cboe VIX methodology, interpolate between near-term and far-term
variance to produce a constant 30-day variance estimate:

    var_30d = [T1 * s1^2 * (T2 - T30) / (T2 - T1)
               + T2 * s2^2 * (T30 - T1) / (T2 - T1)] / T30

    VIX = 100 * sqrt(var_30d)

Days are used instead of minutes.
"""

import math

from vix_fields.config import DAYS_PER_YEAR, TARGET_DAYS
from vix_fields.errors import NotComputable


# Target maturity in years
TARGET_YEARS = TARGET_DAYS / DAYS_PER_YEAR


def interpolate_30d_variance(
    var_near: float,
    t_near: float,
    var_far: float,
    t_far: float,
    t_target: float = TARGET_YEARS,
) -> float:
    """Interpolate to constant 30-day variance.

    Args:
        var_near: Variance of near-term expiry (sigma^2)
        t_near: Years to near-term expiry
        var_far: Variance of far-term expiry (sigma^2)
        t_far: Years to far-term expiry
        t_target: Target maturity in years (default 30/365)

    Returns:
        Interpolated 30-day variance (may be negative)

    Raises:
        NotComputable: If t_far == t_near or the result is not finite
    """
    diff = t_far - t_near
    if diff == 0:
        raise NotComputable(f"near and far maturities coincide (T={t_near})")

    try:
        var_30d = (
            t_near * var_near * (t_far - t_target) / diff
            + t_far * var_far * (t_target - t_near) / diff
        ) / t_target
    except OverflowError as e:
        raise NotComputable(f"interpolation overflow: {e}") from e

    if not math.isfinite(var_30d):
        raise NotComputable(f"non-finite interpolated variance {var_30d}")

    return var_30d


def compute_vix_index(var_30d: float) -> float:
    """Convert 30-day variance to VIX-style index.

    Args:
        var_30d: 30-day variance (annualized)

    Returns:
        VIX-like index: 100 * sqrt(var_30d)

    Raises:
        NotComputable: If the variance is negative
    """
    if var_30d < 0:
        raise NotComputable(f"negative 30-day variance {var_30d:.6f}")

    return 100.0 * math.sqrt(var_30d)


def aggregate_vix(
    near: tuple[float, float],
    far: tuple[float, float],
    t_target: float = TARGET_YEARS,
) -> float:
    """Combine near and far (variance, years_to_expiry) pairs into an index value.

    Raises:
        NotComputable: If the interpolation is degenerate or negative
    """
    var_near, t_near = near
    var_far, t_far = far
    var_30d = interpolate_30d_variance(var_near, t_near, var_far, t_far, t_target)
    return compute_vix_index(var_30d)
