"""VIX computation modules.

Core modules:
- selection: Near/far expiry bracket selection
- parity: Forward price, K0 and liquidity-truncated OTM strikes
- variance: Model-free variance computation
- interpolate: 30-day constant maturity interpolation
- daily: Single-day VIX computation
"""

from vix_fields.vix.selection import (
    ExpiryBracket,
    select_expiry_bracket,
)

from vix_fields.vix.parity import (
    ForwardQuote,
    call_put_differences,
    filter_chain,
)

from vix_fields.vix.variance import (
    VarianceResult,
    compute_delta_k,
    compute_variance,
    compute_expiry_variance,
)

from vix_fields.vix.interpolate import (
    TARGET_YEARS,
    interpolate_30d_variance,
    compute_vix_index,
    aggregate_vix,
)

from vix_fields.vix.daily import (
    DailyVixResult,
    compute_daily_vix,
    result_to_dict,
)

__all__ = [
    # Selection
    "ExpiryBracket",
    "select_expiry_bracket",
    # Parity
    "ForwardQuote",
    "call_put_differences",
    "filter_chain",
    # Variance
    "VarianceResult",
    "compute_delta_k",
    "compute_variance",
    "compute_expiry_variance",
    # Interpolation
    "TARGET_YEARS",
    "interpolate_30d_variance",
    "compute_vix_index",
    "aggregate_vix",
    # Daily
    "DailyVixResult",
    "compute_daily_vix",
    "result_to_dict",
]
