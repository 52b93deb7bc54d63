"""Forward price and OTM strike filtering via put-call parity.

Per VIX methodology:
1. Walk the chain outward from the underlying price, collecting C - P at
   strikes quoted on both legs; two consecutive illiquid strikes end a walk
2. K* = strike where |C_mid - P_mid| is minimized
3. F = K* + exp(rT) * (C_mid(K*) - P_mid(K*))
4. K0 = max strike where strike <= F
5. Keep OTM calls (K >= F) and puts (K <= F) at the liquid strikes
"""

from dataclasses import dataclass
from datetime import date
import numpy as np

from vix_fields.config import MIN_OTM_STRIKES
from vix_fields.contracts import (
    ChainSnapshot,
    ContractKey,
    OptionRight,
    restrict_to_expiry,
)
from vix_fields.errors import (
    InsufficientOtmStrikes,
    NoAtmCandidate,
    NoForwardPrice,
    NotComputable,
)


@dataclass
class ForwardQuote:
    """Result of chain filtering for a single expiry."""

    # The strike K* where the put-call parity difference is minimized
    k_star: float

    # Forward price F
    forward: float

    # ATM strike K0 = max(strike where strike <= F)
    k0: float

    # exp(rT) discount multiple
    time_multiple: float

    # C_mid - P_mid for every liquid strike, in walk order
    call_put_difference: dict[float, float]

    # OTM mid price Q(K) per strike
    otm_mid_prices: dict[float, float]


def _walk_chain(
    chain: ChainSnapshot,
    strikes: list[float],
    expiry: date,
) -> dict[float, float]:
    """Collect C - P per strike, stopping after two consecutive gaps.

    A gap is a strike missing either leg or quoting either leg at zero.
    """
    differences: dict[float, float] = {}
    last_fail = False

    for strike in strikes:
        call = chain.get(ContractKey(expiry, strike, OptionRight.CALL))
        put = chain.get(ContractKey(expiry, strike, OptionRight.PUT))
        if call is not None and put is not None and call > 0 and put > 0:
            differences[strike] = call - put
            last_fail = False
            continue

        if last_fail:
            break
        last_fail = True

    return differences


def call_put_differences(
    chain: ChainSnapshot,
    underlying_price: float,
    expiry: date,
) -> dict[float, float]:
    """Liquidity-truncated C - P table for one expiry.

    Strikes at or below the underlying price are walked downward, strikes
    above it upward. Entries from the lower walk come first. Non-positive
    strikes are never part of the table.
    """
    expiry_chain = restrict_to_expiry(chain, expiry)
    strikes = {key.strike for key in expiry_chain if key.strike > 0}

    below = sorted((k for k in strikes if k <= underlying_price), reverse=True)
    above = sorted(k for k in strikes if k > underlying_price)

    merged = _walk_chain(expiry_chain, below, expiry)
    merged.update(_walk_chain(expiry_chain, above, expiry))
    return merged


def filter_chain(
    chain: ChainSnapshot,
    underlying_price: float,
    expiry: date,
    risk_free_rate: float,
    years_to_expiry: float,
    min_otm_strikes: int = MIN_OTM_STRIKES,
) -> ForwardQuote:
    """Determine forward, K0 and the OTM strike set for a single expiry.

    Args:
        chain: Mid prices for all contracts of the underlying
        underlying_price: Current underlying price
        expiry: Expiration to filter for
        risk_free_rate: Continuously compounded rate for this expiry
        years_to_expiry: Time to expiry in years
        min_otm_strikes: Minimum number of OTM strikes required

    Returns:
        ForwardQuote with forward price, K0 and OTM mid prices

    Raises:
        NoAtmCandidate: If no strike has liquid call and put quotes
        NotComputable: If exp(rT) or the forward overflows
        NoForwardPrice: If F <= 0 or no liquid strike lies at or below F
        InsufficientOtmStrikes: If fewer than min_otm_strikes OTM strikes remain
    """
    expiry_chain = restrict_to_expiry(chain, expiry)
    differences = call_put_differences(expiry_chain, underlying_price, expiry)

    if not differences:
        raise NoAtmCandidate(f"{expiry}: no strike with both legs quoted")

    # First minimum in walk order wins ties
    k_star = min(differences, key=lambda k: abs(differences[k]))

    with np.errstate(over="ignore", invalid="ignore"):
        time_multiple = float(np.exp(risk_free_rate * years_to_expiry))
        forward = k_star + time_multiple * differences[k_star]
    if not (np.isfinite(time_multiple) and np.isfinite(forward)):
        raise NotComputable(f"{expiry}: forward overflow (r={risk_free_rate}, T={years_to_expiry})")

    strikes_below_f = [k for k in differences if k <= forward]
    if forward <= 0 or not strikes_below_f:
        raise NoForwardPrice(f"{expiry}: F={forward:.4f} has no liquid strike at or below it")
    k0 = max(strikes_below_f)

    otm_strikes = {
        key.strike
        for key in expiry_chain
        if key.strike in differences
        and (
            (key.right is OptionRight.CALL and key.strike >= forward)
            or (key.right is OptionRight.PUT and key.strike <= forward)
        )
    }

    otm_mid_prices: dict[float, float] = {}
    for strike in sorted(otm_strikes):
        prices = [p for key, p in expiry_chain.items() if key.strike == strike]
        otm_mid_prices[strike] = float(np.mean(prices))

    if len(otm_mid_prices) < min_otm_strikes:
        raise InsufficientOtmStrikes(
            f"{expiry}: {len(otm_mid_prices)} OTM strikes (min: {min_otm_strikes})"
        )

    return ForwardQuote(
        k_star=k_star,
        forward=forward,
        k0=k0,
        time_multiple=time_multiple,
        call_put_difference=differences,
        otm_mid_prices=otm_mid_prices,
    )
