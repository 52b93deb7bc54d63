"""Expiry selection for VIX computation.

Per the Cboe bracket method, select two expirations around 30 days:
- near_exp: latest expiry with DTE in [23, 30]
- far_exp: earliest expiry with DTE in [31, 37]

There is no fallback when either window is empty; the index is simply not
computed for that observation.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from vix_fields.config import FAR_WINDOW_DAYS, NEAR_WINDOW_DAYS
from vix_fields.errors import NoExpiryBracket


@dataclass(frozen=True)
class ExpiryBracket:
    """Near and far expirations straddling the 30-day target."""

    # Near-term expiration (DTE 23..30)
    near_exp: date
    near_dte: int

    # Far-term expiration (DTE 31..37)
    far_exp: date
    far_dte: int


def _in_window(expiry: date, snapshot_date: date, window: tuple[int, int]) -> bool:
    lo, hi = window
    return snapshot_date + timedelta(days=lo) <= expiry <= snapshot_date + timedelta(days=hi)


def select_expiry_bracket(
    snapshot_date: date,
    expiries: Iterable[date],
    near_window: tuple[int, int] = NEAR_WINDOW_DAYS,
    far_window: tuple[int, int] = FAR_WINDOW_DAYS,
) -> ExpiryBracket:
    """Select near-term and far-term expirations for VIX computation.

    Args:
        snapshot_date: Date of the chain snapshot
        expiries: Available expirations (duplicates are fine)
        near_window: Inclusive DTE range for the near expiry
        far_window: Inclusive DTE range for the far expiry

    Returns:
        ExpiryBracket with the tightest bracket around the target

    Raises:
        NoExpiryBracket: If either window has no candidate
    """
    unique = set(expiries)
    near_candidates = [e for e in unique if _in_window(e, snapshot_date, near_window)]
    far_candidates = [e for e in unique if _in_window(e, snapshot_date, far_window)]

    if not near_candidates or not far_candidates:
        raise NoExpiryBracket(
            f"{snapshot_date}: {len(near_candidates)} near and "
            f"{len(far_candidates)} far candidates"
        )

    near_exp = max(near_candidates)
    far_exp = min(far_candidates)

    return ExpiryBracket(
        near_exp=near_exp,
        near_dte=(near_exp - snapshot_date).days,
        far_exp=far_exp,
        far_dte=(far_exp - snapshot_date).days,
    )
