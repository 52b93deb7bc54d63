"""Pytest configuration and fixtures."""

import pytest
from datetime import date, timedelta

from vix_fields.contracts import ContractKey, OptionRight
from vix_fields.io.rates import ConstantRateProvider


# OTM premium by distance from the 100 strike
PREMIUM_LADDER = {0: 3.0, 2: 2.0, 4: 1.2, 6: 0.6, 8: 0.3, 10: 0.1}

GOLDEN_STRIKES = [90.0, 92.0, 94.0, 96.0, 98.0, 100.0, 102.0, 104.0, 106.0, 108.0, 110.0]


def ladder_prices(strike: float, scale: float = 1.0) -> tuple[float, float]:
    """Symmetric (call, put) mids around 100 with C - P = 100 - K."""
    distance = abs(strike - 100.0)
    otm = PREMIUM_LADDER[int(distance)] * scale
    if strike <= 100.0:
        return otm + (100.0 - strike), otm
    return otm, otm + (strike - 100.0)


def add_strike(chain: dict, expiry: date, strike: float, call=None, put=None) -> None:
    """Add call and/or put mids for one strike (None leaves the leg out)."""
    if call is not None:
        chain[ContractKey(expiry, float(strike), OptionRight.CALL)] = call
    if put is not None:
        chain[ContractKey(expiry, float(strike), OptionRight.PUT)] = put


def build_ladder_chain(expiries_scales: dict) -> dict:
    """Golden ladder chain for each expiry, premiums scaled per expiry."""
    chain = {}
    for expiry, scale in expiries_scales.items():
        for strike in GOLDEN_STRIKES:
            call, put = ladder_prices(strike, scale)
            add_strike(chain, expiry, strike, call, put)
    return chain


@pytest.fixture
def snapshot_date():
    """Processing date for synthetic chains."""
    return date(2024, 1, 2)


@pytest.fixture
def near_expiry(snapshot_date):
    """Expiry 25 days out (near window)."""
    return snapshot_date + timedelta(days=25)


@pytest.fixture
def far_expiry(snapshot_date):
    """Expiry 34 days out (far window)."""
    return snapshot_date + timedelta(days=34)


@pytest.fixture
def risk_free_rate():
    return 0.02


@pytest.fixture
def rate_provider(risk_free_rate):
    return ConstantRateProvider(risk_free_rate)


@pytest.fixture
def golden_chain(near_expiry, far_expiry):
    """Chain with 5 liquid OTM strikes each side of 100 for both expiries."""
    return build_ladder_chain({near_expiry: 1.0, far_expiry: 1.1})


@pytest.fixture
def thin_chain(near_expiry, far_expiry):
    """Chain where only the 98 and 100 strikes survive liquidity truncation."""
    chain = {}
    for expiry in (near_expiry, far_expiry):
        add_strike(chain, expiry, 100.0, 3.0, 3.0)
        add_strike(chain, expiry, 98.0, 4.0, 2.0)
        add_strike(chain, expiry, 96.0, 0.0, 1.2)   # zero call
        add_strike(chain, expiry, 94.0, 6.6)        # no put
        add_strike(chain, expiry, 92.0, 8.3, 0.3)   # beyond the cutoff
        add_strike(chain, expiry, 102.0, 2.0)       # no put
        add_strike(chain, expiry, 104.0, 1.2, 0.0)  # zero put
        add_strike(chain, expiry, 106.0, 0.6, 6.6)  # beyond the cutoff
    return chain


@pytest.fixture
def zero_strike_chain(near_expiry, far_expiry):
    """Ladder far expiry plus a near expiry quoting a two-sided 0 strike."""
    chain = build_ladder_chain({far_expiry: 1.1})
    add_strike(chain, near_expiry, 0.0, 5.0, 0.5)
    add_strike(chain, near_expiry, 10.0, 0.5, 5.5)
    add_strike(chain, near_expiry, 20.0, 0.1, 15.0)
    return chain
