"""Option contract identity and chain snapshot helpers."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class OptionRight(Enum):
    """Option right."""

    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class ContractKey:
    """Identity of a single option contract."""

    expiry: date
    strike: float
    right: OptionRight


# Mid price per contract, for one underlying on one date
ChainSnapshot = dict[ContractKey, float]


def list_expiries(chain: ChainSnapshot) -> list[date]:
    """Sorted distinct expiries present in a chain."""
    return sorted({key.expiry for key in chain})


def restrict_to_expiry(chain: ChainSnapshot, expiry: date) -> ChainSnapshot:
    """Contracts of a chain expiring on ``expiry``."""
    return {key: price for key, price in chain.items() if key.expiry == expiry}
