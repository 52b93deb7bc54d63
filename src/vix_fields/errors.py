"""Soft-failure taxonomy.

Every error here is local to one (underlying, date) observation. Callers
turn them into a missing value plus a skip reason and carry on with the
next observation.
"""


class VixFieldsError(Exception):
    """Base class for observation-level failures."""

    code = "VIX_FIELDS_ERROR"

    def __init__(self, message: str, code: str = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(f"{self.code}: {message}")


class NoExpiryBracket(VixFieldsError):
    """No expiry in the near window or none in the far window."""

    code = "NO_EXPIRY_BRACKET"


class NoAtmCandidate(VixFieldsError):
    """No strike with liquid call and put quotes survived the chain walk."""

    code = "NO_ATM_CANDIDATE"


class NoForwardPrice(VixFieldsError):
    """Forward price is non-positive or lies below every usable strike."""

    code = "NO_FORWARD_PRICE"


class InsufficientOtmStrikes(VixFieldsError):
    """Too few out-of-the-money strikes to approximate the variance integral."""

    code = "INSUFFICIENT_OTM_STRIKES"


class NotComputable(VixFieldsError):
    """Arithmetic failure: degenerate interpolation, overflow, negative root."""

    code = "NOT_COMPUTABLE"


class UndefinedRank(VixFieldsError):
    """Rank over a window whose max equals its min."""

    code = "UNDEFINED_RANK"
