"""Enumeration types for the loan domain."""

from enum import Enum


class LoanState(str, Enum):
    PROPOSED = "PROPOSED"
    APPROVED = "APPROVED"
    INVESTED = "INVESTED"
    DISBURSED = "DISBURSED"

    @property
    def order(self) -> int:
        """Rank of the state in the forward-only workflow (1-4)."""
        return _STATE_ORDER[self]


_STATE_ORDER = {
    LoanState.PROPOSED: 1,
    LoanState.APPROVED: 2,
    LoanState.INVESTED: 3,
    LoanState.DISBURSED: 4,
}
