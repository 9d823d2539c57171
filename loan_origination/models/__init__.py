"""Domain models for loan origination."""

from loan_origination.models.enums import LoanState
from loan_origination.models.loan import (
    Approval,
    Disbursement,
    Investment,
    Loan,
    LoanAgreement,
    LoanApplication,
)

__all__ = [
    "Approval",
    "Disbursement",
    "Investment",
    "Loan",
    "LoanAgreement",
    "LoanApplication",
    "LoanState",
]
