"""Loan origination workflow: proposal, approval, investment and disbursement."""

from loan_origination.bootstrap import build_service
from loan_origination.service import LoanService

__version__ = "0.1.0"

__all__ = ["LoanService", "__version__", "build_service"]
