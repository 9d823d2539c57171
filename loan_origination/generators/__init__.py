"""Synthetic request generators."""

from loan_origination.generators.loan import LoanRequestGenerator

__all__ = ["LoanRequestGenerator"]
