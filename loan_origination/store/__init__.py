"""Loan storage."""

from loan_origination.store.base import LoanRepository
from loan_origination.store.memory import InMemoryLoanStore

__all__ = ["InMemoryLoanStore", "LoanRepository"]
