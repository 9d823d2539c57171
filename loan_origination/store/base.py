"""Loan repository interface."""

from abc import ABC, abstractmethod

from loan_origination.models.loan import Loan


class LoanRepository(ABC):
    """Keyed loan storage. Implementations must be safe for concurrent use."""

    @abstractmethod
    def save(self, loan: Loan) -> None:
        """Insert a new loan, assigning ``loan.loan_id`` first if it is unset.

        Raises ``EntityAlreadyExistsError`` if the id is already stored.
        """

    @abstractmethod
    def find_by_id(self, loan_id: int) -> Loan:
        """Return the loan stored under ``loan_id`` or raise ``EntityNotFoundError``."""

    @abstractmethod
    def find_all(self) -> list[Loan]:
        """Return a snapshot of every stored loan, in no particular order."""

    @abstractmethod
    def update(self, loan: Loan) -> None:
        """Replace the stored loan or raise ``EntityNotFoundError``."""
