"""In-memory loan store guarded by a reader/writer lock."""

import copy
import logging

from loan_origination.exceptions import EntityAlreadyExistsError, EntityNotFoundError
from loan_origination.ids import IdGenerator
from loan_origination.models.loan import Loan
from loan_origination.store.base import LoanRepository
from loan_origination.store.lock import ReadWriteLock

logger = logging.getLogger(__name__)


class InMemoryLoanStore(LoanRepository):
    """Process-local loan store.

    The store owns private copies of every loan: values are copied on the
    way in and on the way out, so changes a caller makes to a returned loan
    are only visible to others once passed to :meth:`update`. The lock is
    held for a single dict access, never across a caller's
    read-modify-write sequence.

    Parameters
    ----------
    id_generator : IdGenerator
        Source of ids for loans saved without one.
    """

    def __init__(self, id_generator: IdGenerator) -> None:
        self._id_generator = id_generator
        self._loans: dict[int, Loan] = {}
        self._lock = ReadWriteLock()

    def save(self, loan: Loan) -> None:
        """Add a loan to the store."""
        with self._lock.write_locked():
            if not loan.loan_id:
                loan.loan_id = self._id_generator.next_id()

            if loan.loan_id in self._loans:
                raise EntityAlreadyExistsError(f"Loan {loan.loan_id} already exists")

            self._loans[loan.loan_id] = copy.deepcopy(loan)
        logger.debug("Saved loan %d", loan.loan_id)

    def find_by_id(self, loan_id: int) -> Loan:
        """Get a loan by id."""
        with self._lock.read_locked():
            loan = self._loans.get(loan_id)
            if loan is None:
                raise EntityNotFoundError(f"Loan {loan_id} not found")
            return copy.deepcopy(loan)

    def find_all(self) -> list[Loan]:
        """Get all loans."""
        with self._lock.read_locked():
            return [copy.deepcopy(loan) for loan in self._loans.values()]

    def update(self, loan: Loan) -> None:
        """Replace a stored loan."""
        with self._lock.write_locked():
            if loan.loan_id not in self._loans:
                raise EntityNotFoundError(f"Loan {loan.loan_id} not found")
            self._loans[loan.loan_id] = copy.deepcopy(loan)
        logger.debug("Updated loan %d (%s)", loan.loan_id, loan.state.value)

    def count(self) -> int:
        """Return the number of stored loans."""
        with self._lock.read_locked():
            return len(self._loans)

    def __len__(self) -> int:
        return self.count()
