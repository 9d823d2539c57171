"""Loan orchestration: load, mutate, persist, notify."""

import logging
import threading
from typing import Any

from loan_origination.exceptions import (
    InvalidEntityStateError,
    LoanOperationError,
    OperationCancelledError,
)
from loan_origination.models.enums import LoanState
from loan_origination.models.loan import (
    Approval,
    Disbursement,
    Investment,
    Loan,
    LoanAgreement,
    LoanApplication,
)
from loan_origination.sinks.base import EventPublisher
from loan_origination.sinks.serialization import to_json_bytes
from loan_origination.store.base import LoanRepository

logger = logging.getLogger(__name__)

LOAN_INVESTED_TOPIC = "loan_invested"


class LoanService:
    """Run each loan use case as a short load -> mutate -> persist sequence.

    The store is locked only for each individual read or write, so two
    concurrent operations on the same loan can both read the same
    snapshot and the later :meth:`LoanRepository.update` wins.

    Every operation takes an optional ``cancel`` event; if it is already
    set on entry the operation raises ``OperationCancelledError`` before
    touching the store.

    Parameters
    ----------
    repository : LoanRepository
        Loan storage.
    publisher : EventPublisher
        Notification sink for funded loans.
    loan_invested_topic : str
        Topic used when a loan becomes fully invested.
    """

    def __init__(
        self,
        repository: LoanRepository,
        publisher: EventPublisher,
        loan_invested_topic: str = LOAN_INVESTED_TOPIC,
    ) -> None:
        self.repository = repository
        self.publisher = publisher
        self.loan_invested_topic = loan_invested_topic

    def create_loan(
        self, application: LoanApplication, cancel: threading.Event | None = None
    ) -> Loan:
        """Create a proposed loan and store it under a fresh id."""
        _check_cancelled(cancel, "create loan")
        loan = Loan.from_application(application)
        self.repository.save(loan)
        logger.info(
            "Created loan %d for borrower %d",
            loan.loan_id,
            loan.borrower_id,
            extra=_context(loan),
        )
        return loan

    def approve_loan(
        self, loan_id: int, approval: Approval, cancel: threading.Event | None = None
    ) -> Loan:
        _check_cancelled(cancel, "approve loan")
        loan = self.repository.find_by_id(loan_id)

        try:
            loan.approve(approval)
        except InvalidEntityStateError as exc:
            logger.warning("Loan %d: approval rejected: %s", loan_id, exc, extra=_context(loan))
            raise LoanOperationError("approval failed", exc) from exc

        self.repository.update(loan)
        logger.info(
            "Loan %d approved by validator %d", loan_id, approval.validator_id, extra=_context(loan)
        )
        return loan

    def add_investment(
        self, loan_id: int, investment: Investment, cancel: threading.Event | None = None
    ) -> Loan:
        """Record an investment, publishing a notification once fully funded.

        When the investment completes the principal, the agreement is
        published before the loan is persisted; a publish failure aborts
        the operation and the stored loan keeps its previous state.
        """
        _check_cancelled(cancel, "add investment")
        loan = self.repository.find_by_id(loan_id)

        try:
            loan.add_investment(investment)
        except InvalidEntityStateError as exc:
            logger.warning("Loan %d: investment rejected: %s", loan_id, exc, extra=_context(loan))
            raise LoanOperationError("investment failed", exc) from exc

        if loan.state == LoanState.INVESTED:
            self._publish_invested(loan)

        self.repository.update(loan)
        logger.info(
            "Loan %d: investor %d added %s (%s/%s)",
            loan_id,
            investment.investor_id,
            investment.amount,
            loan.total_invested,
            loan.principal,
            extra=_context(loan),
        )
        return loan

    def disburse_loan(
        self, loan_id: int, disbursement: Disbursement, cancel: threading.Event | None = None
    ) -> Loan:
        _check_cancelled(cancel, "disburse loan")
        loan = self.repository.find_by_id(loan_id)

        try:
            loan.disburse(disbursement)
        except InvalidEntityStateError as exc:
            logger.warning("Loan %d: disbursement rejected: %s", loan_id, exc, extra=_context(loan))
            raise LoanOperationError("disburse failed", exc) from exc

        self.repository.update(loan)
        logger.info(
            "Loan %d disbursed by officer %d", loan_id, disbursement.officer_id, extra=_context(loan)
        )
        return loan

    def find_by_id(self, loan_id: int, cancel: threading.Event | None = None) -> Loan:
        _check_cancelled(cancel, "find loan")
        return self.repository.find_by_id(loan_id)

    def find_all(self, cancel: threading.Event | None = None) -> list[Loan]:
        _check_cancelled(cancel, "list loans")
        return self.repository.find_all()

    def _publish_invested(self, loan: Loan) -> None:
        try:
            payload = to_json_bytes(LoanAgreement(loan_id=loan.loan_id))
        except (TypeError, ValueError) as exc:
            raise LoanOperationError("marshal agreement failed", exc) from exc

        try:
            self.publisher.publish(self.loan_invested_topic, payload, key=str(loan.loan_id))
        except Exception as exc:
            logger.error(
                "Loan %d: publish to %s failed: %s",
                loan.loan_id,
                self.loan_invested_topic,
                exc,
                extra={**_context(loan), "topic": self.loan_invested_topic},
            )
            raise LoanOperationError("publish loan invested failed", exc) from exc


def _context(loan: Loan) -> dict[str, Any]:
    return {"loan_id": loan.loan_id, "state": loan.state.value}


def _check_cancelled(cancel: threading.Event | None, operation: str) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError(f"{operation} cancelled")
