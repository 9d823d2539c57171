"""Loan aggregate and its state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from loan_origination.exceptions import (
    InvalidStateTransitionError,
    InvestmentExceedsPrincipalError,
)
from loan_origination.models.enums import LoanState
from loan_origination.sinks.serialization import dataclass_to_dict


def _to_decimal(value: Any) -> Decimal:
    """Coerce ints, floats and numeric strings to Decimal via their text form."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class Approval:
    """Field validation record attached when a loan is approved."""

    validator_id: int
    proof_url: str
    approved_at: datetime


@dataclass
class Investment:
    """A single investor's contribution toward principal."""

    investor_id: int
    amount: Decimal

    def __post_init__(self) -> None:
        self.amount = _to_decimal(self.amount)


@dataclass
class Disbursement:
    """Release of funds to the borrower."""

    officer_id: int
    agreement_url: str
    disbursed_at: datetime


@dataclass
class LoanApplication:
    """Input for creating a loan."""

    borrower_id: int
    principal: Decimal
    rate: Decimal  # Borrower interest rate
    roi: Decimal  # Return on investment paid to investors
    agreement_link: str

    def __post_init__(self) -> None:
        self.principal = _to_decimal(self.principal)
        self.rate = _to_decimal(self.rate)
        self.roi = _to_decimal(self.roi)


@dataclass
class LoanAgreement:
    """Payload published when a loan becomes fully invested."""

    loan_id: int


@dataclass
class Loan:
    """Loan aggregate root.

    ``loan_id`` is 0 until the store assigns one. ``state`` only moves
    forward one step at a time; see :meth:`can_transition_to`.
    """

    borrower_id: int
    principal: Decimal
    rate: Decimal
    roi: Decimal
    agreement_link: str
    loan_id: int = 0
    state: LoanState = LoanState.PROPOSED
    approval: Approval | None = None
    investments: list[Investment] = field(default_factory=list)
    disbursement: Disbursement | None = None

    def __post_init__(self) -> None:
        self.principal = _to_decimal(self.principal)
        self.rate = _to_decimal(self.rate)
        self.roi = _to_decimal(self.roi)

    @classmethod
    def from_application(cls, application: LoanApplication) -> "Loan":
        """Build a proposed loan from a creation request."""
        return cls(
            borrower_id=application.borrower_id,
            principal=application.principal,
            rate=application.rate,
            roi=application.roi,
            agreement_link=application.agreement_link,
            state=LoanState.PROPOSED,
        )

    @property
    def total_invested(self) -> Decimal:
        """Sum of all investment amounts."""
        return sum((inv.amount for inv in self.investments), Decimal("0"))

    @property
    def remaining_principal(self) -> Decimal:
        """Amount still open for investment."""
        return self.principal - self.total_invested

    def can_transition_to(self, target: LoanState) -> bool:
        """Return True iff ``target`` is exactly one step after the current state."""
        return target.order - self.state.order == 1

    def approve(self, approval: Approval) -> None:
        """Move PROPOSED -> APPROVED and record the approval."""
        if not self.can_transition_to(LoanState.APPROVED):
            raise InvalidStateTransitionError("can only approve when loan is proposed")
        self.state = LoanState.APPROVED
        self.approval = approval

    def add_investment(self, investment: Investment) -> None:
        """Append an investment; the loan becomes INVESTED once principal is met.

        The total is compared with exact equality, and an investment that
        would overshoot principal is rejected rather than clipped. Nothing is
        appended when either check fails.
        """
        total = self.total_invested + investment.amount
        if total > self.principal:
            raise InvestmentExceedsPrincipalError("total investments exceed principal")

        if not self.can_transition_to(LoanState.INVESTED):
            raise InvalidStateTransitionError("can only invest when loan is approved")

        self.investments.append(investment)
        if total == self.principal:
            self.state = LoanState.INVESTED

    def disburse(self, disbursement: Disbursement) -> None:
        """Move INVESTED -> DISBURSED and record the disbursement."""
        if not self.can_transition_to(LoanState.DISBURSED):
            raise InvalidStateTransitionError("can only disburse when loan is invested")
        self.state = LoanState.DISBURSED
        self.disbursement = disbursement

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return dataclass_to_dict(self)
