"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from loan_origination.ids import SequentialIdGenerator
from loan_origination.models import (
    Approval,
    Disbursement,
    Investment,
    Loan,
    LoanApplication,
    LoanState,
)
from loan_origination.service import LoanService
from loan_origination.sinks.memory import InMemoryPublisher
from loan_origination.store.memory import InMemoryLoanStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def application() -> LoanApplication:
    """Sample loan application for 5000."""
    return LoanApplication(
        borrower_id=1001,
        principal=Decimal("5000"),
        rate=Decimal("5"),
        roi=Decimal("6"),
        agreement_link="https://example.com/agreements/1001.pdf",
    )


@pytest.fixture
def approval(now: datetime) -> Approval:
    return Approval(validator_id=1, proof_url="https://example.com/proof.jpg", approved_at=now)


@pytest.fixture
def disbursement(now: datetime) -> Disbursement:
    return Disbursement(
        officer_id=1, agreement_url="https://example.com/signed/1001.pdf", disbursed_at=now
    )


@pytest.fixture
def make_loan():
    """Factory for loans in an arbitrary state."""

    def _make(
        state: LoanState = LoanState.PROPOSED,
        principal: str = "5000",
        investments: list[str] | None = None,
        loan_id: int = 0,
    ) -> Loan:
        return Loan(
            loan_id=loan_id,
            borrower_id=1001,
            principal=Decimal(principal),
            rate=Decimal("5"),
            roi=Decimal("6"),
            agreement_link="https://example.com/agreements/1001.pdf",
            state=state,
            investments=[
                Investment(investor_id=i + 1, amount=Decimal(amount))
                for i, amount in enumerate(investments or [])
            ],
        )

    return _make


@pytest.fixture
def store() -> InMemoryLoanStore:
    """Fresh store with sequential ids."""
    return InMemoryLoanStore(SequentialIdGenerator())


@pytest.fixture
def publisher() -> InMemoryPublisher:
    return InMemoryPublisher()


@pytest.fixture
def service(store: InMemoryLoanStore, publisher: InMemoryPublisher) -> LoanService:
    return LoanService(store, publisher)
