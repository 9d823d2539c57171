"""Generators for loan workflow requests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from loan_origination.generators.base import BaseGenerator
from loan_origination.models.loan import (
    Approval,
    Disbursement,
    Investment,
    LoanApplication,
)

CENT = Decimal("0.01")

# Principal bounds, in whole currency units
MIN_PRINCIPAL = 1_000
MAX_PRINCIPAL = 100_000


class LoanRequestGenerator(BaseGenerator):
    """Generate the requests that move a loan through its lifecycle."""

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        max_investors: int = 5,
    ) -> None:
        super().__init__(seed=seed, locale=locale)
        self.max_investors = max_investors

    def application(self, borrower_id: int | None = None) -> LoanApplication:
        """Generate a loan application."""
        principal = Decimal(self.random.randint(MIN_PRINCIPAL // 100, MAX_PRINCIPAL // 100) * 100)
        rate = Decimal(str(round(self.random.uniform(6.0, 24.0), 2)))
        # Investors earn less than the borrower pays
        roi = (rate * Decimal(str(round(self.random.uniform(0.5, 0.9), 2)))).quantize(CENT)
        return LoanApplication(
            borrower_id=borrower_id or self.random.randint(1, 10_000_000),
            principal=principal,
            rate=rate,
            roi=roi,
            agreement_link=f"https://{self.fake.domain_name()}/agreements/{self.fake.uuid4()}.pdf",
        )

    def approval(self) -> Approval:
        """Generate an approval record with a field-visit proof picture."""
        return Approval(
            validator_id=self.random.randint(1, 500),
            proof_url=self.fake.image_url(),
            approved_at=self._recent(),
        )

    def investments(self, principal: Decimal) -> list[Investment]:
        """Split ``principal`` into investments that sum to it exactly.

        Amounts are whole cents; the number of investors is between 1 and
        ``max_investors``.
        """
        cents = int((principal / CENT).to_integral_value())
        count = min(self.random.randint(1, self.max_investors), cents)
        cuts = sorted(self.random.sample(range(1, cents), count - 1)) if count > 1 else []
        bounds = [0, *cuts, cents]

        return [
            Investment(
                investor_id=self.random.randint(1, 1_000_000),
                amount=Decimal(bounds[i + 1] - bounds[i]) * CENT,
            )
            for i in range(count)
        ]

    def disbursement(self) -> Disbursement:
        """Generate a disbursement record."""
        return Disbursement(
            officer_id=self.random.randint(1, 200),
            agreement_url=f"https://{self.fake.domain_name()}/signed/{self.fake.uuid4()}.pdf",
            disbursed_at=self._recent(),
        )

    def _recent(self) -> datetime:
        seconds = self.random.randint(0, 7 * 24 * 3600)
        return datetime.now(timezone.utc) - timedelta(seconds=seconds)
