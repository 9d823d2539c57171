"""Concurrent end-to-end loan workflow simulation."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from loan_origination.config import SimulationConfig
from loan_origination.exceptions import LoanOriginationError
from loan_origination.generators.loan import LoanRequestGenerator
from loan_origination.models.loan import (
    Approval,
    Disbursement,
    Investment,
    LoanApplication,
)
from loan_origination.service import LoanService

logger = logging.getLogger(__name__)


@dataclass
class LoanPlan:
    """Pre-generated requests for one loan's full lifecycle."""

    application: LoanApplication
    approval: Approval
    investments: list[Investment]
    disbursement: Disbursement


@dataclass
class WorkflowResult:
    """Outcome of a simulation run."""

    loan_ids: list[int] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    states: dict[str, int] = field(default_factory=dict)

    def summary(self) -> dict[str, Any]:
        return {
            "loans": len(self.loan_ids),
            "failures": len(self.failures),
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "states": dict(self.states),
        }


class LoanWorkflowScenario:
    """Drive many loans through create -> approve -> invest -> disburse.

    Requests are generated up front on the calling thread (Faker is not
    thread-safe); each loan's lifecycle then runs as one task on a thread
    pool against the shared service. A loan's steps run in order inside
    its task, so different loans contend on the store but a single loan
    is never mutated by two tasks at once.
    """

    def __init__(
        self,
        service: LoanService,
        num_loans: int = 100,
        max_workers: int = 8,
        max_investors_per_loan: int = 5,
        seed: int | None = None,
        *,
        config: SimulationConfig | None = None,
    ) -> None:
        """Initialize workflow scenario.

        Parameters
        ----------
        service : LoanService
            Service under load.
        num_loans : int
            Number of loans to run through the workflow.
        max_workers : int
            Thread pool size.
        max_investors_per_loan : int
            Upper bound on investments per loan.
        seed : int | None
            Random seed for reproducibility.
        config : SimulationConfig | None
            Optional simulation configuration. If provided, overrides the
            keyword arguments above.
        """
        if config is not None:
            num_loans = config.num_loans
            max_workers = config.max_workers
            max_investors_per_loan = config.max_investors_per_loan
            seed = config.seed

        self.service = service
        self.num_loans = num_loans
        self.max_workers = max_workers
        self.generator = LoanRequestGenerator(seed=seed, max_investors=max_investors_per_loan)

    def plan(self) -> list[LoanPlan]:
        """Generate requests for every loan."""
        plans = []
        for _ in range(self.num_loans):
            application = self.generator.application()
            plans.append(
                LoanPlan(
                    application=application,
                    approval=self.generator.approval(),
                    investments=self.generator.investments(application.principal),
                    disbursement=self.generator.disbursement(),
                )
            )
        return plans

    def run(self, cancel: threading.Event | None = None) -> WorkflowResult:
        """Run the scenario and return its result."""
        plans = self.plan()
        result = WorkflowResult()
        logger.info("Running %d loans on %d workers", len(plans), self.max_workers)

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._run_one, loan_plan, cancel): i
                for i, loan_plan in enumerate(plans)
            }
            for future in as_completed(futures):
                try:
                    result.loan_ids.append(future.result())
                except LoanOriginationError as exc:
                    logger.warning("Loan plan %d failed: %s", futures[future], exc)
                    result.failures.append(str(exc))
        result.elapsed_seconds = time.perf_counter() - start

        for loan in self.service.find_all():
            result.states[loan.state.value] = result.states.get(loan.state.value, 0) + 1

        logger.info(
            "Workflow complete: loans=%d, failures=%d, elapsed=%.2fs",
            len(result.loan_ids),
            len(result.failures),
            result.elapsed_seconds,
        )
        return result

    def _run_one(self, loan_plan: LoanPlan, cancel: threading.Event | None) -> int:
        loan = self.service.create_loan(loan_plan.application, cancel=cancel)
        self.service.approve_loan(loan.loan_id, loan_plan.approval, cancel=cancel)
        for investment in loan_plan.investments:
            self.service.add_investment(loan.loan_id, investment, cancel=cancel)
        self.service.disburse_loan(loan.loan_id, loan_plan.disbursement, cancel=cancel)
        return loan.loan_id
