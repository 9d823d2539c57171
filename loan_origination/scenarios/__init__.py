"""Scenarios that exercise the loan service end to end."""

from loan_origination.scenarios.loan_workflow import (
    LoanPlan,
    LoanWorkflowScenario,
    WorkflowResult,
)

__all__ = ["LoanPlan", "LoanWorkflowScenario", "WorkflowResult"]
