from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from core.models import Payment


@dataclass(frozen=True)
class PaymentOutcome:
    payment: Payment
    previous_total: float
    new_total: float
    overpaid: bool


@dataclass(frozen=True)
class ContainerSummary:
    container_id: str
    project_id: str
    name: str
    budget_allocated: float
    budget_used: float
    budget_available: float
    utilization_percent: float
    over_allocated: bool
    assignment_count: int


class ContainerDrift(NamedTuple):
    container_id: str
    previous_used: float
    current_used: float


@dataclass(frozen=True)
class AssignmentProgress:
    assignment_id: str
    cost: float
    budget_realized: float
    progress_percent: float
    remaining_to_pay: float


@dataclass(frozen=True)
class CommitmentSummary:
    commitment_id: str
    principal: float
    amount_paid: float
    remaining_balance: float
    paid_ratio_percent: float
    overpaid: bool
    scheduled_payment: float | None


@dataclass(frozen=True)
class LenderExposure:
    lender_id: str
    credit_limit: float
    utilized: float
    outstanding: float
    available: float
    utilization_percent: float
    risk_level: str
    commitment_count: int


__all__ = [
    "PaymentOutcome",
    "ContainerSummary",
    "ContainerDrift",
    "AssignmentProgress",
    "CommitmentSummary",
    "LenderExposure",
]
