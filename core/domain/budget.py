from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import ContractStatus, PhaseStatus
from core.domain.identifiers import generate_id


@dataclass
class BudgetContainer:
    """A project phase holding an allocated budget.

    ``budget_used`` is derived from the costs of the assignments charged to the
    phase and is rewritten only by a full recompute.
    """

    id: str
    project_id: str
    name: str
    budget_allocated: float = 0.0
    budget_used: float = 0.0
    phase_number: int = 1
    status: PhaseStatus = PhaseStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    version: int = 1

    @property
    def budget_available(self) -> float:
        return self.budget_allocated - self.budget_used

    @property
    def is_over_allocated(self) -> bool:
        return self.budget_used > self.budget_allocated

    @staticmethod
    def create(project_id: str, name: str, budget_allocated: float = 0.0, **extra) -> "BudgetContainer":
        return BudgetContainer(
            id=generate_id(),
            project_id=project_id,
            name=name,
            budget_allocated=budget_allocated,
            **extra,
        )


@dataclass
class CostAssignment:
    id: str
    project_id: str
    assignee_name: str
    cost: float
    container_id: Optional[str] = None
    description: str = ""
    budget_realized: float = 0.0
    status: ContractStatus = ContractStatus.ACTIVE
    deadline: Optional[date] = None
    version: int = 1

    @staticmethod
    def create(project_id: str, assignee_name: str, cost: float, **extra) -> "CostAssignment":
        return CostAssignment(
            id=generate_id(),
            project_id=project_id,
            assignee_name=assignee_name,
            cost=cost,
            **extra,
        )


__all__ = ["BudgetContainer", "CostAssignment"]
