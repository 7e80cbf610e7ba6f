from __future__ import annotations

from core.models import BudgetContainer, ContractStatus, CostAssignment, PhaseStatus
from infra.db.models import BudgetContainerORM, CostAssignmentORM


def container_to_orm(container: BudgetContainer) -> BudgetContainerORM:
    return BudgetContainerORM(
        id=container.id,
        project_id=container.project_id,
        name=container.name,
        phase_number=container.phase_number,
        status=container.status,
        start_date=container.start_date,
        end_date=container.end_date,
        budget_allocated=container.budget_allocated,
        budget_used=container.budget_used,
        version=getattr(container, "version", 1),
    )


def container_from_orm(obj: BudgetContainerORM) -> BudgetContainer:
    return BudgetContainer(
        id=obj.id,
        project_id=obj.project_id,
        name=obj.name,
        phase_number=obj.phase_number or 1,
        status=PhaseStatus(obj.status) if obj.status else PhaseStatus.PLANNING,
        start_date=obj.start_date,
        end_date=obj.end_date,
        budget_allocated=float(obj.budget_allocated or 0.0),
        budget_used=float(obj.budget_used or 0.0),
        version=getattr(obj, "version", 1),
    )


def assignment_to_orm(assignment: CostAssignment) -> CostAssignmentORM:
    return CostAssignmentORM(
        id=assignment.id,
        project_id=assignment.project_id,
        container_id=assignment.container_id,
        assignee_name=assignment.assignee_name,
        description=assignment.description or "",
        status=assignment.status,
        deadline=assignment.deadline,
        cost=assignment.cost,
        budget_realized=assignment.budget_realized,
        version=getattr(assignment, "version", 1),
    )


def assignment_from_orm(obj: CostAssignmentORM) -> CostAssignment:
    return CostAssignment(
        id=obj.id,
        project_id=obj.project_id,
        container_id=obj.container_id,
        assignee_name=obj.assignee_name,
        description=obj.description or "",
        status=ContractStatus(obj.status) if obj.status else ContractStatus.ACTIVE,
        deadline=obj.deadline,
        cost=float(obj.cost or 0.0),
        budget_realized=float(obj.budget_realized or 0.0),
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "container_to_orm",
    "container_from_orm",
    "assignment_to_orm",
    "assignment_from_orm",
]
