from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.interfaces import BudgetContainerRepository, CostAssignmentRepository
from core.models import BudgetContainer, CostAssignment
from infra.db.budget.mapper import (
    assignment_from_orm,
    assignment_to_orm,
    container_from_orm,
    container_to_orm,
)
from infra.db.models import BudgetContainerORM, CostAssignmentORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyBudgetContainerRepository(BudgetContainerRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, container: BudgetContainer) -> None:
        self.session.add(container_to_orm(container))

    def update(self, container: BudgetContainer) -> None:
        container.version = update_with_version_check(
            self.session,
            BudgetContainerORM,
            container.id,
            getattr(container, "version", 1),
            {
                "project_id": container.project_id,
                "name": container.name,
                "phase_number": container.phase_number,
                "status": container.status,
                "start_date": container.start_date,
                "end_date": container.end_date,
                "budget_allocated": container.budget_allocated,
                "budget_used": container.budget_used,
            },
            not_found_message="Budget phase not found.",
            stale_message="Budget phase was updated by another user.",
        )

    def delete(self, container_id: str) -> None:
        self.session.query(BudgetContainerORM).filter_by(id=container_id).delete()

    def get(self, container_id: str) -> Optional[BudgetContainer]:
        obj = self.session.get(BudgetContainerORM, container_id)
        return container_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[BudgetContainer]:
        stmt = (
            select(BudgetContainerORM)
            .where(BudgetContainerORM.project_id == project_id)
            .order_by(BudgetContainerORM.phase_number, BudgetContainerORM.name)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [container_from_orm(row) for row in rows]

    def list_all(self) -> List[BudgetContainer]:
        stmt = select(BudgetContainerORM).order_by(
            BudgetContainerORM.project_id, BudgetContainerORM.phase_number
        )
        rows = self.session.execute(stmt).scalars().all()
        return [container_from_orm(row) for row in rows]


class SqlAlchemyCostAssignmentRepository(CostAssignmentRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, assignment: CostAssignment) -> None:
        self.session.add(assignment_to_orm(assignment))

    def update(self, assignment: CostAssignment) -> None:
        assignment.version = update_with_version_check(
            self.session,
            CostAssignmentORM,
            assignment.id,
            getattr(assignment, "version", 1),
            {
                "project_id": assignment.project_id,
                "container_id": assignment.container_id,
                "assignee_name": assignment.assignee_name,
                "description": assignment.description or "",
                "status": assignment.status,
                "deadline": assignment.deadline,
                "cost": assignment.cost,
                "budget_realized": assignment.budget_realized,
            },
            not_found_message="Cost assignment not found.",
            stale_message="Cost assignment was updated by another user.",
        )

    def delete(self, assignment_id: str) -> None:
        self.session.query(CostAssignmentORM).filter_by(id=assignment_id).delete()

    def get(self, assignment_id: str) -> Optional[CostAssignment]:
        obj = self.session.get(CostAssignmentORM, assignment_id)
        return assignment_from_orm(obj) if obj else None

    def list_by_container(self, container_id: str) -> List[CostAssignment]:
        stmt = select(CostAssignmentORM).where(CostAssignmentORM.container_id == container_id)
        rows = self.session.execute(stmt).scalars().all()
        return [assignment_from_orm(row) for row in rows]

    def list_by_project(self, project_id: str) -> List[CostAssignment]:
        stmt = (
            select(CostAssignmentORM)
            .where(CostAssignmentORM.project_id == project_id)
            .order_by(CostAssignmentORM.assignee_name)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [assignment_from_orm(row) for row in rows]

    def list_all(self) -> List[CostAssignment]:
        rows = self.session.execute(select(CostAssignmentORM)).scalars().all()
        return [assignment_from_orm(row) for row in rows]

    def clear_container(self, container_id: str) -> None:
        self.session.execute(
            update(CostAssignmentORM)
            .where(CostAssignmentORM.container_id == container_id)
            .values(container_id=None, version=CostAssignmentORM.version + 1)
            .execution_options(synchronize_session="fetch")
        )


__all__ = ["SqlAlchemyBudgetContainerRepository", "SqlAlchemyCostAssignmentRepository"]
