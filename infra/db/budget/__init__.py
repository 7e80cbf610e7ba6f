from infra.db.budget.mapper import (
    assignment_from_orm,
    assignment_to_orm,
    container_from_orm,
    container_to_orm,
)
from infra.db.budget.repository import (
    SqlAlchemyBudgetContainerRepository,
    SqlAlchemyCostAssignmentRepository,
)

__all__ = [
    "container_to_orm",
    "container_from_orm",
    "assignment_to_orm",
    "assignment_from_orm",
    "SqlAlchemyBudgetContainerRepository",
    "SqlAlchemyCostAssignmentRepository",
]
