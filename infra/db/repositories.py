# infra/db/repositories.py
from infra.db.budget.repository import (
    SqlAlchemyBudgetContainerRepository,
    SqlAlchemyCostAssignmentRepository,
)
from infra.db.commitment.repository import SqlAlchemyCommitmentRepository
from infra.db.payment.repository import SqlAlchemyPaymentRepository

__all__ = [
    "SqlAlchemyCommitmentRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyBudgetContainerRepository",
    "SqlAlchemyCostAssignmentRepository",
]
