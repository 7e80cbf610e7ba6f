from .budget import BudgetService
from .commitment import CommitmentService
from .ledger import LedgerReconciler

__all__ = [
    "CommitmentService",
    "BudgetService",
    "LedgerReconciler",
]
