from core.services.budget.service import BudgetService

__all__ = ["BudgetService"]
