# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from core.models import BudgetContainer, Commitment, CostAssignment, Payment


class CommitmentRepository(ABC):
    @abstractmethod
    def add(self, commitment: Commitment) -> None: ...
    @abstractmethod
    def update(self, commitment: Commitment) -> None: ...
    @abstractmethod
    def delete(self, commitment_id: str) -> None: ...
    @abstractmethod
    def get(self, commitment_id: str) -> Optional[Commitment]: ...
    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Commitment]: ...
    @abstractmethod
    def list_by_lender(self, lender_id: str) -> List[Commitment]: ...


class PaymentRepository(ABC):
    @abstractmethod
    def add(self, payment: Payment) -> None: ...
    @abstractmethod
    def update(self, payment: Payment) -> None: ...
    @abstractmethod
    def delete(self, payment_id: str) -> None: ...
    @abstractmethod
    def get(self, payment_id: str) -> Optional[Payment]: ...
    @abstractmethod
    def list_by_commitment(self, commitment_id: str) -> List[Payment]: ...
    @abstractmethod
    def list_by_cost_assignment(self, assignment_id: str) -> List[Payment]: ...
    @abstractmethod
    def delete_by_commitment(self, commitment_id: str) -> None: ...
    @abstractmethod
    def delete_by_cost_assignment(self, assignment_id: str) -> None: ...


class BudgetContainerRepository(ABC):
    @abstractmethod
    def add(self, container: BudgetContainer) -> None: ...
    @abstractmethod
    def update(self, container: BudgetContainer) -> None: ...
    @abstractmethod
    def delete(self, container_id: str) -> None: ...
    @abstractmethod
    def get(self, container_id: str) -> Optional[BudgetContainer]: ...
    @abstractmethod
    def list_by_project(self, project_id: str) -> List[BudgetContainer]: ...
    @abstractmethod
    def list_all(self) -> List[BudgetContainer]: ...


class CostAssignmentRepository(ABC):
    @abstractmethod
    def add(self, assignment: CostAssignment) -> None: ...
    @abstractmethod
    def update(self, assignment: CostAssignment) -> None: ...
    @abstractmethod
    def delete(self, assignment_id: str) -> None: ...
    @abstractmethod
    def get(self, assignment_id: str) -> Optional[CostAssignment]: ...
    @abstractmethod
    def list_by_container(self, container_id: str) -> List[CostAssignment]: ...
    @abstractmethod
    def list_by_project(self, project_id: str) -> List[CostAssignment]: ...
    @abstractmethod
    def list_all(self) -> List[CostAssignment]: ...
    @abstractmethod
    def clear_container(self, container_id: str) -> None: ...


__all__ = [
    "CommitmentRepository",
    "PaymentRepository",
    "BudgetContainerRepository",
    "CostAssignmentRepository",
]
