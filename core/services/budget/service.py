from __future__ import annotations

import logging
from datetime import date
from typing import Any, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError, ValidationError
from core.interfaces import BudgetContainerRepository, CostAssignmentRepository, PaymentRepository
from core.models import BudgetContainer, ContractStatus, CostAssignment, PhaseStatus, normalize_id
from core.services.common.base import ServiceBase
from core.services.ledger.helpers import progress_percent
from core.services.ledger.models import AssignmentProgress, ContainerSummary
from core.services.ledger.service import LedgerReconciler, build_container_summary

logger = logging.getLogger(__name__)

_CONTAINER_FIELDS = ("name", "budget_allocated", "phase_number", "status", "start_date", "end_date")
_ASSIGNMENT_FIELDS = ("assignee_name", "description", "cost", "status", "deadline", "container_id")


def _as_phase_status(value: Any) -> PhaseStatus:
    try:
        return PhaseStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unsupported phase status: {value!r}", code="INVALID_STATUS") from exc


def _as_contract_status(value: Any) -> ContractStatus:
    try:
        return ContractStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unsupported contract status: {value!r}", code="INVALID_STATUS") from exc


def _validate_container(container: BudgetContainer) -> None:
    if not (container.name or "").strip():
        raise ValidationError("Phase name cannot be empty.", code="NAME_REQUIRED")
    if container.budget_allocated is None or container.budget_allocated < 0:
        raise ValidationError("Allocated budget cannot be negative.", code="INVALID_BUDGET")
    if container.start_date and container.end_date and container.end_date < container.start_date:
        raise ValidationError("Phase end date cannot be before its start date.", code="INVALID_DATE_RANGE")


def _validate_assignment(assignment: CostAssignment) -> None:
    if not (assignment.assignee_name or "").strip():
        raise ValidationError("Assignee name cannot be empty.", code="NAME_REQUIRED")
    if assignment.cost is None or assignment.cost < 0:
        raise ValidationError("Contract cost cannot be negative.", code="INVALID_COST")
    if assignment.deadline is not None and not isinstance(assignment.deadline, date):
        raise ValidationError("Deadline must be a valid date.", code="INVALID_DEADLINE")


class BudgetService(ServiceBase):
    def __init__(
        self,
        session: Session,
        container_repo: BudgetContainerRepository,
        assignment_repo: CostAssignmentRepository,
        payment_repo: PaymentRepository,
        reconciler: LedgerReconciler,
    ):
        super().__init__(session)
        self._container_repo = container_repo
        self._assignment_repo = assignment_repo
        self._payment_repo = payment_repo
        self._reconciler = reconciler

    # ---- phases -----------------------------------------------------------

    def create_container(
        self,
        project_id: str,
        name: str,
        budget_allocated: float = 0.0,
        phase_number: int = 1,
        status: PhaseStatus = PhaseStatus.PLANNING,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> BudgetContainer:
        if not project_id:
            raise ValidationError("Project is required.", code="PROJECT_REQUIRED")
        container = BudgetContainer.create(
            project_id=project_id,
            name=(name or "").strip(),
            budget_allocated=budget_allocated,
            phase_number=phase_number,
            status=_as_phase_status(status),
            start_date=start_date,
            end_date=end_date,
        )
        _validate_container(container)

        with self.transaction("create phase"):
            self._container_repo.add(container)

        logger.info("Created phase %s - %s (%.2f allocated)", container.id, container.name, budget_allocated)
        domain_events.budgets_changed.emit(project_id)
        return container

    def update_container(
        self,
        container_id: str,
        expected_version: int | None = None,
        **changes: Any,
    ) -> BudgetContainer:
        if "budget_used" in changes:
            raise ValidationError(
                "Budget used is derived from contracts and cannot be edited.",
                code="DERIVED_FIELD",
            )
        unknown = set(changes) - set(_CONTAINER_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown phase fields: {', '.join(sorted(unknown))}")

        container = self._get_container(container_id)
        if expected_version is not None and container.version != expected_version:
            raise ConcurrencyError(
                "Phase changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        for key, value in changes.items():
            if key == "status":
                value = _as_phase_status(value)
            elif key == "name" and value is not None:
                value = value.strip()
            setattr(container, key, value)
        _validate_container(container)

        with self.transaction("update phase"):
            self._container_repo.update(container)

        logger.info("Updated phase %s", container_id)
        domain_events.budgets_changed.emit(container.project_id)
        return container

    def delete_container(self, container_id: str) -> None:
        container = self._get_container(container_id)
        with self.transaction("delete phase"):
            self._assignment_repo.clear_container(container_id)
            self._container_repo.delete(container_id)

        logger.info("Deleted phase %s; its contracts are now unassigned", container_id)
        domain_events.budgets_changed.emit(container.project_id)

    def list_containers(self, project_id: str) -> List[BudgetContainer]:
        return self._container_repo.list_by_project(project_id)

    def get_container_summary(self, container_id: str) -> ContainerSummary:
        container = self._get_container(container_id)
        count = len(self._assignment_repo.list_by_container(container_id))
        return build_container_summary(container, count)

    # ---- cost assignments -------------------------------------------------

    def add_cost_assignment(
        self,
        project_id: str,
        assignee_name: str,
        cost: float,
        container_id: str | None = None,
        description: str = "",
        status: ContractStatus = ContractStatus.ACTIVE,
        deadline: date | None = None,
    ) -> CostAssignment:
        if not project_id:
            raise ValidationError("Project is required.", code="PROJECT_REQUIRED")
        assignment = CostAssignment.create(
            project_id=project_id,
            assignee_name=(assignee_name or "").strip(),
            cost=cost,
            container_id=normalize_id(container_id),
            description=(description or "").strip(),
            status=_as_contract_status(status),
            deadline=deadline,
        )
        _validate_assignment(assignment)

        with self.transaction("add cost assignment"):
            if assignment.container_id is not None:
                self._check_container_project(assignment.container_id, project_id)
            self._assignment_repo.add(assignment)
            self._recompute(assignment.container_id)

        logger.info(
            "Added contract %s for %s (%.2f) to phase %s",
            assignment.id, assignment.assignee_name, assignment.cost, assignment.container_id or "-",
        )
        domain_events.budgets_changed.emit(project_id)
        return assignment

    def update_cost_assignment(
        self,
        assignment_id: str,
        expected_version: int | None = None,
        **changes: Any,
    ) -> CostAssignment:
        if "budget_realized" in changes:
            raise ValidationError(
                "Realized budget is derived from payments and cannot be edited.",
                code="DERIVED_FIELD",
            )
        unknown = set(changes) - set(_ASSIGNMENT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown contract fields: {', '.join(sorted(unknown))}")

        assignment = self._get_assignment(assignment_id)
        if expected_version is not None and assignment.version != expected_version:
            raise ConcurrencyError(
                "Contract changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        old_container_id = assignment.container_id
        for key, value in changes.items():
            if key == "status":
                value = _as_contract_status(value)
            elif key in ("assignee_name", "description") and value is not None:
                value = value.strip()
            elif key == "container_id":
                value = normalize_id(value)
            setattr(assignment, key, value)
        _validate_assignment(assignment)

        with self.transaction("update cost assignment"):
            if assignment.container_id is not None and assignment.container_id != old_container_id:
                self._check_container_project(assignment.container_id, assignment.project_id)
            self._assignment_repo.update(assignment)
            self._recompute(old_container_id, assignment.container_id)

        logger.info("Updated contract %s", assignment_id)
        domain_events.budgets_changed.emit(assignment.project_id)
        return assignment

    def reassign_cost_assignment(
        self,
        assignment_id: str,
        container_id: str | None,
        expected_version: int | None = None,
    ) -> CostAssignment:
        return self.update_cost_assignment(
            assignment_id,
            expected_version=expected_version,
            container_id=container_id,
        )

    def delete_cost_assignment(self, assignment_id: str) -> None:
        assignment = self._get_assignment(assignment_id)
        with self.transaction("delete cost assignment"):
            self._payment_repo.delete_by_cost_assignment(assignment_id)
            self._assignment_repo.delete(assignment_id)
            self._recompute(assignment.container_id)

        logger.info("Deleted contract %s and its payments", assignment_id)
        domain_events.payments_changed.emit(assignment_id)
        domain_events.budgets_changed.emit(assignment.project_id)

    def list_cost_assignments(self, project_id: str) -> List[CostAssignment]:
        return self._assignment_repo.list_by_project(project_id)

    def get_assignment_progress(self, assignment_id: str) -> AssignmentProgress:
        assignment = self._get_assignment(assignment_id)
        return AssignmentProgress(
            assignment_id=assignment.id,
            cost=assignment.cost,
            budget_realized=assignment.budget_realized,
            progress_percent=progress_percent(assignment.budget_realized, assignment.cost),
            remaining_to_pay=max(0.0, assignment.cost - assignment.budget_realized),
        )

    # ---- internals --------------------------------------------------------

    def _get_container(self, container_id: str) -> BudgetContainer:
        container = self._container_repo.get(container_id)
        if container is None:
            raise NotFoundError("Budget phase not found.", code="CONTAINER_NOT_FOUND")
        return container

    def _get_assignment(self, assignment_id: str) -> CostAssignment:
        assignment = self._assignment_repo.get(assignment_id)
        if assignment is None:
            raise NotFoundError("Cost assignment not found.", code="COST_ASSIGNMENT_NOT_FOUND")
        return assignment

    def _check_container_project(self, container_id: str, project_id: str) -> None:
        container = self._get_container(container_id)
        if container.project_id != project_id:
            raise ValidationError(
                "Phase must belong to the contract's project.",
                code="CONTAINER_PROJECT_MISMATCH",
            )

    def _recompute(self, *container_ids: str | None) -> None:
        seen: set[str] = set()
        for container_id in container_ids:
            if container_id is None or container_id in seen:
                continue
            seen.add(container_id)
            container, previous, _ = self._reconciler.apply_container_recompute(container_id)
            logger.info(
                "Phase %s budget used: %.2f -> %.2f",
                container_id, previous, container.budget_used,
            )
            if container.is_over_allocated:
                logger.warning(
                    "Phase %s is over-allocated: %.2f used of %.2f",
                    container_id, container.budget_used, container.budget_allocated,
                )


__all__ = ["BudgetService"]
