"""Keeps the cached running balances consistent with payments and contracts.

Three aggregates are maintained here and nowhere else:

* ``Commitment.amount_paid``: sum of the commitment's payments.
* ``CostAssignment.budget_realized``: sum of the payments made to the assignee.
* ``BudgetContainer.budget_used``: sum of the cost of the counting contracts
  charged to the phase. Always rebuilt with a full scan.

Payment writes and aggregate writes share one transaction. Aggregate writes go
through the repositories' version-checked update, so a concurrent writer makes
the whole operation fail with ``ConcurrencyError`` instead of losing an update.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import (
    BudgetContainerRepository,
    CommitmentRepository,
    CostAssignmentRepository,
    PaymentRepository,
)
from core.models import (
    BudgetContainer,
    Commitment,
    ContractStatus,
    CostAssignment,
    Payment,
    PaymentOwnerKind,
    normalize_id,
)
from core.services.common.base import ServiceBase
from core.services.ledger.helpers import require_positive_amount, utilization_percent
from core.services.ledger.models import ContainerDrift, ContainerSummary, PaymentOutcome

logger = logging.getLogger(__name__)

PaymentOwner = Union[Commitment, CostAssignment]


def committed_cost(assignments: List[CostAssignment]) -> float:
    return sum(
        float(a.cost or 0.0)
        for a in assignments
        if ContractStatus(a.status).counts_toward_budget
    )


def build_container_summary(container: BudgetContainer, assignment_count: int) -> ContainerSummary:
    return ContainerSummary(
        container_id=container.id,
        project_id=container.project_id,
        name=container.name,
        budget_allocated=container.budget_allocated,
        budget_used=container.budget_used,
        budget_available=container.budget_available,
        utilization_percent=utilization_percent(container.budget_used, container.budget_allocated),
        over_allocated=container.is_over_allocated,
        assignment_count=assignment_count,
    )


def _check_payment_date(value: Optional[date]) -> None:
    if value is not None and not isinstance(value, date):
        raise ValidationError("Payment date must be a valid date.", code="INVALID_PAYMENT_DATE")


class LedgerReconciler(ServiceBase):
    def __init__(
        self,
        session: Session,
        commitment_repo: CommitmentRepository,
        payment_repo: PaymentRepository,
        container_repo: BudgetContainerRepository,
        assignment_repo: CostAssignmentRepository,
    ):
        super().__init__(session)
        self._commitment_repo = commitment_repo
        self._payment_repo = payment_repo
        self._container_repo = container_repo
        self._assignment_repo = assignment_repo

    # ---- owners -----------------------------------------------------------

    def _load_owner(self, owner_kind: PaymentOwnerKind, owner_id: str) -> PaymentOwner:
        owner_id = normalize_id(owner_id)
        if owner_id is None:
            raise BusinessRuleError(
                "A payment must belong to a commitment or a cost assignment.",
                code="PAYMENT_OWNER_REQUIRED",
            )
        if owner_kind == PaymentOwnerKind.COMMITMENT:
            commitment = self._commitment_repo.get(owner_id)
            if commitment is None:
                raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")
            return commitment
        assignment = self._assignment_repo.get(owner_id)
        if assignment is None:
            raise NotFoundError("Cost assignment not found.", code="COST_ASSIGNMENT_NOT_FOUND")
        return assignment

    @staticmethod
    def _paid_total(owner: PaymentOwner) -> float:
        if isinstance(owner, Commitment):
            return float(owner.amount_paid or 0.0)
        return float(owner.budget_realized or 0.0)

    @staticmethod
    def _is_overpaid(owner: PaymentOwner, total: float) -> bool:
        if isinstance(owner, Commitment):
            return total > owner.principal
        return total > owner.cost

    def _store_paid_total(self, owner: PaymentOwner, total: float) -> None:
        if isinstance(owner, Commitment):
            owner.amount_paid = total
            self._commitment_repo.update(owner)
        else:
            owner.budget_realized = total
            self._assignment_repo.update(owner)

    def _payments_of(self, owner_kind: PaymentOwnerKind, owner_id: str) -> List[Payment]:
        if owner_kind == PaymentOwnerKind.COMMITMENT:
            return self._payment_repo.list_by_commitment(owner_id)
        return self._payment_repo.list_by_cost_assignment(owner_id)

    # ---- payments ---------------------------------------------------------

    def record_payment(
        self,
        owner_id: str,
        amount: float,
        payment_date: date | None = None,
        note: str | None = None,
        owner_kind: PaymentOwnerKind = PaymentOwnerKind.COMMITMENT,
    ) -> PaymentOutcome:
        owner_kind = PaymentOwnerKind(owner_kind)
        amount = require_positive_amount(amount)
        _check_payment_date(payment_date)

        with self.transaction("record payment"):
            owner = self._load_owner(owner_kind, owner_id)
            payment = Payment.create(
                owner_kind=owner_kind,
                owner_id=owner.id,
                amount=amount,
                payment_date=payment_date,
                note=(note or "").strip() or None,
            )
            self._payment_repo.add(payment)
            previous = self._paid_total(owner)
            new_total = previous + amount
            self._store_paid_total(owner, new_total)

        overpaid = self._is_overpaid(owner, new_total)
        logger.info(
            "Recorded payment %s of %.2f on %s %s (paid %.2f -> %.2f)",
            payment.id, amount, owner_kind.value, owner_id, previous, new_total,
        )
        if overpaid:
            logger.warning("%s %s is overpaid: %.2f paid", owner_kind.value, owner_id, new_total)
        domain_events.payments_changed.emit(owner_id)
        return PaymentOutcome(
            payment=payment,
            previous_total=previous,
            new_total=new_total,
            overpaid=overpaid,
        )

    def edit_payment(
        self,
        payment_id: str,
        new_amount: float,
        new_date: date | None = None,
        new_note: str | None = None,
        expected_version: int | None = None,
    ) -> PaymentOutcome:
        new_amount = require_positive_amount(new_amount)
        _check_payment_date(new_date)

        with self.transaction("edit payment"):
            payment = self._payment_repo.get(payment_id)
            if payment is None:
                raise NotFoundError("Payment not found.", code="PAYMENT_NOT_FOUND")
            if expected_version is not None:
                payment.version = expected_version
            owner = self._load_owner(payment.owner_kind, payment.owner_id)

            delta = new_amount - payment.amount
            payment.amount = new_amount
            if new_date is not None:
                payment.payment_date = new_date
            if new_note is not None:
                payment.note = new_note.strip() or None
            self._payment_repo.update(payment)

            previous = self._paid_total(owner)
            new_total = previous + delta
            self._store_paid_total(owner, new_total)

        logger.info(
            "Edited payment %s by %+.2f (paid %.2f -> %.2f)",
            payment_id, delta, previous, new_total,
        )
        domain_events.payments_changed.emit(payment.owner_id)
        return PaymentOutcome(
            payment=payment,
            previous_total=previous,
            new_total=new_total,
            overpaid=self._is_overpaid(owner, new_total),
        )

    def delete_payment(self, payment_id: str) -> PaymentOutcome:
        with self.transaction("delete payment"):
            payment = self._payment_repo.get(payment_id)
            if payment is None:
                raise NotFoundError("Payment not found.", code="PAYMENT_NOT_FOUND")
            owner = self._load_owner(payment.owner_kind, payment.owner_id)

            previous = self._paid_total(owner)
            new_total = max(0.0, previous - payment.amount)
            self._store_paid_total(owner, new_total)
            self._payment_repo.delete(payment_id)

        logger.info(
            "Deleted payment %s of %.2f (paid %.2f -> %.2f)",
            payment_id, payment.amount, previous, new_total,
        )
        domain_events.payments_changed.emit(payment.owner_id)
        return PaymentOutcome(
            payment=payment,
            previous_total=previous,
            new_total=new_total,
            overpaid=self._is_overpaid(owner, new_total),
        )

    def rebuild_paid_total(
        self,
        owner_id: str,
        owner_kind: PaymentOwnerKind = PaymentOwnerKind.COMMITMENT,
    ) -> float:
        """Re-derive an owner's paid aggregate from its payments."""
        owner_kind = PaymentOwnerKind(owner_kind)
        with self.transaction("rebuild paid total"):
            self._session.flush()
            owner = self._load_owner(owner_kind, owner_id)
            total = sum(p.amount for p in self._payments_of(owner_kind, owner_id))
            previous = self._paid_total(owner)
            if previous != total:
                self._store_paid_total(owner, total)

        if previous != total:
            logger.warning(
                "Repaired paid total of %s %s: %.2f -> %.2f",
                owner_kind.value, owner_id, previous, total,
            )
            domain_events.payments_changed.emit(owner_id)
        return total

    def list_payments(
        self,
        owner_id: str,
        owner_kind: PaymentOwnerKind = PaymentOwnerKind.COMMITMENT,
    ) -> List[Payment]:
        return self._payments_of(PaymentOwnerKind(owner_kind), owner_id)

    # ---- phase budgets ----------------------------------------------------

    def apply_container_recompute(self, container_id: str) -> tuple[BudgetContainer, float, int]:
        """Rewrite ``budget_used`` from a full scan without committing.

        Returns the container, its previous ``budget_used`` and the number of
        assignments charged to it. Callers own the transaction.
        """
        self._session.flush()
        container = self._container_repo.get(container_id)
        if container is None:
            raise NotFoundError("Budget phase not found.", code="CONTAINER_NOT_FOUND")
        assignments = self._assignment_repo.list_by_container(container_id)
        previous = container.budget_used
        used = committed_cost(assignments)
        if used != previous:
            container.budget_used = used
            self._container_repo.update(container)
        return container, previous, len(assignments)

    def recompute_container(self, container_id: str) -> ContainerSummary:
        with self.transaction("recompute container"):
            container, previous, count = self.apply_container_recompute(container_id)

        logger.info(
            "Recomputed phase %s budget used: %.2f -> %.2f",
            container_id, previous, container.budget_used,
        )
        if container.is_over_allocated:
            logger.warning(
                "Phase %s is over-allocated: %.2f used of %.2f",
                container_id, container.budget_used, container.budget_allocated,
            )
        domain_events.budgets_changed.emit(container.project_id)
        return build_container_summary(container, count)

    def recompute_all_containers(self, project_id: str | None = None) -> List[ContainerDrift]:
        """Repair pass over every phase (or every phase of one project)."""
        drifts: List[ContainerDrift] = []
        touched_projects: set[str] = set()
        with self.transaction("recompute all containers"):
            self._session.flush()
            if project_id is None:
                containers = self._container_repo.list_all()
            else:
                containers = self._container_repo.list_by_project(project_id)
            for item in containers:
                container, previous, _ = self.apply_container_recompute(item.id)
                if previous != container.budget_used:
                    drifts.append(ContainerDrift(container.id, previous, container.budget_used))
                    touched_projects.add(container.project_id)

        for drift in drifts:
            logger.warning(
                "Repaired phase %s budget used drift: %.2f -> %.2f",
                drift.container_id, drift.previous_used, drift.current_used,
            )
        logger.info("Checked %s phase budget(s), repaired %s", len(containers), len(drifts))
        for touched in sorted(touched_projects):
            domain_events.budgets_changed.emit(touched)
        return drifts


__all__ = ["LedgerReconciler", "build_container_summary", "committed_cost"]
