from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError, ValidationError
from core.interfaces import CommitmentRepository, PaymentRepository
from core.models import (
    Cadence,
    Commitment,
    CommitmentKind,
    CommitmentStatus,
    GraceUnit,
    Seniority,
)
from core.services.amortization import (
    CalculationResult,
    compute_money_multiple,
    compute_periodic_payment,
    terms_from_commitment,
)
from core.services.common.base import ServiceBase
from core.services.ledger.helpers import risk_level, utilization_percent
from core.services.ledger.models import CommitmentSummary, LenderExposure

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "name",
    "lender_id",
    "principal",
    "annual_rate_percent",
    "start_date",
    "maturity_date",
    "grace_period",
    "grace_unit",
    "cadence",
    "seniority",
    "status",
    "credit_type",
    "percentage_stake",
    "mortgage_insurance",
    "usage_expiration_date",
    "notes",
)
_TERM_FIELDS = {
    "principal",
    "annual_rate_percent",
    "start_date",
    "maturity_date",
    "grace_period",
    "grace_unit",
    "cadence",
}


def _coerce_enums(values: dict[str, Any]) -> None:
    for key, enum_type in (
        ("kind", CommitmentKind),
        ("grace_unit", GraceUnit),
        ("cadence", Cadence),
        ("seniority", Seniority),
        ("status", CommitmentStatus),
    ):
        if values.get(key) is not None:
            try:
                values[key] = enum_type(values[key])
            except ValueError as exc:
                raise ValidationError(
                    f"Unsupported {key.replace('_', ' ')}: {values[key]!r}",
                    code="INVALID_ENUM",
                ) from exc


def _validate(commitment: Commitment) -> None:
    if not (commitment.name or "").strip():
        raise ValidationError("Commitment name cannot be empty.", code="NAME_REQUIRED")
    if commitment.principal is None or not math.isfinite(commitment.principal) or commitment.principal <= 0:
        raise ValidationError("Principal must be positive.", code="INVALID_PRINCIPAL")
    rate = commitment.annual_rate_percent
    if rate is None or not math.isfinite(rate) or rate < 0:
        raise ValidationError("Interest rate cannot be negative.", code="INVALID_RATE")
    if (commitment.grace_period or 0.0) < 0:
        raise ValidationError("Grace period cannot be negative.", code="INVALID_GRACE")
    if not isinstance(commitment.start_date, date):
        raise ValidationError("Start date is required.", code="MISSING_START_DATE")
    if commitment.maturity_date is not None and commitment.maturity_date <= commitment.start_date:
        raise ValidationError("Maturity date must be after the start date.", code="INVALID_DATE_RANGE")
    if commitment.percentage_stake is not None and not 0 <= commitment.percentage_stake <= 100:
        raise ValidationError("Percentage stake must be between 0 and 100.", code="INVALID_STAKE")
    if commitment.mortgage_insurance is not None and commitment.mortgage_insurance < 0:
        raise ValidationError("Mortgage insurance cannot be negative.", code="INVALID_INSURANCE")


class CommitmentService(ServiceBase):
    """Registers and edits credit facilities and investments.

    ``amount_paid`` is owned by the ledger reconciler and is never written here.
    """

    def __init__(
        self,
        session: Session,
        commitment_repo: CommitmentRepository,
        payment_repo: PaymentRepository,
    ):
        super().__init__(session)
        self._commitment_repo = commitment_repo
        self._payment_repo = payment_repo

    def register_commitment(
        self,
        project_id: str,
        kind: CommitmentKind,
        name: str,
        principal: float,
        annual_rate_percent: float,
        start_date: date,
        persist_scheduled_payment: bool = False,
        **details: Any,
    ) -> Commitment:
        if not project_id:
            raise ValidationError("Project is required.", code="PROJECT_REQUIRED")
        unknown = set(details) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown commitment fields: {', '.join(sorted(unknown))}")
        details["kind"] = kind
        _coerce_enums(details)
        kind = details.pop("kind")

        commitment = Commitment.create(
            project_id=project_id,
            kind=kind,
            name=(name or "").strip(),
            principal=principal,
            annual_rate_percent=annual_rate_percent,
            start_date=start_date,
            **details,
        )
        _validate(commitment)
        if persist_scheduled_payment:
            commitment.scheduled_payment = compute_periodic_payment(terms_from_commitment(commitment)).value

        with self.transaction("register commitment"):
            self._commitment_repo.add(commitment)

        logger.info(
            "Registered %s %s - %s (%.2f at %.2f%%)",
            commitment.kind.value, commitment.id, commitment.name,
            commitment.principal, commitment.annual_rate_percent,
        )
        domain_events.commitments_changed.emit(project_id)
        return commitment

    def update_commitment(
        self,
        commitment_id: str,
        expected_version: int | None = None,
        recompute_scheduled_payment: bool = False,
        **changes: Any,
    ) -> Commitment:
        if "amount_paid" in changes:
            raise ValidationError(
                "Amount paid is derived from payments and cannot be edited.",
                code="DERIVED_FIELD",
            )
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown commitment fields: {', '.join(sorted(unknown))}")
        _coerce_enums(changes)

        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")
        if expected_version is not None and commitment.version != expected_version:
            raise ConcurrencyError(
                "Commitment changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )

        for key, value in changes.items():
            if key == "name" and value is not None:
                value = value.strip()
            setattr(commitment, key, value)
        _validate(commitment)
        if recompute_scheduled_payment:
            commitment.scheduled_payment = compute_periodic_payment(terms_from_commitment(commitment)).value
        elif _TERM_FIELDS & set(changes):
            logger.info("Terms of commitment %s changed; scheduled payment left as is", commitment_id)

        with self.transaction("update commitment"):
            self._commitment_repo.update(commitment)

        logger.info("Updated commitment %s (%s)", commitment_id, ", ".join(sorted(changes)) or "no fields")
        domain_events.commitments_changed.emit(commitment.project_id)
        return commitment

    def delete_commitment(self, commitment_id: str) -> None:
        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")

        with self.transaction("delete commitment"):
            self._payment_repo.delete_by_commitment(commitment_id)
            self._commitment_repo.delete(commitment_id)

        logger.info("Deleted commitment %s and its payments", commitment_id)
        domain_events.payments_changed.emit(commitment_id)
        domain_events.commitments_changed.emit(commitment.project_id)

    def get_commitment(self, commitment_id: str) -> Commitment:
        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")
        return commitment

    def list_commitments_for_project(
        self,
        project_id: str,
        kind: CommitmentKind | None = None,
    ) -> List[Commitment]:
        commitments = self._commitment_repo.list_by_project(project_id)
        if kind is None:
            return commitments
        kind = CommitmentKind(kind)
        return [c for c in commitments if c.kind == kind]

    def estimate_payment(self, commitment_id: str) -> CalculationResult:
        return compute_periodic_payment(terms_from_commitment(self.get_commitment(commitment_id)))

    def estimate_money_multiple(self, commitment_id: str) -> CalculationResult:
        return compute_money_multiple(terms_from_commitment(self.get_commitment(commitment_id)))

    def get_commitment_summary(self, commitment_id: str) -> CommitmentSummary:
        commitment = self.get_commitment(commitment_id)
        paid = commitment.amount_paid
        return CommitmentSummary(
            commitment_id=commitment.id,
            principal=commitment.principal,
            amount_paid=paid,
            remaining_balance=commitment.remaining_balance,
            paid_ratio_percent=utilization_percent(paid, commitment.principal),
            overpaid=commitment.is_overpaid,
            scheduled_payment=commitment.scheduled_payment,
        )

    def summarize_lender(self, lender_id: str, credit_limit: float) -> LenderExposure:
        if credit_limit is None or credit_limit < 0:
            raise ValidationError("Credit limit cannot be negative.", code="INVALID_CREDIT_LIMIT")
        commitments = self._commitment_repo.list_by_lender(lender_id)
        utilized = sum(c.principal for c in commitments)
        outstanding = sum(c.remaining_balance for c in commitments)
        utilization = utilization_percent(utilized, credit_limit)
        return LenderExposure(
            lender_id=lender_id,
            credit_limit=credit_limit,
            utilized=utilized,
            outstanding=outstanding,
            available=credit_limit - utilized,
            utilization_percent=utilization,
            risk_level=risk_level(utilization),
            commitment_count=len(commitments),
        )


__all__ = ["CommitmentService"]
