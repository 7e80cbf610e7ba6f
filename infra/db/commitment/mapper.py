from __future__ import annotations

from core.models import Cadence, Commitment, CommitmentKind, CommitmentStatus, GraceUnit, Seniority
from infra.db.models import CommitmentORM


def commitment_to_orm(commitment: Commitment) -> CommitmentORM:
    return CommitmentORM(
        id=commitment.id,
        project_id=commitment.project_id,
        kind=commitment.kind,
        name=commitment.name,
        lender_id=commitment.lender_id,
        principal=commitment.principal,
        annual_rate_percent=commitment.annual_rate_percent,
        start_date=commitment.start_date,
        maturity_date=commitment.maturity_date,
        grace_period=commitment.grace_period,
        grace_unit=commitment.grace_unit,
        cadence=commitment.cadence,
        seniority=commitment.seniority,
        status=commitment.status,
        amount_paid=commitment.amount_paid,
        scheduled_payment=commitment.scheduled_payment,
        credit_type=commitment.credit_type,
        percentage_stake=commitment.percentage_stake,
        mortgage_insurance=commitment.mortgage_insurance,
        usage_expiration_date=commitment.usage_expiration_date,
        notes=commitment.notes or "",
        version=getattr(commitment, "version", 1),
    )


def commitment_from_orm(obj: CommitmentORM) -> Commitment:
    return Commitment(
        id=obj.id,
        project_id=obj.project_id,
        kind=CommitmentKind(obj.kind),
        name=obj.name,
        lender_id=obj.lender_id,
        principal=float(obj.principal or 0.0),
        annual_rate_percent=float(obj.annual_rate_percent or 0.0),
        start_date=obj.start_date,
        maturity_date=obj.maturity_date,
        grace_period=float(obj.grace_period or 0.0),
        grace_unit=GraceUnit(obj.grace_unit) if obj.grace_unit else GraceUnit.DAYS,
        cadence=Cadence(obj.cadence) if obj.cadence else Cadence.MONTHLY,
        seniority=Seniority(obj.seniority) if obj.seniority else Seniority.SENIOR,
        status=CommitmentStatus(obj.status) if obj.status else CommitmentStatus.ACTIVE,
        amount_paid=float(obj.amount_paid or 0.0),
        scheduled_payment=obj.scheduled_payment,
        credit_type=obj.credit_type,
        percentage_stake=obj.percentage_stake,
        mortgage_insurance=obj.mortgage_insurance,
        usage_expiration_date=obj.usage_expiration_date,
        notes=obj.notes or "",
        version=getattr(obj, "version", 1),
    )


def commitment_values(commitment: Commitment) -> dict:
    return {
        "project_id": commitment.project_id,
        "kind": commitment.kind,
        "name": commitment.name,
        "lender_id": commitment.lender_id,
        "principal": commitment.principal,
        "annual_rate_percent": commitment.annual_rate_percent,
        "start_date": commitment.start_date,
        "maturity_date": commitment.maturity_date,
        "grace_period": commitment.grace_period,
        "grace_unit": commitment.grace_unit,
        "cadence": commitment.cadence,
        "seniority": commitment.seniority,
        "status": commitment.status,
        "amount_paid": commitment.amount_paid,
        "scheduled_payment": commitment.scheduled_payment,
        "credit_type": commitment.credit_type,
        "percentage_stake": commitment.percentage_stake,
        "mortgage_insurance": commitment.mortgage_insurance,
        "usage_expiration_date": commitment.usage_expiration_date,
        "notes": commitment.notes or "",
    }


__all__ = ["commitment_to_orm", "commitment_from_orm", "commitment_values"]
