from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import (
    Cadence,
    CommitmentKind,
    CommitmentStatus,
    GraceUnit,
    Seniority,
)
from core.domain.identifiers import generate_id


@dataclass
class Commitment:
    """A bank credit facility or an investor investment registered on a project.

    ``amount_paid`` is a cached aggregate of the commitment's payments. Only the
    ledger reconciler writes it.
    """

    id: str
    project_id: str
    kind: CommitmentKind
    name: str
    principal: float
    annual_rate_percent: float
    start_date: date
    maturity_date: Optional[date] = None
    grace_period: float = 0.0
    grace_unit: GraceUnit = GraceUnit.DAYS
    cadence: Cadence = Cadence.MONTHLY
    seniority: Seniority = Seniority.SENIOR
    lender_id: Optional[str] = None
    amount_paid: float = 0.0
    scheduled_payment: Optional[float] = None
    status: CommitmentStatus = CommitmentStatus.ACTIVE
    credit_type: Optional[str] = None
    percentage_stake: Optional[float] = None
    mortgage_insurance: Optional[float] = None
    usage_expiration_date: Optional[date] = None
    notes: str = ""
    version: int = 1

    @property
    def remaining_balance(self) -> float:
        return max(0.0, self.principal - self.amount_paid)

    @property
    def is_overpaid(self) -> bool:
        return self.amount_paid > self.principal

    @staticmethod
    def create(
        project_id: str,
        kind: CommitmentKind,
        name: str,
        principal: float,
        annual_rate_percent: float,
        start_date: date,
        **extra,
    ) -> "Commitment":
        return Commitment(
            id=generate_id(),
            project_id=project_id,
            kind=kind,
            name=name,
            principal=principal,
            annual_rate_percent=annual_rate_percent,
            start_date=start_date,
            **extra,
        )


__all__ = ["Commitment"]
