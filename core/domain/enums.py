from __future__ import annotations

from enum import Enum


class CommitmentKind(str, Enum):
    BANK_CREDIT = "BANK_CREDIT"
    INVESTMENT = "INVESTMENT"


class Cadence(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Seniority(str, Enum):
    SENIOR = "senior"
    JUNIOR = "junior"


class GraceUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"


class CommitmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAID = "PAID"
    DEFAULTED = "DEFAULTED"


class RepaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIYEARLY = "biyearly"
    YEARLY = "yearly"

    @property
    def per_year(self) -> int:
        return _PAYMENTS_PER_YEAR[self]


_PAYMENTS_PER_YEAR = {
    RepaymentFrequency.MONTHLY: 12,
    RepaymentFrequency.QUARTERLY: 4,
    RepaymentFrequency.BIYEARLY: 2,
    RepaymentFrequency.YEARLY: 1,
}


class ContractStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def counts_toward_budget(self) -> bool:
        return self in (ContractStatus.DRAFT, ContractStatus.ACTIVE)


class PhaseStatus(str, Enum):
    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"


class PaymentOwnerKind(str, Enum):
    COMMITMENT = "COMMITMENT"
    COST_ASSIGNMENT = "COST_ASSIGNMENT"


__all__ = [
    "CommitmentKind",
    "Cadence",
    "Seniority",
    "GraceUnit",
    "CommitmentStatus",
    "RepaymentFrequency",
    "ContractStatus",
    "PhaseStatus",
    "PaymentOwnerKind",
]
