from core.domain.budget import BudgetContainer, CostAssignment
from core.domain.commitment import Commitment
from core.domain.enums import (
    Cadence,
    CommitmentKind,
    CommitmentStatus,
    ContractStatus,
    GraceUnit,
    PaymentOwnerKind,
    PhaseStatus,
    RepaymentFrequency,
    Seniority,
)
from core.domain.identifiers import generate_id, normalize_id
from core.domain.payment import Payment

__all__ = [
    "generate_id",
    "normalize_id",
    "CommitmentKind",
    "Cadence",
    "Seniority",
    "GraceUnit",
    "CommitmentStatus",
    "RepaymentFrequency",
    "ContractStatus",
    "PhaseStatus",
    "PaymentOwnerKind",
    "Commitment",
    "Payment",
    "BudgetContainer",
    "CostAssignment",
]
