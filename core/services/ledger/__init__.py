from core.services.ledger.models import (
    AssignmentProgress,
    CommitmentSummary,
    ContainerDrift,
    ContainerSummary,
    LenderExposure,
    PaymentOutcome,
)
from core.services.ledger.service import LedgerReconciler, build_container_summary

__all__ = [
    "LedgerReconciler",
    "build_container_summary",
    "PaymentOutcome",
    "ContainerSummary",
    "ContainerDrift",
    "AssignmentProgress",
    "CommitmentSummary",
    "LenderExposure",
]
