from core.services.commitment.service import CommitmentService

__all__ = ["CommitmentService"]
