from infra.db.commitment.mapper import commitment_from_orm, commitment_to_orm
from infra.db.commitment.repository import SqlAlchemyCommitmentRepository

__all__ = [
    "commitment_to_orm",
    "commitment_from_orm",
    "SqlAlchemyCommitmentRepository",
]
