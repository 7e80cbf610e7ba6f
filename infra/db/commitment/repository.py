from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import CommitmentRepository
from core.models import Commitment
from infra.db.commitment.mapper import commitment_from_orm, commitment_to_orm, commitment_values
from infra.db.models import CommitmentORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyCommitmentRepository(CommitmentRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, commitment: Commitment) -> None:
        self.session.add(commitment_to_orm(commitment))

    def update(self, commitment: Commitment) -> None:
        commitment.version = update_with_version_check(
            self.session,
            CommitmentORM,
            commitment.id,
            getattr(commitment, "version", 1),
            commitment_values(commitment),
            not_found_message="Commitment not found.",
            stale_message="Commitment was updated by another user.",
        )

    def delete(self, commitment_id: str) -> None:
        self.session.query(CommitmentORM).filter_by(id=commitment_id).delete()

    def get(self, commitment_id: str) -> Optional[Commitment]:
        obj = self.session.get(CommitmentORM, commitment_id)
        return commitment_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[Commitment]:
        stmt = (
            select(CommitmentORM)
            .where(CommitmentORM.project_id == project_id)
            .order_by(CommitmentORM.start_date, CommitmentORM.name)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [commitment_from_orm(row) for row in rows]

    def list_by_lender(self, lender_id: str) -> List[Commitment]:
        stmt = select(CommitmentORM).where(CommitmentORM.lender_id == lender_id)
        rows = self.session.execute(stmt).scalars().all()
        return [commitment_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyCommitmentRepository"]
