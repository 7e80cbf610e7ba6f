from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import PaymentRepository
from core.models import Payment
from infra.db.models import PaymentORM
from infra.db.optimistic import update_with_version_check
from infra.db.payment.mapper import payment_from_orm, payment_to_orm


def _ledger_order():
    # dated payments first, then insertion order
    return (
        PaymentORM.payment_date.is_(None),
        PaymentORM.payment_date,
        PaymentORM.created_at,
    )


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, payment: Payment) -> None:
        self.session.add(payment_to_orm(payment))

    def update(self, payment: Payment) -> None:
        payment.version = update_with_version_check(
            self.session,
            PaymentORM,
            payment.id,
            getattr(payment, "version", 1),
            {
                "amount": payment.amount,
                "payment_date": payment.payment_date,
                "note": payment.note,
            },
            not_found_message="Payment not found.",
            stale_message="Payment was updated by another user.",
        )

    def delete(self, payment_id: str) -> None:
        self.session.query(PaymentORM).filter_by(id=payment_id).delete()

    def get(self, payment_id: str) -> Optional[Payment]:
        obj = self.session.get(PaymentORM, payment_id)
        return payment_from_orm(obj) if obj else None

    def list_by_commitment(self, commitment_id: str) -> List[Payment]:
        stmt = (
            select(PaymentORM)
            .where(PaymentORM.commitment_id == commitment_id)
            .order_by(*_ledger_order())
        )
        rows = self.session.execute(stmt).scalars().all()
        return [payment_from_orm(row) for row in rows]

    def list_by_cost_assignment(self, assignment_id: str) -> List[Payment]:
        stmt = (
            select(PaymentORM)
            .where(PaymentORM.cost_assignment_id == assignment_id)
            .order_by(*_ledger_order())
        )
        rows = self.session.execute(stmt).scalars().all()
        return [payment_from_orm(row) for row in rows]

    def delete_by_commitment(self, commitment_id: str) -> None:
        self.session.query(PaymentORM).filter_by(commitment_id=commitment_id).delete()

    def delete_by_cost_assignment(self, assignment_id: str) -> None:
        self.session.query(PaymentORM).filter_by(cost_assignment_id=assignment_id).delete()


__all__ = ["SqlAlchemyPaymentRepository"]
