from __future__ import annotations

from core.models import Payment
from infra.db.models import PaymentORM


def payment_to_orm(payment: Payment) -> PaymentORM:
    return PaymentORM(
        id=payment.id,
        commitment_id=payment.commitment_id,
        cost_assignment_id=payment.cost_assignment_id,
        amount=payment.amount,
        payment_date=payment.payment_date,
        note=payment.note,
        created_at=payment.created_at,
        version=getattr(payment, "version", 1),
    )


def payment_from_orm(obj: PaymentORM) -> Payment:
    return Payment(
        id=obj.id,
        commitment_id=obj.commitment_id,
        cost_assignment_id=obj.cost_assignment_id,
        amount=float(obj.amount or 0.0),
        payment_date=obj.payment_date,
        note=obj.note,
        created_at=obj.created_at,
        version=getattr(obj, "version", 1),
    )


__all__ = ["payment_to_orm", "payment_from_orm"]
