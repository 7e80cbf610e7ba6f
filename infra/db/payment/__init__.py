from infra.db.payment.mapper import payment_from_orm, payment_to_orm
from infra.db.payment.repository import SqlAlchemyPaymentRepository

__all__ = [
    "payment_to_orm",
    "payment_from_orm",
    "SqlAlchemyPaymentRepository",
]
