from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import PaymentOwnerKind
from core.domain.identifiers import generate_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class Payment:
    id: str
    amount: float
    commitment_id: Optional[str] = None
    cost_assignment_id: Optional[str] = None
    payment_date: Optional[date] = None
    note: Optional[str] = None
    created_at: datetime = field(default_factory=_utc_now)
    version: int = 1

    @property
    def owner_kind(self) -> PaymentOwnerKind:
        if self.commitment_id is not None:
            return PaymentOwnerKind.COMMITMENT
        return PaymentOwnerKind.COST_ASSIGNMENT

    @property
    def owner_id(self) -> str:
        return self.commitment_id or self.cost_assignment_id or ""

    @staticmethod
    def create(
        owner_kind: PaymentOwnerKind,
        owner_id: str,
        amount: float,
        payment_date: Optional[date] = None,
        note: Optional[str] = None,
    ) -> "Payment":
        return Payment(
            id=generate_id(),
            amount=amount,
            commitment_id=owner_id if owner_kind == PaymentOwnerKind.COMMITMENT else None,
            cost_assignment_id=owner_id if owner_kind == PaymentOwnerKind.COST_ASSIGNMENT else None,
            payment_date=payment_date,
            note=note,
        )


__all__ = ["Payment"]
