from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.domain.enums import Cadence, RepaymentFrequency


@dataclass(frozen=True)
class CommitmentTerms:
    principal: float
    annual_rate_percent: float
    start_date: date
    maturity_date: date | None = None
    grace_period_days: float = 0.0
    cadence: Cadence = Cadence.MONTHLY


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of a live calculation; ``value`` is None when it cannot be determined."""

    value: float | None
    reason: str | None = None
    total_return: float | None = None

    @property
    def is_determined(self) -> bool:
        return self.value is not None

    @staticmethod
    def undetermined(reason: str) -> "CalculationResult":
        return CalculationResult(value=None, reason=reason or "Cannot calculate")

    def display(self, *, decimals: int = 0, as_multiple: bool = False) -> str:
        if self.value is None:
            return self.reason or "Cannot calculate"
        if as_multiple:
            return f"{self.value:.2f}x ({self.value * 100:.0f}%)"
        return f"{self.value:,.{decimals}f}"


@dataclass(frozen=True)
class RepaymentPlan:
    principal_per_payment: float
    interest_per_payment: float
    total_principal_payments: int
    total_interest_payments: int
    payment_start_date: date
    principal_frequency: RepaymentFrequency
    interest_frequency: RepaymentFrequency


__all__ = ["CommitmentTerms", "CalculationResult", "RepaymentPlan"]
