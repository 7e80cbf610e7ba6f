from __future__ import annotations

import math
from calendar import monthrange
from datetime import date

from core.domain.enums import RepaymentFrequency
from core.services.amortization.calculator import ACTUAL_DAYS_PER_YEAR
from core.services.amortization.models import RepaymentPlan


def add_months(anchor: date, months: int) -> date:
    index = anchor.month - 1 + int(months)
    year = anchor.year + index // 12
    month = index % 12 + 1
    day = min(anchor.day, monthrange(year, month)[1])
    return date(year, month, day)


def build_repayment_plan(
    *,
    principal: float,
    annual_rate_percent: float,
    start_date: date,
    maturity_date: date,
    grace_months: int = 0,
    principal_frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY,
    interest_frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY,
) -> RepaymentPlan | None:
    """Split a credit into level principal instalments and flat interest coupons.

    Returns None when the grace period reaches or passes maturity, or when
    the inputs are missing.
    """
    if not principal or start_date is None or maturity_date is None:
        return None
    principal_frequency = RepaymentFrequency(principal_frequency)
    interest_frequency = RepaymentFrequency(interest_frequency)

    payment_start = add_months(start_date, grace_months or 0)
    if payment_start >= maturity_date:
        return None

    years = (maturity_date - payment_start).days / ACTUAL_DAYS_PER_YEAR
    principal_payments = math.floor(years * principal_frequency.per_year)
    interest_payments = math.floor(years * interest_frequency.per_year)

    principal_per_payment = principal / principal_payments if principal_payments > 0 else 0.0
    annual_interest = principal * (annual_rate_percent or 0.0) / 100
    interest_per_payment = annual_interest / interest_frequency.per_year if interest_payments > 0 else 0.0

    return RepaymentPlan(
        principal_per_payment=principal_per_payment,
        interest_per_payment=interest_per_payment,
        total_principal_payments=principal_payments,
        total_interest_payments=interest_payments,
        payment_start_date=payment_start,
        principal_frequency=principal_frequency,
        interest_frequency=interest_frequency,
    )


__all__ = ["add_months", "build_repayment_plan"]
