"""Fixed-rate amortization for credit facilities and investments.

Everything here is pure and safe to call concurrently. The non-strict
``compute_*`` functions are meant for live form previews and never raise for
bad input; they return an undetermined
``CalculationResult`` carrying a display-safe reason instead. The strict
variants raise ``InvalidTermsError``.
"""
from __future__ import annotations

import math
from datetime import date

from core.domain.enums import Cadence
from core.exceptions import InvalidTermsError
from core.services.amortization.models import CalculationResult, CommitmentTerms
from core.services.amortization.policy import YEAR_BASIS_ACTUAL, resolve_year_basis

DEFAULT_TERM_YEARS = 10.0
MIN_REPAYMENT_YEARS = 0.1
GRACE_DAYS_PER_YEAR = 365.0
ACTUAL_DAYS_PER_YEAR = 365.25


def _anniversary(start: date, years: int) -> date:
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return start.replace(year=start.year + years, day=28)


def years_between(start: date, end: date, basis: str | None = None) -> float:
    resolved = resolve_year_basis(basis)
    if resolved == YEAR_BASIS_ACTUAL:
        return (end - start).days / ACTUAL_DAYS_PER_YEAR
    if end < start:
        return -years_between(end, start, resolved)

    whole = end.year - start.year
    if _anniversary(start, whole) > end:
        whole -= 1
    anchor = _anniversary(start, whole)
    next_anchor = _anniversary(start, whole + 1)
    return whole + (end - anchor).days / (next_anchor - anchor).days


def annuity_payment(principal: float, period_rate: float, periods: float) -> float:
    if periods <= 0:
        raise InvalidTermsError("Repayment period must be positive.", code="INVALID_TERM")
    if period_rate == 0:
        return principal / periods
    try:
        # expm1/log1p keep tiny rates from collapsing (1 + r) ** n to exactly 1.0
        growth_minus_one = math.expm1(periods * math.log1p(period_rate))
    except OverflowError as exc:
        raise InvalidTermsError("Interest rate is out of range.", code="INVALID_TERM") from exc
    if growth_minus_one == 0:
        return principal / periods
    payment = principal * period_rate * (growth_minus_one + 1) / growth_minus_one
    if not math.isfinite(payment):
        raise InvalidTermsError("Interest rate is out of range.", code="INVALID_TERM")
    return payment


def validate_terms(terms: CommitmentTerms) -> None:
    principal = terms.principal
    if principal is None or not math.isfinite(principal) or principal <= 0:
        raise InvalidTermsError("Principal must be positive.", code="INVALID_PRINCIPAL")
    rate = terms.annual_rate_percent
    if rate is None or not math.isfinite(rate) or rate < 0:
        raise InvalidTermsError("Interest rate cannot be negative.", code="INVALID_RATE")
    if terms.grace_period_days is not None and terms.grace_period_days < 0:
        raise InvalidTermsError("Grace period cannot be negative.", code="INVALID_GRACE")
    if terms.start_date is None:
        raise InvalidTermsError("Start date is required.", code="MISSING_START_DATE")
    try:
        Cadence(terms.cadence)
    except ValueError as exc:
        raise InvalidTermsError("Unsupported payment cadence", code="INVALID_CADENCE") from exc


def resolve_total_years(terms: CommitmentTerms, basis: str | None = None) -> float:
    if terms.maturity_date is None:
        return DEFAULT_TERM_YEARS
    return years_between(terms.start_date, terms.maturity_date, basis)


def repayment_years(total_years: float, grace_period_days: float) -> float:
    grace_years = (grace_period_days or 0.0) / GRACE_DAYS_PER_YEAR
    return max(MIN_REPAYMENT_YEARS, total_years - grace_years)


def _checked_total_years(terms: CommitmentTerms, basis: str | None) -> float:
    validate_terms(terms)
    total_years = resolve_total_years(terms, basis)
    if total_years <= 0:
        raise InvalidTermsError("Invalid date range", code="INVALID_DATE_RANGE")
    return total_years


def periodic_payment(terms: CommitmentTerms, *, basis: str | None = None) -> float:
    total_years = _checked_total_years(terms, basis)
    years = repayment_years(total_years, terms.grace_period_days)
    annual_rate = terms.annual_rate_percent / 100

    if Cadence(terms.cadence) == Cadence.YEARLY:
        return annuity_payment(terms.principal, annual_rate, years)
    return annuity_payment(terms.principal, annual_rate / 12, years * 12)


def money_multiple(terms: CommitmentTerms, *, basis: str | None = None) -> tuple[float, float]:
    """Return ``(multiple, total_return)`` compounding the nominal rate over the full term.

    The grace period is deliberately ignored and the figure is not an IRR of the
    periodic payment stream.
    """
    total_years = _checked_total_years(terms, basis)
    try:
        total_return = terms.principal * (1 + terms.annual_rate_percent / 100) ** total_years
    except OverflowError as exc:
        raise InvalidTermsError("Expected return is out of range.", code="INVALID_TERM") from exc
    if not math.isfinite(total_return):
        raise InvalidTermsError("Expected return is out of range.", code="INVALID_TERM")
    return total_return / terms.principal, total_return


def compute_periodic_payment(terms: CommitmentTerms, *, basis: str | None = None) -> CalculationResult:
    try:
        return CalculationResult(value=periodic_payment(terms, basis=basis))
    except InvalidTermsError as exc:
        return CalculationResult.undetermined(str(exc))


def compute_money_multiple(terms: CommitmentTerms, *, basis: str | None = None) -> CalculationResult:
    try:
        multiple, total_return = money_multiple(terms, basis=basis)
    except InvalidTermsError as exc:
        return CalculationResult.undetermined(str(exc))
    return CalculationResult(value=multiple, total_return=total_return)


__all__ = [
    "DEFAULT_TERM_YEARS",
    "MIN_REPAYMENT_YEARS",
    "years_between",
    "annuity_payment",
    "validate_terms",
    "resolve_total_years",
    "repayment_years",
    "periodic_payment",
    "money_multiple",
    "compute_periodic_payment",
    "compute_money_multiple",
]
