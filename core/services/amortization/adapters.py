from __future__ import annotations

from datetime import date
from typing import Any

from core.domain.commitment import Commitment
from core.domain.enums import Cadence, GraceUnit
from core.exceptions import InvalidTermsError
from core.services.amortization.calculator import compute_money_multiple, compute_periodic_payment
from core.services.amortization.models import CalculationResult, CommitmentTerms

DAYS_PER_GRACE_MONTH = 365.0 / 12


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidTermsError(f"Unsupported date value: {value!r}", code="INVALID_DATE") from exc
    raise InvalidTermsError(f"Unsupported date value: {value!r}", code="INVALID_DATE")


def _as_float(value: Any, *, default: float = 0.0) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidTermsError(f"Not a number: {value!r}", code="INVALID_NUMBER") from exc


def _as_cadence(value: Any, default: Cadence) -> Cadence:
    if isinstance(value, Cadence):
        return value
    token = str(value or "").strip().lower()
    if not token:
        return default
    try:
        return Cadence(token)
    except ValueError as exc:
        raise InvalidTermsError(f"Unsupported payment cadence: {value!r}", code="INVALID_CADENCE") from exc


def grace_to_days(grace_period: float, unit: GraceUnit) -> float:
    if GraceUnit(unit) == GraceUnit.MONTHS:
        return (grace_period or 0.0) * DAYS_PER_GRACE_MONTH
    return float(grace_period or 0.0)


def terms_from_commitment(commitment: Commitment) -> CommitmentTerms:
    return CommitmentTerms(
        principal=commitment.principal,
        annual_rate_percent=commitment.annual_rate_percent,
        start_date=commitment.start_date,
        maturity_date=commitment.maturity_date,
        grace_period_days=grace_to_days(commitment.grace_period, commitment.grace_unit),
        cadence=commitment.cadence,
    )


def terms_from_credit_form(
    *,
    amount: Any,
    interest_rate: Any,
    start_date: Any,
    maturity_date: Any = None,
    grace_period: Any = 0,
    repayment_type: Any = Cadence.MONTHLY,
) -> CommitmentTerms:
    """Bank credit form: grace period is entered in days."""
    start = _parse_date(start_date)
    principal = _as_float(amount)
    if not principal or start is None:
        raise InvalidTermsError("Enter amount and start date to calculate", code="INCOMPLETE_TERMS")
    return CommitmentTerms(
        principal=principal,
        annual_rate_percent=_as_float(interest_rate),
        start_date=start,
        maturity_date=_parse_date(maturity_date),
        grace_period_days=_as_float(grace_period),
        cadence=_as_cadence(repayment_type, Cadence.MONTHLY),
    )


def terms_from_investment_form(
    *,
    amount: Any,
    expected_return: Any,
    investment_date: Any,
    maturity_date: Any = None,
    grace_period: Any = 0,
    payment_schedule: Any = Cadence.YEARLY,
) -> CommitmentTerms:
    """Investment form: grace period is entered in months."""
    start = _parse_date(investment_date)
    principal = _as_float(amount)
    if not principal or start is None:
        raise InvalidTermsError("Enter amount, dates, and rate to calculate", code="INCOMPLETE_TERMS")
    return CommitmentTerms(
        principal=principal,
        annual_rate_percent=_as_float(expected_return),
        start_date=start,
        maturity_date=_parse_date(maturity_date),
        grace_period_days=grace_to_days(_as_float(grace_period), GraceUnit.MONTHS),
        cadence=_as_cadence(payment_schedule, Cadence.YEARLY),
    )


def preview_credit_payment(**form: Any) -> CalculationResult:
    try:
        terms = terms_from_credit_form(**form)
    except InvalidTermsError as exc:
        return CalculationResult.undetermined(str(exc))
    return compute_periodic_payment(terms)


def preview_investment(**form: Any) -> tuple[CalculationResult, CalculationResult]:
    """Return the periodic cashflow and the money multiple for an investment form."""
    try:
        terms = terms_from_investment_form(**form)
    except InvalidTermsError as exc:
        undetermined = CalculationResult.undetermined(str(exc))
        return undetermined, undetermined
    return compute_periodic_payment(terms), compute_money_multiple(terms)


__all__ = [
    "grace_to_days",
    "terms_from_commitment",
    "terms_from_credit_form",
    "terms_from_investment_form",
    "preview_credit_payment",
    "preview_investment",
]
