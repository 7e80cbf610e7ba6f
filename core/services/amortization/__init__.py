from .adapters import (
    preview_credit_payment,
    preview_investment,
    terms_from_commitment,
    terms_from_credit_form,
    terms_from_investment_form,
)
from .calculator import (
    DEFAULT_TERM_YEARS,
    MIN_REPAYMENT_YEARS,
    annuity_payment,
    compute_money_multiple,
    compute_periodic_payment,
    money_multiple,
    periodic_payment,
    years_between,
)
from .models import CalculationResult, CommitmentTerms, RepaymentPlan
from .schedule import build_repayment_plan

__all__ = [
    "CommitmentTerms",
    "CalculationResult",
    "RepaymentPlan",
    "DEFAULT_TERM_YEARS",
    "MIN_REPAYMENT_YEARS",
    "years_between",
    "annuity_payment",
    "periodic_payment",
    "money_multiple",
    "compute_periodic_payment",
    "compute_money_multiple",
    "build_repayment_plan",
    "terms_from_commitment",
    "terms_from_credit_form",
    "terms_from_investment_form",
    "preview_credit_payment",
    "preview_investment",
]
