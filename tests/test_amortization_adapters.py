from __future__ import annotations

from datetime import date

import pytest

from core.models import Cadence, Commitment, CommitmentKind, GraceUnit
from core.services.amortization import (
    annuity_payment,
    preview_credit_payment,
    preview_investment,
    terms_from_commitment,
    terms_from_investment_form,
)


def test_credit_form_preview_accepts_raw_field_values():
    result = preview_credit_payment(
        amount="100000",
        interest_rate="6",
        start_date="2024-01-01",
        maturity_date="2029-01-01",
        grace_period="",
        repayment_type="monthly",
    )

    assert result.value == pytest.approx(1933.28, abs=0.01)


def test_credit_form_preview_reports_missing_fields():
    result = preview_credit_payment(amount="", interest_rate="6", start_date="2024-01-01")

    assert not result.is_determined
    assert result.display() == "Enter amount and start date to calculate"


def test_credit_form_preview_rejects_unknown_cadence():
    result = preview_credit_payment(
        amount=1000,
        interest_rate=5,
        start_date=date(2024, 1, 1),
        repayment_type="fortnightly",
    )

    assert result.value is None
    assert "fortnightly" in result.reason


def test_investment_form_grace_is_in_months():
    terms = terms_from_investment_form(
        amount=80_000,
        expected_return=7,
        investment_date="2024-01-01",
        maturity_date="2029-01-01",
        grace_period=12,
    )

    assert terms.grace_period_days == pytest.approx(365.0)
    assert terms.cadence == Cadence.YEARLY

    payment, multiple = preview_investment(
        amount=80_000,
        expected_return=7,
        investment_date="2024-01-01",
        maturity_date="2029-01-01",
        grace_period=12,
    )
    assert payment.value == pytest.approx(annuity_payment(80_000, 0.07, 4))
    assert multiple.value == pytest.approx(1.07 ** 5)


def test_investment_preview_with_bad_date_is_undetermined():
    payment, multiple = preview_investment(
        amount=10_000,
        expected_return=5,
        investment_date="not-a-date",
    )

    assert payment.value is None
    assert multiple.value is None


def test_commitment_terms_convert_grace_units():
    commitment = Commitment.create(
        project_id="p-1",
        kind=CommitmentKind.INVESTMENT,
        name="Seed round",
        principal=50_000,
        annual_rate_percent=9,
        start_date=date(2024, 1, 1),
        grace_period=6,
        grace_unit=GraceUnit.MONTHS,
    )

    terms = terms_from_commitment(commitment)

    assert terms.grace_period_days == pytest.approx(182.5)
    assert terms.principal == 50_000
