from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import Cadence, CommitmentKind, GraceUnit, Seniority
from infra.db.models import CommitmentORM, PaymentORM


def _register(cs, **overrides):
    values = dict(
        project_id="p-1",
        kind=CommitmentKind.BANK_CREDIT,
        name="Construction loan",
        principal=100_000.0,
        annual_rate_percent=6.0,
        start_date=date(2024, 1, 1),
        maturity_date=date(2029, 1, 1),
        lender_id="bank-1",
    )
    values.update(overrides)
    return cs.register_commitment(**values)


def test_register_persists_scheduled_payment_on_request(services):
    cs = services["commitment_service"]

    with_payment = _register(cs, persist_scheduled_payment=True)
    without_payment = _register(cs, name="Overdraft")

    assert cs.get_commitment(with_payment.id).scheduled_payment == pytest.approx(1933.28, abs=0.01)
    assert cs.get_commitment(without_payment.id).scheduled_payment is None


def test_term_edits_do_not_recompute_scheduled_payment_unless_asked(services):
    cs = services["commitment_service"]
    credit = _register(cs, persist_scheduled_payment=True)
    original = credit.scheduled_payment

    kept = cs.update_commitment(credit.id, annual_rate_percent=0.0)
    assert kept.scheduled_payment == original

    refreshed = cs.update_commitment(credit.id, recompute_scheduled_payment=True)
    assert refreshed.scheduled_payment == pytest.approx(1666.67, abs=0.01)


def test_amount_paid_is_not_editable(services):
    cs = services["commitment_service"]
    credit = _register(cs)

    with pytest.raises(ValidationError):
        cs.update_commitment(credit.id, amount_paid=10.0)


def test_register_validates_terms(services):
    cs = services["commitment_service"]

    with pytest.raises(ValidationError):
        _register(cs, principal=0)
    with pytest.raises(ValidationError):
        _register(cs, maturity_date=date(2023, 1, 1))
    with pytest.raises(ValidationError):
        _register(cs, cadence="weekly")
    assert cs.list_commitments_for_project("p-1") == []


def test_non_finite_rate_is_rejected(services):
    cs = services["commitment_service"]

    with pytest.raises(ValidationError) as exc:
        _register(cs, annual_rate_percent=float("nan"))
    assert exc.value.code == "INVALID_RATE"

    credit = _register(cs)
    with pytest.raises(ValidationError):
        cs.update_commitment(credit.id, annual_rate_percent=float("inf"))
    assert cs.get_commitment(credit.id).annual_rate_percent == 6.0


def test_investment_metadata_round_trips(services):
    cs = services["commitment_service"]
    investment = _register(
        cs,
        kind="INVESTMENT",
        name="Equity partner",
        principal=250_000.0,
        annual_rate_percent=8.0,
        lender_id="investor-7",
        grace_period=6,
        grace_unit="months",
        cadence="yearly",
        seniority="junior",
        percentage_stake=12.5,
        mortgage_insurance=1_500.0,
    )

    stored = cs.get_commitment(investment.id)
    assert stored.kind == CommitmentKind.INVESTMENT
    assert stored.grace_unit == GraceUnit.MONTHS
    assert stored.cadence == Cadence.YEARLY
    assert stored.seniority == Seniority.JUNIOR
    assert stored.percentage_stake == 12.5
    assert cs.estimate_money_multiple(investment.id).display(as_multiple=True) == "1.47x (147%)"
    assert [c.id for c in cs.list_commitments_for_project("p-1", kind=CommitmentKind.INVESTMENT)] == [
        investment.id
    ]


def test_delete_commitment_cascades_payments(services):
    cs = services["commitment_service"]
    ledger = services["ledger_reconciler"]
    credit = _register(cs)
    ledger.record_payment(credit.id, 1_000.0)
    ledger.record_payment(credit.id, 2_000.0)

    cs.delete_commitment(credit.id)

    assert ledger.list_payments(credit.id) == []
    with pytest.raises(NotFoundError):
        cs.get_commitment(credit.id)


def test_lender_exposure_and_risk_level(services):
    cs = services["commitment_service"]
    ledger = services["ledger_reconciler"]
    first = _register(cs, principal=300_000.0)
    _register(cs, name="Equipment loan", principal=150_000.0)
    _register(cs, name="Other bank", principal=999_999.0, lender_id="bank-2")
    ledger.record_payment(first.id, 50_000.0)

    exposure = cs.summarize_lender("bank-1", credit_limit=500_000.0)

    assert exposure.utilized == 450_000.0
    assert exposure.outstanding == 400_000.0
    assert exposure.available == 50_000.0
    assert exposure.utilization_percent == pytest.approx(90.0)
    assert exposure.risk_level == "HIGH"
    assert exposure.commitment_count == 2

    assert cs.summarize_lender("bank-1", credit_limit=700_000.0).risk_level == "MEDIUM"
    assert cs.summarize_lender("bank-1", credit_limit=1_000_000.0).risk_level == "LOW"
    assert cs.summarize_lender("bank-1", credit_limit=0.0).utilization_percent == 0.0


def test_schema_cascades_payments_when_owner_row_is_removed(services, session):
    cs = services["commitment_service"]
    ledger = services["ledger_reconciler"]
    credit = _register(cs)
    ledger.record_payment(credit.id, 100.0)

    session.query(CommitmentORM).filter_by(id=credit.id).delete()
    session.commit()

    assert session.query(PaymentORM).count() == 0
