from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import ConcurrencyError, NotFoundError
from core.models import Commitment, CommitmentKind
from infra.db.repositories import SqlAlchemyCommitmentRepository


def _make_credit(services):
    return services["commitment_service"].register_commitment(
        project_id="p-1",
        kind=CommitmentKind.BANK_CREDIT,
        name="Term loan",
        principal=60_000.0,
        annual_rate_percent=4.5,
        start_date=date(2024, 1, 1),
        maturity_date=date(2030, 1, 1),
    )


def test_commitment_update_rejects_stale_expected_version(services):
    cs = services["commitment_service"]
    credit = _make_credit(services)

    updated = cs.update_commitment(credit.id, name="Term loan v2")

    assert updated.version == 2
    with pytest.raises(ConcurrencyError):
        cs.update_commitment(credit.id, name="stale", expected_version=1)


def test_repository_compare_and_swap_rejects_stale_snapshot(services, session):
    ledger = services["ledger_reconciler"]
    repo = SqlAlchemyCommitmentRepository(session)
    credit = _make_credit(services)
    snapshot = repo.get(credit.id)

    ledger.record_payment(credit.id, 1_000.0)
    snapshot.amount_paid = 50.0
    with pytest.raises(ConcurrencyError) as exc:
        repo.update(snapshot)
    session.rollback()

    assert exc.value.code == "STALE_WRITE"
    assert repo.get(credit.id).amount_paid == 1_000.0


def test_stale_payment_edit_leaves_ledger_untouched(services):
    ledger = services["ledger_reconciler"]
    cs = services["commitment_service"]
    credit = _make_credit(services)
    recorded = ledger.record_payment(credit.id, 300.0)
    ledger.edit_payment(recorded.payment.id, 400.0)

    with pytest.raises(ConcurrencyError):
        ledger.edit_payment(recorded.payment.id, 900.0, expected_version=1)

    assert cs.get_commitment(credit.id).amount_paid == 400.0
    assert ledger.list_payments(credit.id)[0].amount == 400.0


def test_phase_update_rejects_stale_expected_version(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Shell", budget_allocated=10_000.0)
    bs.add_cost_assignment("p-1", "Carpenter", 2_000.0, container_id=phase.id)

    # the recompute bumped the version
    with pytest.raises(ConcurrencyError):
        bs.update_container(phase.id, budget_allocated=12_000.0, expected_version=1)


def test_update_of_missing_row_is_not_found(session):
    repo = SqlAlchemyCommitmentRepository(session)

    ghost = Commitment.create(
        project_id="p-1",
        kind=CommitmentKind.INVESTMENT,
        name="Ghost",
        principal=1.0,
        annual_rate_percent=0.0,
        start_date=date(2024, 1, 1),
    )
    with pytest.raises(NotFoundError):
        repo.update(ghost)
