from __future__ import annotations

import pytest

from core.exceptions import ValidationError
from core.models import ContractStatus, PaymentOwnerKind


def test_phase_budget_used_follows_contracts(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Structure", budget_allocated=50_000.0)

    bs.add_cost_assignment("p-1", "Steel", 10_000.0, container_id=phase.id)
    middle = bs.add_cost_assignment("p-1", "Concrete", 20_000.0, container_id=phase.id)
    bs.add_cost_assignment("p-1", "Scaffolding", 5_000.0, container_id=phase.id)

    summary = bs.get_container_summary(phase.id)
    assert summary.budget_used == 35_000.0
    assert summary.budget_available == 15_000.0
    assert summary.assignment_count == 3
    assert summary.utilization_percent == pytest.approx(70.0)

    bs.delete_cost_assignment(middle.id)

    assert bs.get_container_summary(phase.id).budget_used == 15_000.0


def test_reassignment_recomputes_both_phases(services):
    bs = services["budget_service"]
    first = bs.create_container("p-1", "Phase 1", budget_allocated=30_000.0, phase_number=1)
    second = bs.create_container("p-1", "Phase 2", budget_allocated=30_000.0, phase_number=2)
    contract = bs.add_cost_assignment("p-1", "Electrics", 12_000.0, container_id=first.id)
    bs.add_cost_assignment("p-1", "Plumbing", 4_000.0, container_id=first.id)

    moved = bs.reassign_cost_assignment(contract.id, second.id)

    assert moved.container_id == second.id
    assert bs.get_container_summary(first.id).budget_used == 4_000.0
    assert bs.get_container_summary(second.id).budget_used == 12_000.0

    bs.reassign_cost_assignment(contract.id, None)
    assert bs.get_container_summary(second.id).budget_used == 0.0


def test_cost_edit_recomputes_phase(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Finishing", budget_allocated=10_000.0)
    contract = bs.add_cost_assignment("p-1", "Painter", 3_000.0, container_id=phase.id)

    bs.update_cost_assignment(contract.id, cost=4_500.0)

    assert bs.get_container_summary(phase.id).budget_used == 4_500.0


def test_only_draft_and_active_contracts_count(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Roof", budget_allocated=20_000.0)
    bs.add_cost_assignment("p-1", "Roofer", 8_000.0, container_id=phase.id, status=ContractStatus.DRAFT)
    done = bs.add_cost_assignment("p-1", "Gutters", 2_000.0, container_id=phase.id)
    bs.add_cost_assignment(
        "p-1", "Skylights", 6_000.0, container_id=phase.id, status=ContractStatus.CANCELLED
    )

    assert bs.get_container_summary(phase.id).budget_used == 10_000.0

    bs.update_cost_assignment(done.id, status="COMPLETED")

    summary = bs.get_container_summary(phase.id)
    assert summary.budget_used == 8_000.0
    assert summary.assignment_count == 3


def test_over_allocation_is_a_warning_not_an_error(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Excavation", budget_allocated=5_000.0)

    bs.add_cost_assignment("p-1", "Digger hire", 7_500.0, container_id=phase.id)

    summary = bs.get_container_summary(phase.id)
    assert summary.over_allocated is True
    assert summary.budget_available == -2_500.0


def test_budget_used_cannot_be_edited_directly(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Landscaping", budget_allocated=1_000.0)

    with pytest.raises(ValidationError):
        bs.update_container(phase.id, budget_used=999.0)

    updated = bs.update_container(phase.id, budget_allocated=2_000.0, name=" Gardens ")
    assert updated.name == "Gardens"
    assert updated.budget_used == 0.0


def test_deleting_phase_unassigns_its_contracts(services):
    bs = services["budget_service"]
    phase = bs.create_container("p-1", "Temporary works", budget_allocated=3_000.0)
    contract = bs.add_cost_assignment("p-1", "Fencing", 1_200.0, container_id=phase.id)

    bs.delete_container(phase.id)

    remaining = bs.list_cost_assignments("p-1")
    assert [c.id for c in remaining] == [contract.id]
    assert remaining[0].container_id is None
    assert bs.list_containers("p-1") == []


def test_deleting_contract_cascades_its_payments(services):
    bs = services["budget_service"]
    ledger = services["ledger_reconciler"]
    phase = bs.create_container("p-1", "MEP", budget_allocated=9_000.0)
    contract = bs.add_cost_assignment("p-1", "HVAC", 6_000.0, container_id=phase.id)
    ledger.record_payment(contract.id, 1_000.0, owner_kind=PaymentOwnerKind.COST_ASSIGNMENT)

    bs.delete_cost_assignment(contract.id)

    assert ledger.list_payments(contract.id, PaymentOwnerKind.COST_ASSIGNMENT) == []
    assert bs.get_container_summary(phase.id).budget_used == 0.0


def test_contract_cannot_join_another_projects_phase(services):
    bs = services["budget_service"]
    foreign = bs.create_container("p-2", "Other site", budget_allocated=1_000.0)

    with pytest.raises(ValidationError):
        bs.add_cost_assignment("p-1", "Glazier", 500.0, container_id=foreign.id)

    assert bs.get_container_summary(foreign.id).budget_used == 0.0
    assert bs.list_cost_assignments("p-1") == []
