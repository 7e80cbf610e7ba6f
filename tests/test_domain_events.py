from datetime import date

from core.events.domain_events import domain_events
from core.events.signal import Signal
from core.models import CommitmentKind, PaymentOwnerKind


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(project_id: str) -> None:
        seen.append(project_id)

    domain_events.budgets_changed.connect(_handler)
    domain_events.budgets_changed.emit("p-1")
    domain_events.budgets_changed.disconnect(_handler)
    domain_events.budgets_changed.emit("p-2")

    assert seen == ["p-1"]


def test_signal_emit_prunes_collected_weakref_callbacks():
    signal: Signal[str] = Signal()
    seen: list[str] = []

    class _CollectedProxy:
        def __init__(self) -> None:
            self.calls = 0

        def __call__(self, _payload: str) -> None:
            self.calls += 1
            raise ReferenceError("weakly-referenced object no longer exists")

    dead = _CollectedProxy()
    signal.connect(dead)
    signal.connect(seen.append)

    signal.emit("a")
    signal.emit("b")

    assert dead.calls == 1
    assert seen == ["a", "b"]
    assert signal.subscriber_count == 1


def test_signal_emit_keeps_other_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    try:
        signal.emit("x")
        assert False, "Expected RuntimeError to propagate"
    except RuntimeError as exc:
        assert str(exc) == "boom"


def test_ledger_operations_emit_change_events(services):
    cs = services["commitment_service"]
    bs = services["budget_service"]
    ledger = services["ledger_reconciler"]
    payments: list[str] = []
    budgets: list[str] = []
    commitments: list[str] = []

    domain_events.payments_changed.connect(payments.append)
    domain_events.budgets_changed.connect(budgets.append)
    domain_events.commitments_changed.connect(commitments.append)
    try:
        credit = cs.register_commitment(
            project_id="p-9",
            kind=CommitmentKind.BANK_CREDIT,
            name="Event loan",
            principal=1_000.0,
            annual_rate_percent=1.0,
            start_date=date(2024, 1, 1),
        )
        ledger.record_payment(credit.id, 10.0)
        phase = bs.create_container("p-9", "Event phase", budget_allocated=100.0)
        contract = bs.add_cost_assignment("p-9", "Sparky", 50.0, container_id=phase.id)
        ledger.record_payment(contract.id, 5.0, owner_kind=PaymentOwnerKind.COST_ASSIGNMENT)
        ledger.recompute_container(phase.id)
    finally:
        domain_events.payments_changed.disconnect(payments.append)
        domain_events.budgets_changed.disconnect(budgets.append)
        domain_events.commitments_changed.disconnect(commitments.append)

    assert commitments == ["p-9"]
    assert payments == [credit.id, contract.id]
    assert budgets == ["p-9", "p-9", "p-9"]
