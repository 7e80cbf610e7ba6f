from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.budget import BudgetService
from core.services.commitment import CommitmentService
from core.exceptions import DomainError
from core.services.ledger import ContainerDrift, LedgerReconciler
from infra.db.repositories import (
    SqlAlchemyBudgetContainerRepository,
    SqlAlchemyCommitmentRepository,
    SqlAlchemyCostAssignmentRepository,
    SqlAlchemyPaymentRepository,
)
from infra.operational_support import OperationalSupport, bind_trace_id, get_operational_support

logger = logging.getLogger(__name__)

_DISABLED_TOKENS = {"0", "off", "false", "no"}


def repair_on_start_enabled() -> bool:
    raw = (os.getenv("CL_REPAIR_ON_START") or "on").strip().lower()
    return raw not in _DISABLED_TOKENS


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    ledger_reconciler: LedgerReconciler
    commitment_service: CommitmentService
    budget_service: BudgetService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "ledger_reconciler": self.ledger_reconciler,
            "commitment_service": self.commitment_service,
            "budget_service": self.budget_service,
        }


def run_startup_repair(
    reconciler: LedgerReconciler,
    support: OperationalSupport | None = None,
) -> list[ContainerDrift]:
    """Rebuild every phase budget and journal what had drifted."""
    recorder = support or get_operational_support()
    with bind_trace_id(None) as trace_id:
        try:
            drifts = reconciler.recompute_all_containers()
        except DomainError as exc:
            recorder.record_failure(exc, context="start-up ledger repair", trace_id=trace_id)
            raise
        recorder.emit_event(
            event_type="ledger.repair.completed",
            level="WARNING" if drifts else "INFO",
            trace_id=trace_id,
            message=f"Start-up ledger repair corrected {len(drifts)} phase budget(s)",
            data={
                "repaired": [
                    {
                        "container_id": d.container_id,
                        "previous_used": d.previous_used,
                        "current_used": d.current_used,
                    }
                    for d in drifts
                ]
            },
        )
    return drifts


def build_service_graph(
    session: Session,
    *,
    repair_on_start: bool | None = None,
    support: OperationalSupport | None = None,
) -> ServiceGraph:
    commitment_repo = SqlAlchemyCommitmentRepository(session)
    payment_repo = SqlAlchemyPaymentRepository(session)
    container_repo = SqlAlchemyBudgetContainerRepository(session)
    assignment_repo = SqlAlchemyCostAssignmentRepository(session)

    ledger_reconciler = LedgerReconciler(
        session,
        commitment_repo,
        payment_repo,
        container_repo,
        assignment_repo,
    )
    commitment_service = CommitmentService(session, commitment_repo, payment_repo)
    budget_service = BudgetService(
        session,
        container_repo,
        assignment_repo,
        payment_repo,
        ledger_reconciler,
    )

    if repair_on_start is None:
        repair_on_start = repair_on_start_enabled()
    if repair_on_start:
        run_startup_repair(ledger_reconciler, support)
    else:
        logger.info("Start-up ledger repair disabled")

    return ServiceGraph(
        session=session,
        ledger_reconciler=ledger_reconciler,
        commitment_service=commitment_service,
        budget_service=budget_service,
    )


def open_ledger(*, migrate: bool = True) -> ServiceGraph:
    """Open the per-user ledger database and wire the services on a fresh session."""
    from infra.db.base import SessionLocal, db_url
    from infra.migrate import run_migrations

    if migrate:
        run_migrations(db_url=db_url)
    return build_service_graph(SessionLocal())


__all__ = [
    "ServiceGraph",
    "build_service_graph",
    "open_ledger",
    "repair_on_start_enabled",
    "run_startup_repair",
]
