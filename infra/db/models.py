# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.models import (
    Cadence,
    CommitmentKind,
    CommitmentStatus,
    ContractStatus,
    GraceUnit,
    PhaseStatus,
    Seniority,
)


class CommitmentORM(Base):
    __tablename__ = "commitments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[CommitmentKind] = mapped_column(SAEnum(CommitmentKind), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    lender_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)  # bank or investor

    principal: Mapped[float] = mapped_column(Float, nullable=False)
    annual_rate_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    maturity_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    grace_period: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    grace_unit: Mapped[GraceUnit] = mapped_column(SAEnum(GraceUnit), nullable=False, default=GraceUnit.DAYS)
    cadence: Mapped[Cadence] = mapped_column(SAEnum(Cadence), nullable=False, default=Cadence.MONTHLY)
    seniority: Mapped[Seniority] = mapped_column(SAEnum(Seniority), nullable=False, default=Seniority.SENIOR)
    status: Mapped[CommitmentStatus] = mapped_column(
        SAEnum(CommitmentStatus), nullable=False, default=CommitmentStatus.ACTIVE
    )

    amount_paid: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    scheduled_payment: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    credit_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    percentage_stake: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    mortgage_insurance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    usage_expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_commitments_project", CommitmentORM.project_id)
Index("idx_commitments_lender", CommitmentORM.lender_id)


class BudgetContainerORM(Base):
    __tablename__ = "budget_containers"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    phase_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[PhaseStatus] = mapped_column(SAEnum(PhaseStatus), nullable=False, default=PhaseStatus.PLANNING)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    budget_allocated: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    budget_used: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # derived
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_budget_containers_project", BudgetContainerORM.project_id)


class CostAssignmentORM(Base):
    __tablename__ = "cost_assignments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    container_id: Mapped[Optional[str]] = mapped_column(
        String,
        ForeignKey("budget_containers.id", ondelete="SET NULL"),
        nullable=True,
    )
    assignee_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    status: Mapped[ContractStatus] = mapped_column(
        SAEnum(ContractStatus), nullable=False, default=ContractStatus.ACTIVE
    )
    deadline: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    budget_realized: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # derived
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_cost_assignments_container", CostAssignmentORM.container_id)
Index("idx_cost_assignments_project", CostAssignmentORM.project_id)


class PaymentORM(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint(
            "(commitment_id IS NULL) <> (cost_assignment_id IS NULL)",
            name="ck_payments_single_owner",
        ),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    commitment_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("commitments.id", ondelete="CASCADE"), nullable=True
    )
    cost_assignment_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("cost_assignments.id", ondelete="CASCADE"), nullable=True
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_payments_commitment", PaymentORM.commitment_id)
Index("idx_payments_cost_assignment", PaymentORM.cost_assignment_id)
