"""create commitment ledger tables

Revision ID: 4b8e1c2d9f10
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


revision = "4b8e1c2d9f10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "commitments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("kind", sa.Enum("BANK_CREDIT", "INVESTMENT", name="commitmentkind"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("lender_id", sa.String(), nullable=True),
        sa.Column("principal", sa.Float(), nullable=False),
        sa.Column("annual_rate_percent", sa.Float(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("maturity_date", sa.Date(), nullable=True),
        sa.Column("grace_period", sa.Float(), nullable=False),
        sa.Column("grace_unit", sa.Enum("DAYS", "MONTHS", name="graceunit"), nullable=False),
        sa.Column("cadence", sa.Enum("MONTHLY", "YEARLY", name="cadence"), nullable=False),
        sa.Column("seniority", sa.Enum("SENIOR", "JUNIOR", name="seniority"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "PAID", "DEFAULTED", name="commitmentstatus"),
            nullable=False,
        ),
        sa.Column("amount_paid", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("scheduled_payment", sa.Float(), nullable=True),
        sa.Column("credit_type", sa.String(length=64), nullable=True),
        sa.Column("percentage_stake", sa.Float(), nullable=True),
        sa.Column("mortgage_insurance", sa.Float(), nullable=True),
        sa.Column("usage_expiration_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "budget_containers",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phase_number", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "status",
            sa.Enum("PLANNING", "ACTIVE", "COMPLETED", "ON_HOLD", name="phasestatus"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("budget_allocated", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("budget_used", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "cost_assignments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("container_id", sa.String(), nullable=True),
        sa.Column("assignee_name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "status",
            sa.Enum("DRAFT", "ACTIVE", "COMPLETED", "CANCELLED", name="contractstatus"),
            nullable=False,
        ),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("cost", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("budget_realized", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.ForeignKeyConstraint(["container_id"], ["budget_containers.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "payments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("commitment_id", sa.String(), nullable=True),
        sa.Column("cost_assignment_id", sa.String(), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.CheckConstraint(
            "(commitment_id IS NULL) <> (cost_assignment_id IS NULL)",
            name="ck_payments_single_owner",
        ),
        sa.ForeignKeyConstraint(["commitment_id"], ["commitments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["cost_assignment_id"], ["cost_assignments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_commitments_project", "commitments", ["project_id"], unique=False)
    op.create_index("idx_commitments_lender", "commitments", ["lender_id"], unique=False)
    op.create_index("idx_budget_containers_project", "budget_containers", ["project_id"], unique=False)
    op.create_index("idx_cost_assignments_container", "cost_assignments", ["container_id"], unique=False)
    op.create_index("idx_cost_assignments_project", "cost_assignments", ["project_id"], unique=False)
    op.create_index("idx_payments_commitment", "payments", ["commitment_id"], unique=False)
    op.create_index("idx_payments_cost_assignment", "payments", ["cost_assignment_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_payments_cost_assignment", table_name="payments")
    op.drop_index("idx_payments_commitment", table_name="payments")
    op.drop_index("idx_cost_assignments_project", table_name="cost_assignments")
    op.drop_index("idx_cost_assignments_container", table_name="cost_assignments")
    op.drop_index("idx_budget_containers_project", table_name="budget_containers")
    op.drop_index("idx_commitments_lender", table_name="commitments")
    op.drop_index("idx_commitments_project", table_name="commitments")
    op.drop_table("payments")
    op.drop_table("cost_assignments")
    op.drop_table("budget_containers")
    op.drop_table("commitments")
