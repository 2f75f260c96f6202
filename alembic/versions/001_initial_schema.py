"""001 – Initial schema: employees, entitlements, leave requests, blocked days,
agent files, audit trail.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000+00:00
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

HALF_DAY_VALUES = ("full", "am", "pm")
LEAVE_STATUS_VALUES = ("pending", "approved", "declined", "cancelled")


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True,
    )


def _half_day(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.Enum(*HALF_DAY_VALUES, name="half_day", native_enum=False, length=10),
        nullable=False,
        server_default="full",
    )


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── 1. employees ──────────────────────────────────────────────────────
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("manager_email", sa.String(320)),
        sa.Column("onedrive_folder_url", sa.Text),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_employees_manager", "employees", ["manager_email"])

    # ── 2. leave_entitlements ─────────────────────────────────────────────
    op.create_table(
        "leave_entitlements",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("annual_allowance_days", sa.Numeric(5, 1), nullable=False),
        sa.Column(
            "carryover_days", sa.Numeric(5, 1), nullable=False, server_default=sa.text("0"),
        ),
        sa.UniqueConstraint("employee_id", "year", name="uq_leave_entitlement"),
    )

    # ── 3. leave_requests ─────────────────────────────────────────────────
    op.create_table(
        "leave_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        _half_day("start_half_day"),
        _half_day("end_half_day"),
        sa.Column("days_requested", sa.Numeric(5, 1), nullable=False),
        sa.Column("reason", sa.Text),
        sa.Column(
            "status",
            sa.Enum(*LEAVE_STATUS_VALUES, name="leave_status", native_enum=False, length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("manager_notes", sa.Text),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_range"),
    )
    op.create_index("idx_leave_requests_employee", "leave_requests", ["employee_id"])
    op.create_index("idx_leave_requests_status", "leave_requests", ["status"])

    # ── 4. blocked_days ───────────────────────────────────────────────────
    op.create_table(
        "blocked_days",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("blocked_date", sa.Date, nullable=False, unique=True),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("created_by", sa.String(320), nullable=False),
        _timestamp("created_at"),
    )

    # ── 5. agent_files ────────────────────────────────────────────────────
    op.create_table(
        "agent_files",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("file_description", sa.Text),
        sa.Column("onedrive_file_url", sa.Text, nullable=False),
        sa.Column("file_size_bytes", sa.BigInteger),
        sa.Column("file_type", sa.String(100)),
        _timestamp("uploaded_at"),
    )
    op.create_index("ix_agent_files_employee_id", "agent_files", ["employee_id"])

    # ── 6. audit_trail ────────────────────────────────────────────────────
    op.create_table(
        "audit_trail",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("actor_email", sa.String(320)),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.Integer, nullable=False),
        sa.Column("old_values", sa.JSON),
        sa.Column("new_values", sa.JSON),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_trail_entity", "audit_trail", ["entity_type", "entity_id"])
    op.create_index("ix_audit_trail_actor_email", "audit_trail", ["actor_email"])


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    op.drop_index("ix_audit_trail_actor_email", table_name="audit_trail")
    op.drop_index("ix_audit_trail_entity", table_name="audit_trail")
    op.drop_table("audit_trail")

    op.drop_index("ix_agent_files_employee_id", table_name="agent_files")
    op.drop_table("agent_files")

    op.drop_table("blocked_days")

    op.drop_index("idx_leave_requests_status", table_name="leave_requests")
    op.drop_index("idx_leave_requests_employee", table_name="leave_requests")
    op.drop_table("leave_requests")

    op.drop_table("leave_entitlements")

    op.drop_index("idx_employees_manager", table_name="employees")
    op.drop_table("employees")
