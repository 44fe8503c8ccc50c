"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-03-01 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Tenant-owned tables, in creation order
_TENANT_TABLES = (
    "meetings",
    "inspections",
    "audits",
    "measures",
    "scheduled_reminders",
    "incidents",
    "osha_logs",
    "chemicals",
    "environmental_aspects",
    "environmental_measurements",
    "workers_comp_claims",
    "emr_history",
)


def _base_columns(table: str, tenant: bool = True) -> list:
    """id, tenant_id and timestamp columns shared by every mixin-based model."""
    columns = [sa.Column("id", sa.String(length=36), nullable=False)]
    if tenant:
        columns.append(sa.Column("tenant_id", sa.String(length=36), nullable=False))
    columns += [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f(f"pk_{table}")),
    ]
    if tenant:
        columns.append(
            sa.ForeignKeyConstraint(
                ["tenant_id"], ["tenants.id"], name=op.f(f"fk_{table}_tenant_id_tenants"), ondelete="CASCADE"
            )
        )
    return columns


def _index(table: str, *columns: str, unique: bool = False) -> None:
    op.create_index(op.f(f"ix_{table}_{'_'.join(columns)}"), table, list(columns), unique=unique)


def upgrade() -> None:
    # ── Tenancy ─────────────────────────────────────────────────────────
    op.create_table(
        "tenants",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("org_number", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_base_columns("tenants", tenant=False),
    )
    _index("tenants", "slug", unique=True)

    op.create_table(
        "users",
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("notify_by_email", sa.Boolean(), nullable=False),
        sa.Column("notify_by_sms", sa.Boolean(), nullable=False),
        sa.Column("reminder_days_before", sa.Integer(), nullable=False),
        sa.Column("notify_meetings", sa.Boolean(), nullable=False),
        sa.Column("notify_inspections", sa.Boolean(), nullable=False),
        sa.Column("notify_audits", sa.Boolean(), nullable=False),
        sa.Column("notify_measures", sa.Boolean(), nullable=False),
        *_base_columns("users", tenant=False),
    )
    _index("users", "email", unique=True)

    op.create_table(
        "user_tenants",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name=op.f("fk_user_tenants_user_id_users"), ondelete="CASCADE"
        ),
        *_base_columns("user_tenants"),
        sa.UniqueConstraint("user_id", "tenant_id", name=op.f("uq_user_tenants_user_id")),
    )
    _index("user_tenants", "user_id")
    _index("user_tenants", "tenant_id")

    # ── Scheduled activities ────────────────────────────────────────────
    op.create_table(
        "meetings",
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("meeting_type", sa.String(length=30), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("meeting_link", sa.String(length=500), nullable=True),
        sa.Column("agenda", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_base_columns("meetings"),
    )
    _index("meetings", "scheduled_date")

    op.create_table(
        "inspections",
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("inspection_type", sa.String(length=30), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_base_columns("inspections"),
    )
    _index("inspections", "scheduled_date")

    op.create_table(
        "audits",
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("audit_type", sa.String(length=20), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("area", sa.String(length=255), nullable=False),
        sa.Column("scope", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_base_columns("audits"),
    )
    _index("audits", "scheduled_date")

    op.create_table(
        "measures",
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("responsible_id", sa.String(length=36), nullable=True),
        sa.Column("incident_id", sa.String(length=36), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_base_columns("measures"),
    )
    _index("measures", "due_at")

    op.create_table(
        "scheduled_reminders",
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("entity_type", sa.String(length=20), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_via_email", sa.Boolean(), nullable=False),
        sa.Column("sent_via_sms", sa.Boolean(), nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name=op.f("fk_scheduled_reminders_user_id_users"), ondelete="SET NULL"
        ),
        *_base_columns("scheduled_reminders"),
    )
    _index("scheduled_reminders", "user_id")
    op.create_index("ix_scheduled_reminders_entity", "scheduled_reminders", ["entity_type", "entity_id"])
    op.create_index("ix_scheduled_reminders_due", "scheduled_reminders", ["status", "scheduled_for"])

    # ── Incidents and OSHA recordkeeping ────────────────────────────────
    op.create_table(
        "incidents",
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("incident_type", sa.String(length=20), nullable=False),
        sa.Column("severity", sa.Integer(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("employee_name", sa.String(length=255), nullable=True),
        sa.Column("reported_by", sa.String(length=255), nullable=False),
        sa.Column("witness_name", sa.String(length=255), nullable=True),
        sa.Column("immediate_action", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("root_cause", sa.Text(), nullable=True),
        sa.Column("contributing_factors", sa.Text(), nullable=True),
        sa.Column("investigated_by", sa.String(length=255), nullable=True),
        sa.Column("investigated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_by", sa.String(length=255), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("effectiveness_review", sa.Text(), nullable=True),
        sa.Column("lessons_learned", sa.Text(), nullable=True),
        sa.Column("osha_recordable", sa.Boolean(), nullable=False),
        sa.Column("osha_classification", sa.String(length=30), nullable=True),
        sa.Column("event_type", sa.String(length=20), nullable=True),
        sa.Column("illness_type", sa.String(length=30), nullable=True),
        sa.Column("days_away_from_work", sa.Integer(), nullable=True),
        sa.Column("days_on_restriction", sa.Integer(), nullable=True),
        sa.Column("days_on_transfer", sa.Integer(), nullable=True),
        sa.Column("body_part_affected", sa.String(length=100), nullable=True),
        sa.Column("nature_of_injury", sa.String(length=255), nullable=True),
        sa.Column("privacy_case_flag", sa.Boolean(), nullable=False),
        sa.Column("osha_300_log_year", sa.Integer(), nullable=True),
        sa.Column("osha_301_completed_at", sa.DateTime(timezone=True), nullable=True),
        *_base_columns("incidents"),
    )
    _index("incidents", "occurred_at")
    _index("incidents", "status")
    _index("incidents", "osha_recordable")
    _index("incidents", "osha_300_log_year")

    op.create_table(
        "osha_logs",
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_hours_worked", sa.Float(), nullable=False),
        sa.Column("avg_employee_count", sa.Integer(), nullable=False),
        sa.Column("total_deaths", sa.Integer(), nullable=False),
        sa.Column("total_days_away", sa.Integer(), nullable=False),
        sa.Column("total_restricted", sa.Integer(), nullable=False),
        sa.Column("total_transfer", sa.Integer(), nullable=False),
        sa.Column("total_other_recordable", sa.Integer(), nullable=False),
        sa.Column("total_injuries", sa.Integer(), nullable=False),
        sa.Column("total_skin_disorders", sa.Integer(), nullable=False),
        sa.Column("total_respiratory_conditions", sa.Integer(), nullable=False),
        sa.Column("total_poisonings", sa.Integer(), nullable=False),
        sa.Column("total_hearing_loss", sa.Integer(), nullable=False),
        sa.Column("total_other_illnesses", sa.Integer(), nullable=False),
        sa.Column("trir", sa.Float(), nullable=True),
        sa.Column("dart_rate", sa.Float(), nullable=True),
        sa.Column("ltir", sa.Float(), nullable=True),
        sa.Column("severity_rate", sa.Float(), nullable=True),
        sa.Column("certified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("certified_by", sa.String(length=255), nullable=True),
        sa.Column("certified_title", sa.String(length=255), nullable=True),
        sa.Column("posted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("posted_by", sa.String(length=255), nullable=True),
        *_base_columns("osha_logs"),
        sa.UniqueConstraint("tenant_id", "year", name=op.f("uq_osha_logs_tenant_id")),
    )

    # ── Chemical inventory ──────────────────────────────────────────────
    op.create_table(
        "chemicals",
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("supplier", sa.String(length=255), nullable=True),
        sa.Column("cas_number", sa.String(length=20), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("sds_file_name", sa.String(length=255), nullable=True),
        sa.Column("sds_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sds_source", sa.String(length=50), nullable=True),
        sa.Column("hazard_statements", sa.Text(), nullable=True),
        sa.Column("signal_word", sa.String(length=20), nullable=True),
        sa.Column("warning_pictograms", sa.JSON(), nullable=True),
        sa.Column("required_ppe", sa.JSON(), nullable=True),
        sa.Column("contains_isocyanates", sa.Boolean(), nullable=False),
        sa.Column("isocyanate_details", sa.Text(), nullable=True),
        *_base_columns("chemicals"),
    )
    _index("chemicals", "product_name")
    _index("chemicals", "cas_number")
    _index("chemicals", "status")

    # ── Environment (ISO 14001) ─────────────────────────────────────────
    op.create_table(
        "environmental_aspects",
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("process", sa.String(length=255), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("category", sa.String(length=30), nullable=False),
        sa.Column("impact_type", sa.String(length=20), nullable=False),
        sa.Column("severity", sa.Integer(), nullable=False),
        sa.Column("likelihood", sa.Integer(), nullable=False),
        sa.Column("significance_score", sa.Integer(), nullable=False),
        sa.Column("legal_requirement", sa.Text(), nullable=True),
        sa.Column("control_measures", sa.Text(), nullable=True),
        sa.Column("monitoring_method", sa.Text(), nullable=True),
        sa.Column("monitoring_frequency", sa.String(length=20), nullable=True),
        sa.Column("owner_id", sa.String(length=36), nullable=True),
        sa.Column("goal_id", sa.String(length=36), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("next_review_date", sa.DateTime(timezone=True), nullable=True),
        *_base_columns("environmental_aspects"),
    )
    _index("environmental_aspects", "significance_score")

    op.create_table(
        "environmental_measurements",
        sa.Column("aspect_id", sa.String(length=36), nullable=False),
        sa.Column("parameter", sa.String(length=255), nullable=False),
        sa.Column("unit", sa.String(length=30), nullable=True),
        sa.Column("method", sa.String(length=255), nullable=True),
        sa.Column("measured_value", sa.Float(), nullable=False),
        sa.Column("limit_value", sa.Float(), nullable=True),
        sa.Column("target_value", sa.Float(), nullable=True),
        sa.Column("measurement_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("responsible_id", sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(
            ["aspect_id"],
            ["environmental_aspects.id"],
            name=op.f("fk_environmental_measurements_aspect_id_environmental_aspects"),
            ondelete="CASCADE",
        ),
        *_base_columns("environmental_measurements"),
    )
    _index("environmental_measurements", "aspect_id")

    # ── Workers' compensation ───────────────────────────────────────────
    op.create_table(
        "workers_comp_claims",
        sa.Column("incident_id", sa.String(length=36), nullable=True),
        sa.Column("claim_number", sa.String(length=100), nullable=False),
        sa.Column("carrier_name", sa.String(length=255), nullable=False),
        sa.Column("claimant_name", sa.String(length=255), nullable=False),
        sa.Column("injury_date", sa.Date(), nullable=False),
        sa.Column("reported_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("reserve_amount", sa.Float(), nullable=True),
        sa.Column("paid_amount", sa.Float(), nullable=True),
        sa.Column("lost_work_days", sa.Integer(), nullable=True),
        sa.Column("return_to_work_date", sa.Date(), nullable=True),
        sa.Column("adjuster_name", sa.String(length=255), nullable=True),
        sa.Column("adjuster_phone", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        *_base_columns("workers_comp_claims"),
    )
    _index("workers_comp_claims", "claim_number")
    _index("workers_comp_claims", "injury_date")
    _index("workers_comp_claims", "status")

    op.create_table(
        "emr_history",
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("emr_value", sa.Float(), nullable=False),
        sa.Column("carrier", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_base_columns("emr_history"),
        sa.UniqueConstraint("tenant_id", "year", name=op.f("uq_emr_history_tenant_id")),
    )

    for table in _TENANT_TABLES:
        _index(table, "tenant_id")

    # ── Audit log (no tenant FK, no updated_at) ─────────────────────────
    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tenant_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("ip_address", sa.String(length=50), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("resource", sa.String(length=200), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_audit_log")),
    )
    for column in ("tenant_id", "user_id", "action", "resource", "created_at"):
        _index("audit_log", column)


def downgrade() -> None:
    op.drop_table("audit_log")
    for table in reversed(_TENANT_TABLES):
        op.drop_table(table)
    op.drop_table("user_tenants")
    op.drop_table("users")
    op.drop_table("tenants")
