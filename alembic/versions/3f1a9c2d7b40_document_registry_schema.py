"""document registry schema

Revision ID: 3f1a9c2d7b40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa

revision = "3f1a9c2d7b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- Enums ---
    personrole = sa.Enum("user", "admin", name="personrole")
    documenttype = sa.Enum("inbound", "outbound", name="documenttype")
    auditlogtype = sa.Enum("document", "auth", "system", name="auditlogtype")

    op.create_table(
        "people",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=120), nullable=True),
        sa.Column("role", personrole, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    number_sequences = op.create_table(
        "number_sequences",
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("type", documenttype, nullable=False),
        sa.Column("department", sa.String(length=120), nullable=False),
        sa.Column("sender", sa.String(length=255), nullable=True),
        sa.Column("recipient", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("attachments", sa.JSON(), nullable=False),
        sa.Column("owner_id", sa.UUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["people.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("number", name="uq_documents_number"),
    )
    op.create_index("ix_documents_department", "documents", ["department"])
    op.create_index("ix_documents_owner_id", "documents", ["owner_id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("number", sa.String(length=32), nullable=False),
        sa.Column("type", documenttype, nullable=False),
        sa.Column("department", sa.String(length=120), nullable=False),
        sa.Column("owner_id", sa.UUID(), nullable=True),
        sa.Column("used", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["people.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("number", name="uq_reservations_number"),
    )
    op.create_index(
        "ix_reservations_department_used", "reservations", ["department", "used"]
    )
    op.create_index("ix_reservations_owner_id", "reservations", ["owner_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("action", sa.Text(), nullable=False),
        sa.Column("type", auditlogtype, nullable=False),
        sa.Column("actor_id", sa.UUID(), nullable=True),
        sa.Column("actor_name", sa.String(length=160), nullable=False),
        sa.Column("actor_email", sa.String(length=255), nullable=False),
        sa.Column("actor_role", sa.String(length=40), nullable=True),
        sa.Column("actor_department", sa.String(length=120), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])

    op.bulk_insert(
        number_sequences,
        [
            {
                "name": "documents",
                "last_value": 0,
                "updated_at": datetime.now(timezone.utc),
            }
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_audit_logs_timestamp", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_reservations_owner_id", table_name="reservations")
    op.drop_index("ix_reservations_department_used", table_name="reservations")
    op.drop_table("reservations")

    op.drop_index("ix_documents_owner_id", table_name="documents")
    op.drop_index("ix_documents_department", table_name="documents")
    op.drop_table("documents")

    op.drop_table("number_sequences")
    op.drop_table("people")

    for enum_name in ["auditlogtype", "documenttype", "personrole"]:
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
