"""create_verification_tables

Revision ID: 1f4e2a7c9b30
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "1f4e2a7c9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "stores",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("contact_email", sa.String(length=320), nullable=True),
        sa.Column("business_name", sa.String(length=200), nullable=True),
        sa.Column("business_type", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "verification_status",
            sa.Enum("pending", "verified", "rejected", name="verification_status", native_enum=False, length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stores_owner_id"), "stores", ["owner_id"], unique=False)
    op.create_index(op.f("ix_stores_verification_status"), "stores", ["verification_status"], unique=False)

    op.create_table(
        "verification_documents",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("store_id", sa.String(length=36), nullable=False),
        sa.Column(
            "document_type",
            sa.Enum(
                "business_license",
                "tax_certificate",
                "identity_document",
                "proof_of_address",
                "other",
                name="document_type",
                native_enum=False,
                length=20,
            ),
            nullable=False,
        ),
        sa.Column("document_url", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "verified", "rejected", name="document_status", native_enum=False, length=20),
            nullable=False,
            server_default="pending",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_verification_documents_store_id"), "verification_documents", ["store_id"], unique=False
    )

    op.create_table(
        "verification_badges",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("store_id", sa.String(length=36), nullable=False),
        sa.Column(
            "badge_type",
            sa.Enum("topbar", "footer", name="badge_type", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("registration_number", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "badge_type", name="uq_verification_badges_store_type"),
    )
    op.create_index(op.f("ix_verification_badges_store_id"), "verification_badges", ["store_id"], unique=False)
    op.create_index(
        op.f("ix_verification_badges_registration_number"),
        "verification_badges",
        ["registration_number"],
        unique=True,
    )

    op.create_table(
        "scam_reports",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("reporter_id", sa.String(length=64), nullable=False),
        sa.Column("reported_email", sa.String(length=320), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("evidence_url", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "reviewed", "dismissed", name="report_status", native_enum=False, length=20),
            nullable=False,
            server_default="pending",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_scam_reports_reporter_id"), "scam_reports", ["reporter_id"], unique=False)
    op.create_index(op.f("ix_scam_reports_reported_email"), "scam_reports", ["reported_email"], unique=False)
    op.create_index(op.f("ix_scam_reports_status"), "scam_reports", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_scam_reports_status"), table_name="scam_reports")
    op.drop_index(op.f("ix_scam_reports_reported_email"), table_name="scam_reports")
    op.drop_index(op.f("ix_scam_reports_reporter_id"), table_name="scam_reports")
    op.drop_table("scam_reports")
    op.drop_index(op.f("ix_verification_badges_registration_number"), table_name="verification_badges")
    op.drop_index(op.f("ix_verification_badges_store_id"), table_name="verification_badges")
    op.drop_table("verification_badges")
    op.drop_index(op.f("ix_verification_documents_store_id"), table_name="verification_documents")
    op.drop_table("verification_documents")
    op.drop_index(op.f("ix_stores_verification_status"), table_name="stores")
    op.drop_index(op.f("ix_stores_owner_id"), table_name="stores")
    op.drop_table("stores")
