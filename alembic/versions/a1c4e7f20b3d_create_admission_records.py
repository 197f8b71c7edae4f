"""create admission_records table

Revision ID: a1c4e7f20b3d
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration:
1. Creates the fee status enum types used by the three fee columns
2. Creates the admission_records table
3. Adds unique indexes on application_id and mobile, plus a name index
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c4e7f20b3d"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

FEE_STATUS_TYPES = ("reg_fee_status", "app_fee_status", "mess_fee_status")


def _fee_status_enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM("Pending", "Paid", name=name, create_type=False)


def upgrade() -> None:
    """Create admission_records table and its enum types."""
    bind = op.get_bind()
    for name in FEE_STATUS_TYPES:
        _fee_status_enum(name).create(bind, checkfirst=True)

    op.create_table(
        "admission_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("application_id", sa.String(length=32), nullable=False),
        # Registrant
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("aadhaar", sa.String(length=20), nullable=True),
        sa.Column("dob", sa.String(length=20), nullable=False),
        sa.Column("course", sa.String(length=200), nullable=True),
        sa.Column("mobile", sa.String(length=20), nullable=False),
        sa.Column("referral", sa.String(length=100), nullable=True),
        # Contact
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=100), nullable=True),
        sa.Column("pincode", sa.String(length=12), nullable=True),
        # Fees and hostel
        sa.Column(
            "reg_fee_status",
            _fee_status_enum("reg_fee_status"),
            server_default="Pending",
            nullable=False,
        ),
        sa.Column(
            "app_fee_status",
            _fee_status_enum("app_fee_status"),
            server_default="Pending",
            nullable=False,
        ),
        sa.Column(
            "mess_fee_status",
            _fee_status_enum("mess_fee_status"),
            server_default="Pending",
            nullable=False,
        ),
        sa.Column("hostel", sa.String(length=100), server_default="Not Booked", nullable=False),
        # Documents
        sa.Column("profile_photo", sa.String(length=1000), nullable=True),
        # Timestamps
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "ix_admission_records_application_id",
        "admission_records",
        ["application_id"],
        unique=True,
    )
    op.create_index(
        "ix_admission_records_mobile",
        "admission_records",
        ["mobile"],
        unique=True,
    )
    op.create_index(
        "ix_admission_records_full_name",
        "admission_records",
        ["full_name"],
        unique=False,
    )


def downgrade() -> None:
    """Drop admission_records table and its enum types."""
    op.drop_index("ix_admission_records_full_name", table_name="admission_records")
    op.drop_index("ix_admission_records_mobile", table_name="admission_records")
    op.drop_index("ix_admission_records_application_id", table_name="admission_records")
    op.drop_table("admission_records")

    bind = op.get_bind()
    for name in FEE_STATUS_TYPES:
        _fee_status_enum(name).drop(bind, checkfirst=True)
