"""
Admission Models

Database model for student admission records. The record store holds the
authoritative copy; the spreadsheet mirror is a derived projection keyed by
application_id.
"""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Enum, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from admission_intake.core.database import Base

DEFAULT_HOSTEL = "Not Booked"


class FeeStatus(str, enum.Enum):
    """Payment status of a fee."""

    PENDING = "Pending"
    PAID = "Paid"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _fee_status_column(name: str) -> Enum:
    return Enum(
        FeeStatus,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class AdmissionRecord(Base):
    """
    Student admission record.

    Created on registration, mutated by partial updates and photo uploads,
    never deleted.
    """

    __tablename__ = "admission_records"

    # Internal key, distinct from the public application identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    application_id: Mapped[str] = mapped_column(String(32), nullable=False)

    # Registrant
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    aadhaar: Mapped[str | None] = mapped_column(String(20), nullable=True)
    dob: Mapped[str] = mapped_column(String(20), nullable=False)
    course: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mobile: Mapped[str] = mapped_column(String(20), nullable=False)
    referral: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Contact
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pincode: Mapped[str | None] = mapped_column(String(12), nullable=True)

    # Fees and hostel
    reg_fee_status: Mapped[FeeStatus] = mapped_column(
        _fee_status_column("reg_fee_status"), nullable=False, default=FeeStatus.PENDING
    )
    app_fee_status: Mapped[FeeStatus] = mapped_column(
        _fee_status_column("app_fee_status"), nullable=False, default=FeeStatus.PENDING
    )
    mess_fee_status: Mapped[FeeStatus] = mapped_column(
        _fee_status_column("mess_fee_status"), nullable=False, default=FeeStatus.PENDING
    )
    hostel: Mapped[str] = mapped_column(String(100), nullable=False, default=DEFAULT_HOSTEL)

    # Documents
    profile_photo: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Timestamps
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("ix_admission_records_application_id", "application_id", unique=True),
        Index("ix_admission_records_mobile", "mobile", unique=True),
        Index("ix_admission_records_full_name", "full_name"),
    )
