"""
Admissions Repository

Database operations for admission records. Only data access lives here;
duplicate checks, fee gating and mirroring belong to the service layer.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import DEFAULT_HOSTEL, AdmissionRecord, FeeStatus
from .schemas import RegisterRequest


async def create(
    db: AsyncSession,
    data: RegisterRequest,
    application_id: str,
) -> AdmissionRecord:
    """Create a new admission record with fee and hostel defaults."""

    new_record = AdmissionRecord(
        application_id=application_id,
        # Registrant
        full_name=data.full_name,
        aadhaar=data.aadhaar,
        dob=data.dob,
        course=data.course,
        mobile=data.mobile,
        referral=data.referral,
        # Contact
        email=data.email,
        address=data.address,
        city=data.city,
        state=data.state,
        pincode=data.pincode,
        # Defaults
        reg_fee_status=FeeStatus.PENDING,
        app_fee_status=FeeStatus.PENDING,
        mess_fee_status=FeeStatus.PENDING,
        hostel=DEFAULT_HOSTEL,
    )

    db.add(new_record)
    await db.commit()
    await db.refresh(new_record)

    return new_record


async def get_by_application_id(db: AsyncSession, application_id: str) -> AdmissionRecord | None:
    """Get a record by its public application identifier."""
    result = await db.execute(
        select(AdmissionRecord).where(AdmissionRecord.application_id == application_id)
    )
    return result.scalar_one_or_none()


async def get_by_mobile(db: AsyncSession, mobile: str) -> AdmissionRecord | None:
    """Get a record by mobile number."""
    result = await db.execute(select(AdmissionRecord).where(AdmissionRecord.mobile == mobile))
    return result.scalar_one_or_none()


async def get_by_mobile_and_dob(
    db: AsyncSession, mobile: str, dob: str
) -> AdmissionRecord | None:
    """Get a record by exact match on mobile number and date of birth."""
    result = await db.execute(
        select(AdmissionRecord).where(
            AdmissionRecord.mobile == mobile,
            AdmissionRecord.dob == dob,
        )
    )
    return result.scalar_one_or_none()


async def application_id_exists(db: AsyncSession, application_id: str) -> bool:
    """Check whether an application identifier is already taken."""
    result = await db.execute(
        select(AdmissionRecord.id).where(AdmissionRecord.application_id == application_id)
    )
    return result.first() is not None


async def update_fields(
    db: AsyncSession,
    record: AdmissionRecord,
    fields: dict[str, Any],
) -> AdmissionRecord:
    """
    Merge the given fields into a record.

    Unknown keys and the application identifier are ignored.
    """
    for key, value in fields.items():
        if key in ("id", "application_id") or not hasattr(record, key):
            continue
        setattr(record, key, value)

    await db.commit()
    await db.refresh(record)

    return record


async def set_profile_photo(
    db: AsyncSession,
    record: AdmissionRecord,
    photo_url: str,
) -> AdmissionRecord:
    """Set the profile-photo URL on a record."""
    record.profile_photo = photo_url

    await db.commit()
    await db.refresh(record)

    return record
