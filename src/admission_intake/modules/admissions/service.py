"""
Admissions Service Layer

Business logic for the admission intake form. Every write is two-phase:

1. Record store (mandatory): the authoritative write. Failures surface to the
   caller as PersistenceError.
2. Mirror sync (optional): best-effort projection into the spreadsheet. Its
   outcome is returned as a MirrorResult and never raised.

Policies:
- Mobile numbers are unique across records (checked on register and update)
- Login is gated on the admission (registration) fee being Paid
- Profile photos are attached by application identifier, not by name
- Fee statuses may be set in any order; no transition validation
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_intake.core.config import settings
from admission_intake.core.storage import StorageError, StoredFile
from admission_intake.modules.admissions import repository
from admission_intake.modules.admissions.helpers import (
    build_document_name,
    generate_application_id,
    is_profile_photo,
)
from admission_intake.modules.admissions.mirror import MirrorResult, MirrorSync
from admission_intake.modules.admissions.models import AdmissionRecord, FeeStatus
from admission_intake.modules.admissions.schemas import (
    LoginRequest,
    RegisterRequest,
    UpdateApplicationRequest,
)

logger = logging.getLogger(__name__)

# Attempts at drawing an unused application identifier before giving up
MAX_APPLICATION_ID_ATTEMPTS = 20


class AdmissionServiceError(Exception):
    """Base exception for admission service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class DuplicateMobileError(AdmissionServiceError):
    """Raised when another record already uses the mobile number."""

    def __init__(self, mobile: str):
        super().__init__(
            message="Mobile number already registered",
            error_code="DUPLICATE_MOBILE",
            status_code=400,
        )
        self.mobile = mobile


class ApplicationNotFoundError(AdmissionServiceError):
    """Raised when no record has the application identifier."""

    def __init__(self, application_id: str | None = None):
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class InvalidCredentialsError(AdmissionServiceError):
    """Raised when no record matches the mobile number and date of birth."""

    def __init__(self):
        super().__init__(
            message="Invalid mobile number or date of birth",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class FeePendingError(AdmissionServiceError):
    """Raised on login while the admission fee is still unpaid."""

    def __init__(self):
        super().__init__(
            message="Registration fee payment is pending",
            error_code="FEE_PENDING",
            status_code=403,
        )


class StorageFailureError(AdmissionServiceError):
    """Raised when a document could not be stored."""

    def __init__(self, message: str = "Failed to upload document"):
        super().__init__(
            message=message,
            error_code="STORAGE_FAILURE",
            status_code=500,
        )


class PersistenceError(AdmissionServiceError):
    """Raised when the record store write fails."""

    def __init__(self, message: str = "Failed to save application"):
        super().__init__(
            message=message,
            error_code="PERSISTENCE_FAILURE",
            status_code=500,
        )


@dataclass
class AdmissionWriteResult:
    """Outcome of a two-phase write: the stored record and the mirror report."""

    record: AdmissionRecord
    mirror: MirrorResult | None = None


@dataclass
class DocumentUploadResult:
    """Outcome of a document upload."""

    stored: StoredFile
    record: AdmissionRecord | None = None
    mirror: MirrorResult | None = None


async def _generate_unique_application_id(db: AsyncSession) -> str:
    """
    Draw application identifiers until an unused one turns up.

    Raises:
        PersistenceError: If every attempt collides
    """
    for _ in range(MAX_APPLICATION_ID_ATTEMPTS):
        candidate = generate_application_id(settings.application_id_prefix)
        if not await repository.application_id_exists(db, candidate):
            return candidate

    logger.error(f"No free application id after {MAX_APPLICATION_ID_ATTEMPTS} attempts")
    raise PersistenceError("Could not allocate an application id")


async def _check_duplicate_mobile(
    db: AsyncSession,
    mobile: str,
    exclude_application_id: str | None = None,
) -> None:
    """
    Ensure no other record uses a mobile number.

    Raises:
        DuplicateMobileError: If another record already has the number
    """
    existing = await repository.get_by_mobile(db, mobile)
    if existing and existing.application_id != exclude_application_id:
        logger.warning(f"Duplicate mobile rejected for application {existing.application_id}")
        raise DuplicateMobileError(mobile)


async def _rollback(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError as e:
        logger.error(f"Rollback failed: {e}")


async def register(
    db: AsyncSession,
    mirror: MirrorSync,
    data: RegisterRequest,
) -> AdmissionWriteResult:
    """
    Register a new applicant.

    1. Rejects a mobile number that is already registered (no write)
    2. Generates an unused application identifier
    3. Inserts the record with Pending fees and no hostel booking
    4. Appends the record to the sheet (best-effort)

    Args:
        db: Database session
        mirror: Mirror targets
        data: Registration form data

    Returns:
        AdmissionWriteResult with the new record and the sheet outcome

    Raises:
        DuplicateMobileError: If the mobile number is already registered
        PersistenceError: If the record could not be stored
    """
    await _check_duplicate_mobile(db, data.mobile)

    try:
        application_id = await _generate_unique_application_id(db)
        record = await repository.create(db, data, application_id)
    except IntegrityError as e:
        # Lost a race on the unique mobile or application id index
        await _rollback(db)
        logger.warning(f"Integrity error registering applicant: {e.orig}")
        if await repository.get_by_mobile(db, data.mobile):
            raise DuplicateMobileError(data.mobile) from e
        raise PersistenceError("Failed to register") from e
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.exception(f"Failed to store registration: {e}")
        raise PersistenceError("Failed to register") from e

    logger.info(f"Registered application {record.application_id}")

    mirror_result = await mirror.append(record)
    return AdmissionWriteResult(record=record, mirror=mirror_result)


async def authenticate(db: AsyncSession, data: LoginRequest) -> AdmissionRecord:
    """
    Look up an applicant by mobile number and date of birth.

    This is a lookup, not a credential check: there is no password.

    Raises:
        InvalidCredentialsError: If no record matches both fields
        FeePendingError: If the admission fee is not Paid
    """
    record = await repository.get_by_mobile_and_dob(db, data.mobile, data.dob)

    if record is None:
        logger.warning("Login attempt with unknown mobile/dob combination")
        raise InvalidCredentialsError()

    if record.reg_fee_status != FeeStatus.PAID:
        logger.info(f"Login blocked for {record.application_id}: registration fee pending")
        raise FeePendingError()

    logger.info(f"Applicant logged in: {record.application_id}")
    return record


async def get_application(db: AsyncSession, application_id: str) -> AdmissionRecord:
    """
    Get a record by application identifier.

    Raises:
        ApplicationNotFoundError: If the record doesn't exist
    """
    record = await repository.get_by_application_id(db, application_id)

    if record is None:
        raise ApplicationNotFoundError(application_id)

    return record


async def update_application(
    db: AsyncSession,
    mirror: MirrorSync,
    data: UpdateApplicationRequest,
) -> AdmissionWriteResult:
    """
    Merge the supplied fields into an existing application.

    Fields absent from the request keep their stored values. The sheet row is
    upserted afterwards (best-effort).

    Raises:
        ApplicationNotFoundError: If the application identifier is unknown
        DuplicateMobileError: If the new mobile number belongs to another record
        PersistenceError: If the record could not be stored
    """
    record = await get_application(db, data.application_id)
    fields = data.changed_fields()

    new_mobile = fields.get("mobile")
    if new_mobile and new_mobile != record.mobile:
        await _check_duplicate_mobile(db, new_mobile, exclude_application_id=record.application_id)

    mobile = new_mobile or record.mobile
    try:
        record = await repository.update_fields(db, record, fields)
    except IntegrityError as e:
        await _rollback(db)
        logger.warning(f"Integrity error updating {data.application_id}: {e.orig}")
        raise DuplicateMobileError(mobile) from e
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.exception(f"Failed to update application {data.application_id}: {e}")
        raise PersistenceError("Failed to update application") from e

    logger.info(f"Updated application {record.application_id}: fields={sorted(fields)}")

    mirror_result = await mirror.upsert(record)
    return AdmissionWriteResult(record=record, mirror=mirror_result)


async def attach_photo(
    db: AsyncSession,
    mirror: MirrorSync,
    application_id: str,
    photo_url: str,
) -> AdmissionWriteResult:
    """
    Set the profile-photo URL of an application.

    Raises:
        ApplicationNotFoundError: If the application identifier is unknown
        PersistenceError: If the record could not be stored
    """
    record = await get_application(db, application_id)

    try:
        record = await repository.set_profile_photo(db, record, photo_url)
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.exception(f"Failed to attach photo to {application_id}: {e}")
        raise PersistenceError("Failed to save profile photo") from e

    logger.info(f"Attached profile photo to {application_id}")

    mirror_result = await mirror.upsert(record)
    return AdmissionWriteResult(record=record, mirror=mirror_result)


async def upload_document(
    db: AsyncSession,
    mirror: MirrorSync,
    *,
    data: bytes,
    original_name: str | None,
    content_type: str | None,
    student_name: str,
    doc_type: str,
    application_id: str | None = None,
) -> DocumentUploadResult:
    """
    Store an applicant document.

    When an application identifier is given it must exist, and a profile
    photo upload is attached to that record.

    Raises:
        ApplicationNotFoundError: If application_id is given but unknown
        StorageFailureError: If storage is unavailable or the upload fails
        PersistenceError: If attaching the photo fails
    """
    if application_id:
        await get_application(db, application_id)

    file_name = build_document_name(student_name, doc_type, original_name)
    metadata = {"student-name": student_name, "doc-type": doc_type}
    if application_id:
        metadata["application-id"] = application_id

    try:
        stored = await mirror.upload_file(
            data,
            file_name,
            content_type or "application/octet-stream",
            metadata,
        )
    except StorageError as e:
        logger.error(f"Document upload failed for {student_name} ({doc_type}): {e}")
        raise StorageFailureError(str(e)) from e

    logger.info(f"Stored {doc_type} for {student_name} as {stored.file_id}")

    if application_id and is_profile_photo(doc_type):
        attached = await attach_photo(db, mirror, application_id, stored.link)
        return DocumentUploadResult(stored=stored, record=attached.record, mirror=attached.mirror)

    return DocumentUploadResult(stored=stored)
