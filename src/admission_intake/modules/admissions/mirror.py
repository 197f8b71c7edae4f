"""
Admissions Mirror Sync

Best-effort replication of admission records into a spreadsheet and of
uploaded documents into object storage.

The record store is always written first. Sheet operations never raise: each
returns a MirrorResult the caller may log or ignore. Document uploads do raise
StorageError, because for the upload endpoint storage is the whole operation.

Sheet layout (row 1 is a header, one row per application, key in column A):

    A Application ID | B Full Name | C Aadhaar | D DOB | E Course | F Mobile |
    G Referral | H Email | I Address | J City | K State | L Pincode |
    M Submitted At | N Reg Fee Status | O App Fee Status | P Hostel |
    Q Mess Fee Status | R Profile Photo
"""

import asyncio
import enum
import logging
from dataclasses import dataclass

from admission_intake.core.config import Settings
from admission_intake.core.google_auth import resolve_service_account_info
from admission_intake.core.sheets import SheetClient
from admission_intake.core.storage import DocumentStorageClient, StorageError, StoredFile
from admission_intake.modules.admissions.models import AdmissionRecord

logger = logging.getLogger(__name__)

SHEET_HEADER = [
    "Application ID",
    "Full Name",
    "Aadhaar",
    "DOB",
    "Course",
    "Mobile",
    "Referral",
    "Email",
    "Address",
    "City",
    "State",
    "Pincode",
    "Submitted At",
    "Reg Fee Status",
    "App Fee Status",
    "Hostel",
    "Mess Fee Status",
    "Profile Photo",
]

APPLICATION_ID_COLUMN = 1


class MirrorStatus(str, enum.Enum):
    """Outcome of one mirror operation."""

    SYNCED = "synced"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class MirrorResult:
    """Structured outcome of a best-effort mirror operation."""

    operation: str
    status: MirrorStatus
    detail: str | None = None
    row: int | None = None

    @property
    def ok(self) -> bool:
        return self.status != MirrorStatus.FAILED


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def record_to_row(record: AdmissionRecord) -> list[str]:
    """Project a record onto the sheet's fixed column order."""
    return [
        _cell(value)
        for value in (
            record.application_id,
            record.full_name,
            record.aadhaar,
            record.dob,
            record.course,
            record.mobile,
            record.referral,
            record.email,
            record.address,
            record.city,
            record.state,
            record.pincode,
            record.submitted_at,
            record.reg_fee_status,
            record.app_fee_status,
            record.hostel,
            record.mess_fee_status,
            record.profile_photo,
        )
    ]


class MirrorSync:
    """
    Mirror targets resolved at startup.

    Either target may be None, meaning that target is disabled. A disabled
    sheet makes sheet operations return SKIPPED; disabled storage makes
    uploads raise StorageError.
    """

    def __init__(
        self,
        sheet: SheetClient | None = None,
        storage: DocumentStorageClient | None = None,
    ) -> None:
        self._sheet = sheet
        self._storage = storage
        # Serializes find-then-write on the sheet within this process
        self._sheet_lock = asyncio.Lock()

    @property
    def sheet_enabled(self) -> bool:
        return self._sheet is not None

    @property
    def storage_enabled(self) -> bool:
        return self._storage is not None

    # ============================================
    # Sheet projection
    # ============================================

    async def append(self, record: AdmissionRecord) -> MirrorResult:
        """Append a new row for a record. Never touches existing rows."""
        if self._sheet is None:
            return MirrorResult("append", MirrorStatus.SKIPPED, "sheet mirroring disabled")

        try:
            async with self._sheet_lock:
                await self._sheet.append_row(record_to_row(record))
        except Exception as e:
            logger.error(f"Sheet append failed for {record.application_id}: {e}")
            return MirrorResult("append", MirrorStatus.FAILED, str(e))

        logger.info(f"Appended sheet row for {record.application_id}")
        return MirrorResult("append", MirrorStatus.SYNCED)

    async def _find_row(self, sheet: SheetClient, application_id: str) -> int | None:
        column = await sheet.get_column(APPLICATION_ID_COLUMN)
        for index, value in enumerate(column, start=1):
            if value == application_id:
                return index
        return None

    async def get(self, application_id: str) -> int | None:
        """
        Return the 1-based sheet row holding an application, if any.

        Read-only lookup into the projection; upsert does its own lookup while
        holding the sheet lock.

        Reads the whole identifier column and scans it linearly.
        Returns None when the sheet is disabled, unreachable, or has no match.
        """
        if self._sheet is None:
            return None

        try:
            return await self._find_row(self._sheet, application_id)
        except Exception as e:
            logger.error(f"Sheet lookup failed for {application_id}: {e}")
            return None

    async def upsert(self, record: AdmissionRecord) -> MirrorResult:
        """Overwrite the record's row, appending one when it is missing."""
        if self._sheet is None:
            return MirrorResult("upsert", MirrorStatus.SKIPPED, "sheet mirroring disabled")

        values = record_to_row(record)
        try:
            async with self._sheet_lock:
                row = await self._find_row(self._sheet, record.application_id)
                if row is None:
                    await self._sheet.append_row(values)
                else:
                    await self._sheet.update_row(row, values)
        except Exception as e:
            logger.error(f"Sheet upsert failed for {record.application_id}: {e}")
            return MirrorResult("upsert", MirrorStatus.FAILED, str(e))

        if row is None:
            logger.warning(f"No sheet row for {record.application_id}; appended a new one")
        return MirrorResult("upsert", MirrorStatus.SYNCED, row=row)

    # ============================================
    # Document storage
    # ============================================

    async def upload_file(
        self,
        data: bytes,
        file_name: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StoredFile:
        """
        Upload a document to storage.

        Raises:
            StorageError: If storage is not configured or the upload fails
        """
        if self._storage is None:
            raise StorageError("Document storage is not configured")
        return await self._storage.upload(data, file_name, content_type, metadata)


def build_mirror_sync(settings: Settings) -> MirrorSync:
    """
    Resolve mirror targets from settings.

    Called once at startup. Missing configuration disables a target instead
    of failing the process.
    """
    sheet = None
    if settings.google_sheet_id:
        info = resolve_service_account_info(settings)
        if info is None:
            logger.warning("GOOGLE_SHEET_ID set but no Google credentials found - sheet disabled")
        else:
            sheet = SheetClient.from_service_account(
                info, settings.google_sheet_id, settings.google_sheet_worksheet
            )

    storage = None
    if settings.storage_bucket:
        storage = DocumentStorageClient(
            bucket=settings.storage_bucket,
            region=settings.storage_region,
            folder=settings.storage_folder,
            public_base_url=settings.storage_public_base_url,
        )

    return MirrorSync(sheet=sheet, storage=storage)
