"""
Admissions Router

API endpoints used by the admission intake form. These endpoints are public;
login is a record lookup by mobile number and date of birth.

Endpoints:
- POST /api/register - Register a new applicant
- POST /api/login - Look up an applicant whose registration fee is paid
- POST /api/update-application - Merge fields into an application
- GET /api/applications/{application_id} - Fetch one application
- POST /api/upload - Upload a document (multipart)
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from admission_intake.core.config import settings
from admission_intake.core.database import get_db
from admission_intake.modules.admissions import service
from admission_intake.modules.admissions.mirror import MirrorResult, MirrorSync
from admission_intake.modules.admissions.schemas import (
    AdmissionRecordResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateApplicationRequest,
    UpdateApplicationResponse,
    UploadResponse,
)
from admission_intake.modules.admissions.service import AdmissionServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_CHUNK_SIZE = 64 * 1024


def get_mirror(request: Request) -> MirrorSync:
    """
    Get the mirror targets resolved at startup.

    Falls back to a fully disabled MirrorSync if startup did not set one.
    """
    mirror = getattr(request.app.state, "mirror", None)
    if mirror is None:
        mirror = MirrorSync()
        request.app.state.mirror = mirror
    return mirror


def _log_mirror(result: MirrorResult | None, application_id: str) -> None:
    if result is not None and not result.ok:
        logger.warning(
            f"Sheet {result.operation} for {application_id} did not sync: {result.detail}"
        )


def _to_http_error(e: AdmissionServiceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.exception(f"Unexpected error during {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Applicant",
    responses={
        400: {"description": "Mobile number already registered"},
        500: {"description": "Record could not be stored"},
    },
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    mirror: MirrorSync = Depends(get_mirror),
) -> RegisterResponse:
    """
    Register a new applicant.

    Stores the record, then mirrors it into the sheet. A sheet failure is
    logged and does not change the response.

    Returns:
        Confirmation message and the generated application identifier

    Raises:
        HTTPException 400: If the mobile number is already registered
        HTTPException 500: If the record could not be stored
    """
    try:
        result = await service.register(db, mirror, data)
    except AdmissionServiceError as e:
        logger.warning(f"Registration rejected: {e.message}")
        raise _to_http_error(e) from e
    except Exception as e:
        raise _internal_error("register", e) from e

    _log_mirror(result.mirror, result.record.application_id)
    return RegisterResponse(id=result.record.application_id)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Applicant Login",
    responses={
        401: {"description": "No applicant with this mobile number and date of birth"},
        403: {"description": "Registration fee pending"},
    },
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Return the applicant's full record once the registration fee is paid.

    Raises:
        HTTPException 401: Invalid mobile number or date of birth
        HTTPException 403: Registration fee pending
    """
    try:
        record = await service.authenticate(db, data)
    except AdmissionServiceError as e:
        raise _to_http_error(e) from e
    except Exception as e:
        raise _internal_error("log in", e) from e

    return LoginResponse(student=AdmissionRecordResponse.model_validate(record))


@router.post(
    "/update-application",
    response_model=UpdateApplicationResponse,
    summary="Update Application",
    responses={
        400: {"description": "Mobile number already registered"},
        404: {"description": "Application not found"},
    },
)
async def update_application(
    data: UpdateApplicationRequest,
    db: AsyncSession = Depends(get_db),
    mirror: MirrorSync = Depends(get_mirror),
) -> UpdateApplicationResponse:
    """
    Merge the supplied fields into an application.

    Only keys present in the body change; everything else keeps its value.

    Raises:
        HTTPException 404: If the application identifier is unknown
    """
    try:
        result = await service.update_application(db, mirror, data)
    except AdmissionServiceError as e:
        raise _to_http_error(e) from e
    except Exception as e:
        raise _internal_error("update application", e) from e

    _log_mirror(result.mirror, result.record.application_id)
    return UpdateApplicationResponse(student=AdmissionRecordResponse.model_validate(result.record))


@router.get(
    "/applications/{application_id}",
    response_model=AdmissionRecordResponse,
    summary="Get Application",
    responses={404: {"description": "Application not found"}},
)
async def get_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
) -> AdmissionRecordResponse:
    """Fetch one application by its identifier."""
    try:
        record = await service.get_application(db, application_id)
    except AdmissionServiceError as e:
        raise _to_http_error(e) from e

    return AdmissionRecordResponse.model_validate(record)


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    """
    Read an upload into memory, refusing anything over the limit.

    Raises:
        HTTPException 413: If the file exceeds the limit
    """
    if file.size is not None and file.size > limit:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File exceeds the {limit // (1024 * 1024)} MB limit",
        )

    chunks: list[bytes] = []
    total = 0
    while chunk := await file.read(UPLOAD_CHUNK_SIZE):
        total += len(chunk)
        if total > limit:
            raise HTTPException(
                status_code=status.HTTP_413_CONTENT_TOO_LARGE,
                detail=f"File exceeds the {limit // (1024 * 1024)} MB limit",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload Document",
    responses={
        400: {"description": "No file uploaded"},
        404: {"description": "Application not found"},
        413: {"description": "File too large"},
        500: {"description": "Storage failure"},
    },
)
async def upload(
    file: UploadFile | None = File(None),
    student_name: str = Form("", alias="studentName"),
    doc_type: str = Form("", alias="docType"),
    application_id: str | None = Form(None, alias="applicationId"),
    db: AsyncSession = Depends(get_db),
    mirror: MirrorSync = Depends(get_mirror),
) -> UploadResponse:
    """
    Upload an applicant document to storage.

    A profile photo uploaded with an applicationId is also attached to that
    application.

    Raises:
        HTTPException 400: If no file was sent
        HTTPException 413: If the file is over the upload limit
        HTTPException 404: If applicationId is unknown
        HTTPException 500: If storage fails
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    payload = await _read_limited(file, settings.max_upload_bytes)
    if not payload:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")

    try:
        result = await service.upload_document(
            db,
            mirror,
            data=payload,
            original_name=file.filename,
            content_type=file.content_type,
            student_name=student_name,
            doc_type=doc_type,
            application_id=application_id or None,
        )
    except AdmissionServiceError as e:
        raise _to_http_error(e) from e
    except Exception as e:
        raise _internal_error("upload document", e) from e

    if result.record is not None:
        _log_mirror(result.mirror, result.record.application_id)

    return UploadResponse(file_id=result.stored.file_id, link=result.stored.link)
