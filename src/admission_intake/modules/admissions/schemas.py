"""
Admission Schemas

Pydantic schemas for request validation and response serialization.
JSON bodies use the camelCase names the intake form sends.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from admission_intake.modules.admissions.models import FeeStatus

# Record columns that are NOT NULL in the store
REQUIRED_RECORD_FIELDS = frozenset(
    {
        "full_name",
        "dob",
        "mobile",
        "reg_fee_status",
        "app_fee_status",
        "mess_fee_status",
        "hostel",
    }
)


class CamelModel(BaseModel):
    """Base schema accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RegisterRequest(CamelModel):
    """Request body for POST /api/register."""

    full_name: str = Field(..., max_length=200)
    aadhaar: str | None = Field(None, max_length=20)
    dob: str = Field(..., max_length=20)
    course: str | None = Field(None, max_length=200)
    mobile: str = Field(..., max_length=20)
    referral: str | None = Field(None, max_length=100)

    email: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    pincode: str | None = Field(None, max_length=12)


class RegisterResponse(BaseModel):
    """Response after a successful registration."""

    message: str = "Registration Successful"
    id: str


class LoginRequest(CamelModel):
    """Request body for POST /api/login."""

    mobile: str
    dob: str


class AdmissionRecordResponse(CamelModel):
    """Full admission record as returned to the form."""

    application_id: str
    full_name: str
    aadhaar: str | None = None
    dob: str
    course: str | None = None
    mobile: str
    referral: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    reg_fee_status: FeeStatus
    app_fee_status: FeeStatus
    hostel: str
    mess_fee_status: FeeStatus
    profile_photo: str | None = None
    date: datetime = Field(validation_alias="submitted_at")


class LoginResponse(BaseModel):
    """Response after a successful login."""

    message: str = "Login Successful"
    student: AdmissionRecordResponse


class UpdateApplicationRequest(CamelModel):
    """
    Request body for POST /api/update-application.

    Only fields present in the body are merged into the record.
    """

    application_id: str

    full_name: str | None = Field(None, max_length=200)
    aadhaar: str | None = Field(None, max_length=20)
    dob: str | None = Field(None, max_length=20)
    course: str | None = Field(None, max_length=200)
    mobile: str | None = Field(None, max_length=20)
    referral: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    pincode: str | None = Field(None, max_length=12)
    reg_fee_status: FeeStatus | None = None
    app_fee_status: FeeStatus | None = None
    hostel: str | None = Field(None, max_length=100)
    mess_fee_status: FeeStatus | None = None

    def changed_fields(self) -> dict:
        """
        Return only the fields the client actually sent, minus the key.

        Explicit nulls are dropped for columns that cannot be empty.
        """
        sent = self.model_dump(exclude_unset=True, exclude={"application_id"})
        return {
            key: value
            for key, value in sent.items()
            if value is not None or key not in REQUIRED_RECORD_FIELDS
        }


class UpdateApplicationResponse(BaseModel):
    """Response after an application update."""

    message: str = "Application Updated"
    student: AdmissionRecordResponse


class UploadResponse(CamelModel):
    """Response after a document upload."""

    file_id: str
    link: str
