"""
Fixtures for admissions tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from admission_intake.core.sheets import SheetClient
from admission_intake.modules.admissions.models import AdmissionRecord, FeeStatus
from admission_intake.modules.admissions.schemas import RegisterRequest


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def mock_mirror():
    """Create a mock mirror whose sheet operations succeed."""
    mirror = MagicMock()
    mirror.append = AsyncMock()
    mirror.upsert = AsyncMock()
    mirror.upload_file = AsyncMock()
    return mirror


@pytest.fixture
def fake_worksheet():
    """A gspread worksheet stand-in holding rows in memory."""
    worksheet = MagicMock()
    worksheet.title = "Sheet1"
    rows: list[list[str]] = [["Application ID", "Full Name"]]
    worksheet.rows = rows

    def append_row(values, value_input_option=None):
        rows.append(list(values))

    def col_values(index):
        return [row[index - 1] if len(row) >= index else "" for row in rows]

    def update(range_name=None, values=None, value_input_option=None):
        row_number = int("".join(ch for ch in range_name.split(":")[0] if ch.isdigit()))
        rows[row_number - 1] = list(values[0])

    worksheet.append_row.side_effect = append_row
    worksheet.col_values.side_effect = col_values
    worksheet.update.side_effect = update
    return worksheet


@pytest.fixture
def sheet_client(fake_worksheet):
    """SheetClient backed by the in-memory worksheet."""
    return SheetClient(lambda: fake_worksheet)


@pytest.fixture
def failing_sheet_client():
    """SheetClient whose worksheet raises on every call (simulated outage)."""
    worksheet = MagicMock()
    worksheet.title = "Sheet1"
    worksheet.append_row.side_effect = ConnectionError("sheets API unreachable")
    worksheet.col_values.side_effect = ConnectionError("sheets API unreachable")
    worksheet.update.side_effect = ConnectionError("sheets API unreachable")
    return SheetClient(lambda: worksheet)


@pytest.fixture
def sample_register_request():
    """Registration form data for a new applicant."""
    return RegisterRequest(
        full_name="Asha Rao",
        aadhaar="123412341234",
        dob="2000-01-01",
        course="B.Tech Computer Science",
        mobile="9000000001",
        referral="REF10",
        email="asha@example.com",
        address="12 MG Road",
        city="Surat",
        state="Gujarat",
        pincode="395007",
    )


def make_record(**overrides) -> AdmissionRecord:
    """Build a detached AdmissionRecord with sensible defaults."""
    now = datetime.now(UTC)
    values = {
        "id": uuid4(),
        "application_id": "PPSU4821",
        "full_name": "Asha Rao",
        "aadhaar": "123412341234",
        "dob": "2000-01-01",
        "course": "B.Tech Computer Science",
        "mobile": "9000000001",
        "referral": "REF10",
        "email": "asha@example.com",
        "address": "12 MG Road",
        "city": "Surat",
        "state": "Gujarat",
        "pincode": "395007",
        "reg_fee_status": FeeStatus.PENDING,
        "app_fee_status": FeeStatus.PENDING,
        "mess_fee_status": FeeStatus.PENDING,
        "hostel": "Not Booked",
        "profile_photo": None,
        "submitted_at": now,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return AdmissionRecord(**values)


@pytest.fixture
def sample_record():
    """A stored record with both fees pending."""
    return make_record()


@pytest.fixture
def paid_record():
    """A stored record whose registration fee is paid."""
    return make_record(reg_fee_status=FeeStatus.PAID)


@pytest.fixture
def record_factory():
    """Factory for records with selected fields overridden."""
    return make_record
