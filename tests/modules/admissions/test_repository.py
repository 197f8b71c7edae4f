"""
Tests for admissions repository layer against an in-memory database.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from admission_intake.modules.admissions import repository
from admission_intake.modules.admissions.models import DEFAULT_HOSTEL, FeeStatus


class TestCreate:
    """Tests for record creation."""

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, db_session, sample_register_request):
        record = await repository.create(db_session, sample_register_request, "PPSU1234")

        assert record.id is not None
        assert record.application_id == "PPSU1234"
        assert record.full_name == "Asha Rao"
        assert record.reg_fee_status == FeeStatus.PENDING
        assert record.app_fee_status == FeeStatus.PENDING
        assert record.mess_fee_status == FeeStatus.PENDING
        assert record.hostel == DEFAULT_HOSTEL
        assert record.profile_photo is None
        assert record.submitted_at is not None

    @pytest.mark.asyncio
    async def test_mobile_is_unique(self, db_session, sample_register_request):
        await repository.create(db_session, sample_register_request, "PPSU1234")

        with pytest.raises(IntegrityError):
            await repository.create(db_session, sample_register_request, "PPSU5678")


class TestLookups:
    """Tests for record lookups."""

    @pytest.mark.asyncio
    async def test_get_by_application_id(self, db_session, sample_register_request):
        await repository.create(db_session, sample_register_request, "PPSU1234")

        found = await repository.get_by_application_id(db_session, "PPSU1234")
        missing = await repository.get_by_application_id(db_session, "PPSU9999")

        assert found is not None
        assert found.mobile == "9000000001"
        assert missing is None

    @pytest.mark.asyncio
    async def test_get_by_mobile_and_dob_requires_both(self, db_session, sample_register_request):
        await repository.create(db_session, sample_register_request, "PPSU1234")

        assert await repository.get_by_mobile_and_dob(db_session, "9000000001", "2000-01-01")
        assert await repository.get_by_mobile_and_dob(db_session, "9000000001", "2001-01-01") is None
        assert await repository.get_by_mobile_and_dob(db_session, "9000000002", "2000-01-01") is None

    @pytest.mark.asyncio
    async def test_application_id_exists(self, db_session, sample_register_request):
        await repository.create(db_session, sample_register_request, "PPSU1234")

        assert await repository.application_id_exists(db_session, "PPSU1234") is True
        assert await repository.application_id_exists(db_session, "PPSU4321") is False


class TestUpdates:
    """Tests for partial updates and photo attachment."""

    @pytest.mark.asyncio
    async def test_update_fields_changes_only_given_fields(
        self, db_session, sample_register_request
    ):
        record = await repository.create(db_session, sample_register_request, "PPSU1234")
        before = {
            "full_name": record.full_name,
            "dob": record.dob,
            "mobile": record.mobile,
            "city": record.city,
            "reg_fee_status": record.reg_fee_status,
        }

        updated = await repository.update_fields(
            db_session, record, {"email": "new@example.com"}
        )

        assert updated.email == "new@example.com"
        for key, value in before.items():
            assert getattr(updated, key) == value

    @pytest.mark.asyncio
    async def test_update_fields_never_changes_identifiers(
        self, db_session, sample_register_request
    ):
        record = await repository.create(db_session, sample_register_request, "PPSU1234")
        original_id = record.id

        updated = await repository.update_fields(
            db_session,
            record,
            {"application_id": "PPSU0001", "id": None, "not_a_column": "x", "hostel": "Block A"},
        )

        assert updated.application_id == "PPSU1234"
        assert updated.id == original_id
        assert updated.hostel == "Block A"

    @pytest.mark.asyncio
    async def test_set_profile_photo(self, db_session, sample_register_request):
        record = await repository.create(db_session, sample_register_request, "PPSU1234")

        updated = await repository.set_profile_photo(
            db_session, record, "https://bucket.example/photo.jpg"
        )

        assert updated.profile_photo == "https://bucket.example/photo.jpg"
        reloaded = await repository.get_by_application_id(db_session, "PPSU1234")
        assert reloaded.profile_photo == "https://bucket.example/photo.jpg"
