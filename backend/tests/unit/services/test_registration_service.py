"""
Unit Tests for the Registration Service
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from scholarship.core.config import settings
from scholarship.core.exceptions import MissingDocumentsError, RegistrationError, RegistrationExistsError
from scholarship.models import AcademicDetails, BeneficiaryDocument, BeneficiaryRegistration
from scholarship.schemas.beneficiary import BeneficiaryRegistrationForm
from scholarship.services import registration_service
from scholarship.services.registration_service import RegistrationService
from scholarship.services.storage_service import UploadedDocument

from conftest import PDF_BYTES, registration_fields


def mandatory_documents():
    return {
        slot: UploadedDocument(slot, f"{slot}.pdf", PDF_BYTES, "application/pdf")
        for slot in ("aadhar_card", "passport_size_photo", "house_image")
    }


async def count(db, model):
    return await db.scalar(select(func.count()).select_from(model))


class TestRegistrationService:

    @pytest.mark.asyncio
    async def test_records_written_in_dependency_order(self, db_session, storage):
        form = BeneficiaryRegistrationForm.model_validate(registration_fields())

        beneficiary, academic, document = await RegistrationService(db_session, storage).register(
            form, mandatory_documents()
        )

        assert beneficiary.document_id == document.id
        assert academic.beneficiary_id == beneficiary.id
        assert beneficiary.user_id is None
        assert document.pan_card is None
        assert all(document.urls()[slot] for slot in ("aadhar_card", "passport_size_photo", "house_image"))

    @pytest.mark.asyncio
    async def test_missing_document_checked_before_upload(self, db_session, storage):
        form = BeneficiaryRegistrationForm.model_validate(registration_fields())
        documents = mandatory_documents()
        del documents["house_image"]

        with pytest.raises(MissingDocumentsError) as exc_info:
            await RegistrationService(db_session, storage).register(form, documents)

        assert exc_info.value.details["missing"] == ["houseImage"]
        assert storage.uploaded == []

    @pytest.mark.asyncio
    async def test_database_failure_rolls_back_and_removes_uploads(self, db_session, storage, monkeypatch):
        form = BeneficiaryRegistrationForm.model_validate(registration_fields())

        async def failing_commit():
            raise SQLAlchemyError("database unavailable")

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(RegistrationError):
            await RegistrationService(db_session, storage).register(form, mandatory_documents())

        monkeypatch.undo()
        assert await count(db_session, BeneficiaryDocument) == 0
        assert await count(db_session, BeneficiaryRegistration) == 0
        assert await count(db_session, AcademicDetails) == 0
        assert len(storage.uploaded) == 3
        assert sorted(storage.deleted) == sorted(storage.uploaded)
        for url in storage.uploaded:
            assert not (settings.upload_path / storage.key_from_url(url)).exists()

    @pytest.mark.asyncio
    async def test_non_database_failure_also_removes_uploads(self, db_session, storage, monkeypatch):
        form = BeneficiaryRegistrationForm.model_validate(registration_fields())

        def broken_values(form):
            raise TypeError("unexpected column")

        monkeypatch.setattr(registration_service, "beneficiary_values", broken_values)

        with pytest.raises(RegistrationError):
            await RegistrationService(db_session, storage).register(form, mandatory_documents())

        assert len(storage.uploaded) == 3
        assert sorted(storage.deleted) == sorted(storage.uploaded)
        assert await count(db_session, BeneficiaryDocument) == 0

    @pytest.mark.asyncio
    async def test_second_registration_for_same_user_rejected(self, db_session, storage, test_user):
        form = BeneficiaryRegistrationForm.model_validate(registration_fields())
        service = RegistrationService(db_session, storage)
        await service.register(form, mandatory_documents(), user_id=test_user.id)

        with pytest.raises(RegistrationExistsError):
            await service.register(form, mandatory_documents(), user_id=test_user.id)

        assert len(storage.uploaded) == 3
