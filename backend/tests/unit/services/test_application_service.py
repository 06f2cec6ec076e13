"""
Unit Tests for the Application Service
Tests for: review decisions, cleanup of attachments on failed submission
"""
import pytest
from sqlalchemy import func, select

from scholarship.core.exceptions import ApplicationSubmissionError, InvalidStatusTransitionError
from scholarship.models import Application, ApplicationStatus, ApplicationType
from scholarship.schemas.application import TravelExpensesFields
from scholarship.services import application_service
from scholarship.services.application_service import ApplicationService
from scholarship.services.storage_service import UploadedDocument

from conftest import PDF_BYTES, TestSessionLocal


class TestReview:

    @pytest.mark.asyncio
    async def test_decision_on_stale_read_rejected(self, db_session, admin_user, pending_application):
        """A reviewer holding an outdated pending copy cannot overwrite a decision"""
        async with TestSessionLocal() as other_session:
            stale = ApplicationService(other_session)
            await other_session.get(Application, pending_application.id)

            await ApplicationService(db_session).review(
                pending_application.id, admin_user, ApplicationStatus.APPROVED
            )

            with pytest.raises(InvalidStatusTransitionError) as exc_info:
                await stale.review(pending_application.id, admin_user, ApplicationStatus.REJECTED)

        assert exc_info.value.details["current_status"] == "approved"
        await db_session.refresh(pending_application)
        assert pending_application.status == ApplicationStatus.APPROVED

    @pytest.mark.asyncio
    async def test_review_records_reviewer(self, db_session, admin_user, pending_application):
        reviewed = await ApplicationService(db_session).review(
            pending_application.id, admin_user, ApplicationStatus.REJECTED, "Incomplete"
        )

        assert reviewed.status == ApplicationStatus.REJECTED
        assert reviewed.reviewed_by == admin_user.id
        assert reviewed.review_remarks == "Incomplete"
        assert reviewed.reviewed_at is not None


class TestSubmit:

    @pytest.mark.asyncio
    async def test_any_failure_after_upload_removes_attachments(self, db_session, storage, test_user, monkeypatch):
        fields = TravelExpensesFields.model_validate({
            "residencePlace": "Wardha",
            "destinationPlace": "Nagpur",
            "distance": "78.5",
            "travelMode": "Bus",
            "aidRequired": "Monthly bus pass",
        })
        documents = {"id_card": UploadedDocument("id_card", "idCard.pdf", PDF_BYTES, "application/pdf")}

        def broken_values(form):
            raise TypeError("unexpected column")

        monkeypatch.setattr(application_service, "field_values", broken_values)

        with pytest.raises(ApplicationSubmissionError):
            await ApplicationService(db_session, storage).submit(
                test_user, ApplicationType.TRAVEL_EXPENSES, fields, documents
            )

        assert len(storage.uploaded) == 1
        assert storage.deleted == storage.uploaded
        assert await db_session.scalar(select(func.count()).select_from(Application)) == 0
