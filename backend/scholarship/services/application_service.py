"""
Scholarship Application Service

Three application types share one table. What differs per type (its text
fields and which attachments it needs) lives in APPLICATION_RULES.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Type

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship.core.exceptions import (
    ApplicationNotFoundError,
    ApplicationSubmissionError,
    InvalidStatusTransitionError,
    MissingDocumentsError,
    UserNotFoundError,
)
from scholarship.core.logging_config import logger
from scholarship.models import Application, ApplicationStatus, ApplicationType, User
from scholarship.schemas.application import (
    SchoolFeesFields,
    StudyBooksFields,
    TravelExpensesFields,
)
from scholarship.schemas.common import FormModel
from scholarship.services.storage_service import StorageService, UploadedDocument
from scholarship.utils.forms import missing_slots
from scholarship.utils.pagination import paginate


@dataclass(frozen=True)
class ApplicationRule:
    fields_schema: Type[FormModel]
    required_documents: Tuple[str, ...] = ()
    optional_documents: Tuple[str, ...] = ()

    @property
    def allowed_documents(self) -> Tuple[str, ...]:
        return self.required_documents + self.optional_documents


APPLICATION_RULES: Dict[ApplicationType, ApplicationRule] = {
    ApplicationType.SCHOOL_FEES: ApplicationRule(
        fields_schema=SchoolFeesFields,
        required_documents=(
            "birth_certificate",
            "leaving_certificate",
            "marksheet",
            "admission_proof",
            "income_proof",
            "bank_account",
        ),
        optional_documents=("ration_card",),
    ),
    ApplicationType.TRAVEL_EXPENSES: ApplicationRule(
        fields_schema=TravelExpensesFields,
        required_documents=("id_card",),
    ),
    ApplicationType.STUDY_BOOKS: ApplicationRule(
        fields_schema=StudyBooksFields,
    ),
}


def field_values(fields: FormModel) -> dict:
    """Column values from a type-specific schema, without the admin's user_id"""
    return fields.model_dump(exclude={"user_id"})


class ApplicationService:
    """Submission, listing and review of scholarship applications"""

    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage

    async def submit(
        self,
        user: User,
        application_type: ApplicationType,
        fields: FormModel,
        documents: Dict[str, UploadedDocument],
    ) -> Application:
        """Self-submission by a beneficiary, attachments uploaded first"""
        rule = APPLICATION_RULES[application_type]
        missing = missing_slots(rule.required_documents, documents)
        if missing:
            raise MissingDocumentsError(missing)

        urls = await self.storage.upload_many(documents, folder=f"applications/{user.id}")

        try:
            application = Application(
                user_id=user.id,
                application_type=application_type,
                status=ApplicationStatus.PENDING,
                **field_values(fields),
                **urls,
            )
            self.db.add(application)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.log_error_with_context(e, "application_submit", application_type=application_type.value)
            await self.storage.discard(urls.values())
            raise ApplicationSubmissionError() from e

        logger.info(
            f"[Applications] {application_type.value} application {application.id} "
            f"submitted by {user.id} with {len(urls)} documents"
        )
        return application

    async def create_for_user(self, application_type: ApplicationType, data: FormModel) -> Application:
        """Admin path: pending application on behalf of an account, without attachments"""
        user = await self.db.get(User, data.user_id)
        if not user:
            raise UserNotFoundError(data.user_id)

        application = Application(
            user_id=user.id,
            application_type=application_type,
            status=ApplicationStatus.PENDING,
            **field_values(data),
        )
        self.db.add(application)
        await self.db.commit()

        logger.info(f"[Applications] Admin created {application_type.value} application for {user.id}")
        return application

    async def list_for_user(self, user_id: str) -> List[Application]:
        result = await self.db.execute(
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_for_user(self, application_id: str, user_id: str) -> Application:
        application = await self.db.get(Application, application_id)
        # Another user's application is reported exactly like a missing one
        if not application or application.user_id != user_id:
            raise ApplicationNotFoundError(application_id)
        return application

    async def list_all(
        self,
        page: int = 1,
        page_size: int = 10,
        status: Optional[ApplicationStatus] = None,
        application_type: Optional[ApplicationType] = None,
        user_id: Optional[str] = None,
    ) -> dict:
        query = select(Application)
        if status is not None:
            query = query.where(Application.status == status)
        if application_type is not None:
            query = query.where(Application.application_type == application_type)
        if user_id:
            query = query.where(Application.user_id == user_id)
        query = query.order_by(Application.created_at.desc())
        return await paginate(self.db, query, page=page, page_size=page_size)

    async def review(
        self,
        application_id: str,
        reviewer: User,
        new_status: ApplicationStatus,
        remarks: Optional[str] = None,
    ) -> Application:
        """Move a pending application to approved or rejected"""
        application = await self.db.get(Application, application_id)
        if not application:
            raise ApplicationNotFoundError(application_id)

        if not application.can_transition_to(new_status):
            raise InvalidStatusTransitionError(application.status.value, new_status.value)

        # Only a still-pending row is updated, so concurrent decisions cannot both land
        result = await self.db.execute(
            update(Application)
            .where(Application.id == application_id, Application.status == ApplicationStatus.PENDING)
            .values(
                status=new_status,
                reviewed_by=reviewer.id,
                reviewed_at=datetime.utcnow(),
                review_remarks=remarks,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            await self.db.refresh(application)
            raise InvalidStatusTransitionError(application.status.value, new_status.value)

        await self.db.commit()
        await self.db.refresh(application)

        logger.info(
            f"[Applications] {application.id} {new_status.value} by {reviewer.username}"
        )
        return application
