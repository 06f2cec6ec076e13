"""
Beneficiary Registration Service

Creates the three records that make up a registration:

    BeneficiaryDocument -> BeneficiaryRegistration -> AcademicDetails

Each write needs the id generated by the previous one, so they are flushed
in order inside a single transaction and committed together.
"""
from typing import Dict, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship.core.exceptions import (
    MissingDocumentsError,
    RegistrationError,
    RegistrationExistsError,
    UserNotFoundError,
)
from scholarship.core.logging_config import logger
from scholarship.models import (
    AcademicDetails,
    BeneficiaryDocument,
    BeneficiaryRegistration,
    MANDATORY_DOCUMENT_SLOTS,
    User,
)
from scholarship.schemas.beneficiary import (
    AcademicFields,
    AdminRegistrationCreate,
    BeneficiaryFields,
    BeneficiaryRegistrationForm,
)
from scholarship.services.storage_service import StorageService, UploadedDocument, dated_folder
from scholarship.utils.forms import missing_slots

RegistrationRecords = Tuple[BeneficiaryRegistration, AcademicDetails, Optional[BeneficiaryDocument]]


def beneficiary_values(form: BeneficiaryFields) -> dict:
    return form.model_dump(include=set(BeneficiaryFields.model_fields))


def academic_values(form: AcademicFields) -> dict:
    return form.model_dump(include=set(AcademicFields.model_fields))


class RegistrationService:
    """Public and admin-initiated beneficiary registration"""

    def __init__(self, db: AsyncSession, storage: StorageService):
        self.db = db
        self.storage = storage

    async def get_for_user(self, user_id: str) -> Optional[BeneficiaryRegistration]:
        result = await self.db.execute(
            select(BeneficiaryRegistration)
            .where(BeneficiaryRegistration.user_id == user_id)
            .order_by(BeneficiaryRegistration.created_at.desc())
        )
        return result.scalars().first()

    async def _ensure_unregistered(self, user_id: str) -> None:
        if await self.get_for_user(user_id) is not None:
            raise RegistrationExistsError(user_id)

    async def register(
        self,
        form: BeneficiaryRegistrationForm,
        documents: Dict[str, UploadedDocument],
        user_id: Optional[str] = None,
    ) -> RegistrationRecords:
        """
        Register a beneficiary from the public multipart form.

        Validation failures are raised before anything is uploaded. Once
        uploads have started, any failure removes the stored files again
        and surfaces as RegistrationError (or UploadError from storage).
        """
        missing = missing_slots(MANDATORY_DOCUMENT_SLOTS, documents)
        if missing:
            raise MissingDocumentsError(missing)

        if user_id:
            await self._ensure_unregistered(user_id)

        urls = await self.storage.upload_many(documents, folder=dated_folder("beneficiaries"))

        try:
            document = BeneficiaryDocument(**urls)
            self.db.add(document)
            await self.db.flush()

            beneficiary = BeneficiaryRegistration(
                **beneficiary_values(form),
                document_id=document.id,
                user_id=user_id,
            )
            self.db.add(beneficiary)
            await self.db.flush()

            academic = AcademicDetails(**academic_values(form), beneficiary_id=beneficiary.id)
            self.db.add(academic)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.log_error_with_context(e, "beneficiary_register", uploaded=len(urls))
            await self.storage.discard(urls.values())
            raise RegistrationError() from e

        logger.info(
            f"[Registration] Beneficiary {beneficiary.id} registered with {len(urls)} documents"
            + (f" for user {user_id}" if user_id else "")
        )
        return beneficiary, academic, document

    async def create_for_user(self, data: AdminRegistrationCreate) -> RegistrationRecords:
        """Admin path: beneficiary + academic records for an existing account, no documents"""
        user = await self.db.get(User, data.user_id)
        if not user:
            raise UserNotFoundError(data.user_id)

        await self._ensure_unregistered(user.id)

        beneficiary = BeneficiaryRegistration(**beneficiary_values(data), user_id=user.id)
        self.db.add(beneficiary)
        await self.db.flush()

        academic = AcademicDetails(**academic_values(data), beneficiary_id=beneficiary.id)
        self.db.add(academic)
        await self.db.commit()

        logger.info(f"[Registration] Admin created registration {beneficiary.id} for user {user.id}")
        return beneficiary, academic, None
