"""
Admin Service - account management for administrators

Accounts are linked to their registration and applications by id only, so
reads join explicitly and deletes cascade with bulk statements.
"""
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship.core.exceptions import (
    DuplicateUserError,
    RegistrationNotFoundError,
    ResourceNotFoundError,
    UserNotFoundError,
)
from scholarship.core.logging_config import logger
from scholarship.core.security import get_password_hash
from scholarship.models import (
    APPLICATION_DOCUMENT_SLOTS,
    AcademicDetails,
    Application,
    BeneficiaryDocument,
    BeneficiaryRegistration,
    User,
    UserRole,
)
from scholarship.schemas.admin import StudentAccountUpdate
from scholarship.schemas.beneficiary import AcademicFields, BeneficiaryFields
from scholarship.services.storage_service import StorageService
from scholarship.utils.pagination import paginate

ACADEMIC_COLUMNS = set(AcademicFields.model_fields)
REGISTRATION_COLUMNS = set(BeneficiaryFields.model_fields)


class AdminService:

    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage

    # ---------- lookups ----------

    async def get_user(self, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def username_taken(self, username: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.username == username))
        return result.first() is not None

    async def registration_for(self, user_id: str) -> Optional[BeneficiaryRegistration]:
        result = await self.db.execute(
            select(BeneficiaryRegistration)
            .where(BeneficiaryRegistration.user_id == user_id)
            .order_by(BeneficiaryRegistration.created_at.desc())
        )
        return result.scalars().first()

    async def academic_for(self, beneficiary_id: str) -> Optional[AcademicDetails]:
        result = await self.db.execute(
            select(AcademicDetails).where(AcademicDetails.beneficiary_id == beneficiary_id)
        )
        return result.scalars().first()

    async def applications_count(self, user_id: str) -> int:
        return await self.db.scalar(
            select(func.count(Application.id)).where(Application.user_id == user_id)
        ) or 0

    # ---------- listing ----------

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> dict:
        """Accounts with the name of their beneficiary and their application count"""
        query = select(User)
        if search:
            search_term = f"%{search}%"
            registered = select(BeneficiaryRegistration.user_id).where(
                BeneficiaryRegistration.user_id.isnot(None),
                or_(
                    BeneficiaryRegistration.first_name.ilike(search_term),
                    BeneficiaryRegistration.last_name.ilike(search_term),
                    BeneficiaryRegistration.mobile_number.ilike(search_term),
                ),
            )
            query = query.where(or_(User.username.ilike(search_term), User.id.in_(registered)))
        if role is not None:
            query = query.where(User.role == role)
        query = query.order_by(User.created_at.desc())

        page_data = await paginate(self.db, query, page=page, page_size=page_size)

        items = []
        for user in page_data["items"]:
            registration = await self.registration_for(user.id)
            items.append({
                "id": user.id,
                "username": user.username,
                "role": user.role,
                "created_at": user.created_at,
                "last_login": user.last_login,
                "registration_id": registration.id if registration else None,
                "beneficiary_name": registration.full_name if registration else None,
                "applications_count": await self.applications_count(user.id),
            })
        page_data["items"] = items
        return page_data

    async def get_student_detail(self, user_id: str) -> dict:
        user = await self.get_user(user_id)
        registration = await self.registration_for(user.id)
        academic = documents = None
        if registration:
            academic = await self.academic_for(registration.id)
            if registration.document_id:
                documents = await self.db.get(BeneficiaryDocument, registration.document_id)

        return {
            "user": user,
            "registration": registration,
            "academic": academic,
            "documents": documents,
            "applications_count": await self.applications_count(user.id),
        }

    # ---------- mutations ----------

    async def create_student_account(self, username: str, password: str) -> User:
        if await self.username_taken(username):
            raise DuplicateUserError(username)

        user = User(
            username=username,
            hashed_password=get_password_hash(password),
            role=UserRole.USER,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateUserError(username)
        logger.info(f"[Admin] Created student account {user.username}")
        return user

    async def update_student_account(self, user_id: str, patch: StudentAccountUpdate) -> dict:
        """Apply only the fields present in the patch"""
        user = await self.get_user(user_id)

        account = patch.account_changes()
        if "username" in account and account["username"] != user.username:
            if await self.username_taken(account["username"]):
                raise DuplicateUserError(account["username"])
            user.username = account["username"]
        if "password" in account:
            user.hashed_password = get_password_hash(account["password"])

        profile = patch.profile_changes()
        registration_changes = {k: v for k, v in profile.items() if k in REGISTRATION_COLUMNS}
        academic_changes = {k: v for k, v in profile.items() if k in ACADEMIC_COLUMNS}

        if registration_changes or academic_changes:
            registration = await self.registration_for(user.id)
            if not registration:
                raise RegistrationNotFoundError(user.id)
            for name, value in registration_changes.items():
                setattr(registration, name, value)

            if academic_changes:
                academic = await self.academic_for(registration.id)
                if not academic:
                    raise ResourceNotFoundError("Academic details", registration.id)
                for name, value in academic_changes.items():
                    setattr(academic, name, value)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateUserError(account.get("username", user_id))
        changed = sorted(set(account) | set(profile))
        logger.info(f"[Admin] Updated student account {user.id}: {', '.join(changed) or 'no changes'}")
        return await self.get_student_detail(user.id)

    async def delete_student_account(self, user_id: str) -> None:
        """Delete an account with its registrations, academic records, documents and applications"""
        user = await self.get_user(user_id)

        registrations = (await self.db.execute(
            select(BeneficiaryRegistration).where(BeneficiaryRegistration.user_id == user.id)
        )).scalars().all()
        registration_ids = [r.id for r in registrations]
        document_ids = [r.document_id for r in registrations if r.document_id]

        stored_urls: List[str] = []
        if document_ids:
            documents = (await self.db.execute(
                select(BeneficiaryDocument).where(BeneficiaryDocument.id.in_(document_ids))
            )).scalars().all()
            for document in documents:
                stored_urls.extend(url for url in document.urls().values() if url)

        applications = (await self.db.execute(
            select(Application).where(Application.user_id == user.id)
        )).scalars().all()
        for application in applications:
            stored_urls.extend(
                getattr(application, slot) for slot in APPLICATION_DOCUMENT_SLOTS
                if getattr(application, slot)
            )

        if registration_ids:
            await self.db.execute(
                delete(AcademicDetails).where(AcademicDetails.beneficiary_id.in_(registration_ids))
            )
            await self.db.execute(
                delete(BeneficiaryRegistration).where(BeneficiaryRegistration.id.in_(registration_ids))
            )
        if document_ids:
            await self.db.execute(
                delete(BeneficiaryDocument).where(BeneficiaryDocument.id.in_(document_ids))
            )
        await self.db.execute(delete(Application).where(Application.user_id == user.id))
        await self.db.execute(
            update(Application).where(Application.reviewed_by == user.id).values(reviewed_by=None)
        )
        await self.db.delete(user)
        await self.db.commit()

        if self.storage and stored_urls:
            await self.storage.discard(stored_urls)

        logger.info(
            f"[Admin] Deleted account {user.username} with {len(registration_ids)} registrations "
            f"and {len(applications)} applications"
        )


async def ensure_admin_account(db: AsyncSession, username: str, password: str) -> Tuple[User, bool]:
    """
    Create an admin account, or promote and reset an existing one.
    Returns (user, created).
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    created = user is None

    if created:
        user = User(username=username, role=UserRole.ADMIN)
        db.add(user)
    user.role = UserRole.ADMIN
    user.hashed_password = get_password_hash(password)
    await db.commit()

    logger.info(f"[Admin] {'Created' if created else 'Updated'} admin account {username}")
    return user, created
