"""
Admin endpoints for creating, editing and deleting student accounts.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship.core.database import get_db
from scholarship.core.logging_config import logger
from scholarship.models import User
from scholarship.modules.auth.dependencies import get_current_admin
from scholarship.schemas.admin import (
    StudentAccountCreate,
    StudentAccountCreated,
    StudentAccountUpdate,
    StudentDetailResponse,
)
from scholarship.schemas.beneficiary import (
    AcademicResponse,
    AdminRegistrationCreate,
    BeneficiaryResponse,
    RegistrationCreatedResponse,
)
from scholarship.schemas.common import MessageResponse
from scholarship.services.admin_service import AdminService
from scholarship.services.registration_service import RegistrationService
from scholarship.services.storage_service import StorageService, get_storage_service

router = APIRouter()


@router.post(
    "/create-student-account",
    response_model=StudentAccountCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_student_account(
    data: StudentAccountCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Create a login for a student (role: user)"""
    user = await AdminService(db).create_student_account(data.username, data.password)
    logger.info(f"[Admin] {current_admin.username} created account {user.username}")
    return {"msg": "Student account created successfully", "user": user}


@router.post(
    "/create-student-registration",
    response_model=RegistrationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_student_registration(
    data: AdminRegistrationCreate,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """Create beneficiary and academic records for an existing account (no documents)"""
    beneficiary, academic, _ = await RegistrationService(db, storage).create_for_user(data)
    return RegistrationCreatedResponse(
        message="Beneficiary registered successfully!",
        data=BeneficiaryResponse.model_validate(beneficiary),
        academic=AcademicResponse.model_validate(academic),
    )


@router.put("/update-student-account/{user_id}", response_model=StudentDetailResponse)
async def update_student_account(
    user_id: str,
    patch: StudentAccountUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Selective update: only fields present in the body are changed"""
    return await AdminService(db).update_student_account(user_id, patch)


@router.delete("/delete-student-account/{user_id}", response_model=MessageResponse)
async def delete_student_account(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_admin: User = Depends(get_current_admin),
):
    """Delete an account together with its registration and applications"""
    await AdminService(db, storage).delete_student_account(user_id)
    logger.info(f"[Admin] {current_admin.username} deleted account {user_id}")
    return {"msg": "Student account deleted successfully"}
