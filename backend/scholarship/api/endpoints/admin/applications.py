"""
Admin endpoints for scholarship applications.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from scholarship.core.database import get_db
from scholarship.models import ApplicationStatus, ApplicationType, User
from scholarship.modules.auth.dependencies import get_current_admin
from scholarship.schemas.application import (
    AdminSchoolFeesCreate,
    AdminStudyBooksCreate,
    AdminTravelExpensesCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationsPage,
)
from scholarship.services.application_service import ApplicationService

router = APIRouter()


@router.post(
    "/create-school-fees-application",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_school_fees_application(
    data: AdminSchoolFeesCreate,
    db: AsyncSession = Depends(get_db),
):
    return await ApplicationService(db).create_for_user(ApplicationType.SCHOOL_FEES, data)


@router.post(
    "/create-travel-expenses-application",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_travel_expenses_application(
    data: AdminTravelExpensesCreate,
    db: AsyncSession = Depends(get_db),
):
    return await ApplicationService(db).create_for_user(ApplicationType.TRAVEL_EXPENSES, data)


@router.post(
    "/create-study-books-application",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_study_books_application(
    data: AdminStudyBooksCreate,
    db: AsyncSession = Depends(get_db),
):
    return await ApplicationService(db).create_for_user(ApplicationType.STUDY_BOOKS, data)


@router.get("/applications", response_model=ApplicationsPage)
async def list_applications(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    application_type: Optional[ApplicationType] = Query(None, alias="type"),
    user_id: Optional[str] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    """All applications, newest first, filterable by status, type and account"""
    return await ApplicationService(db).list_all(
        page=page,
        page_size=page_size,
        status=status_filter,
        application_type=application_type,
        user_id=user_id,
    )


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
async def review_application(
    application_id: str,
    decision: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Approve or reject a pending application"""
    return await ApplicationService(db).review(
        application_id, current_admin, decision.status, decision.remarks
    )
