from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from scholarship.core.database import get_db
from scholarship.models import Application, ApplicationType, User
from scholarship.modules.auth.dependencies import get_current_user
from scholarship.schemas.application import ApplicationResponse
from scholarship.services.application_service import APPLICATION_RULES, ApplicationService
from scholarship.services.storage_service import StorageService, get_storage_service
from scholarship.utils.forms import split_multipart, validate_form

router = APIRouter()


async def submit_application(
    application_type: ApplicationType,
    request: Request,
    db: AsyncSession,
    storage: StorageService,
    user: User,
) -> Application:
    """Parse the multipart body for one application type and submit it"""
    rule = APPLICATION_RULES[application_type]
    form = await request.form()
    fields, documents = await split_multipart(form, rule.allowed_documents)
    fields.pop("applicationType", None)
    validated = validate_form(rule.fields_schema, fields)
    return await ApplicationService(db, storage).submit(user, application_type, validated, documents)


@router.post("/school-fees", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_school_fees(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: User = Depends(get_current_user),
):
    """School fees aid. Six documents required, ration card optional."""
    return await submit_application(ApplicationType.SCHOOL_FEES, request, db, storage, current_user)


@router.post("/travel-expenses", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_travel_expenses(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: User = Depends(get_current_user),
):
    """Travel expenses aid. Requires an ID card."""
    return await submit_application(ApplicationType.TRAVEL_EXPENSES, request, db, storage, current_user)


@router.post("/study-books", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_study_books(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: User = Depends(get_current_user),
):
    return await submit_application(ApplicationType.STUDY_BOOKS, request, db, storage, current_user)


@router.get("/my-applications", response_model=List[ApplicationResponse])
async def my_applications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The caller's applications, newest first"""
    return await ApplicationService(db).list_for_user(current_user.id)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await ApplicationService(db).get_for_user(application_id, current_user.id)
