"""
Admin User Management endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from scholarship.core.database import get_db
from scholarship.models import UserRole
from scholarship.schemas.admin import AdminUsersResponse, StudentDetailResponse
from scholarship.services.admin_service import AdminService

router = APIRouter()


@router.get("", response_model=AdminUsersResponse)
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    db: AsyncSession = Depends(get_db),
):
    """List accounts with search (username, beneficiary name, mobile) and role filter"""
    return await AdminService(db).list_users(page=page, page_size=page_size, search=search, role=role)


@router.get("/{user_id}", response_model=StudentDetailResponse)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get account with its registration, academic details and documents"""
    return await AdminService(db).get_student_detail(user_id)
