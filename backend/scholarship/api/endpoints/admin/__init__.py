"""
Admin API endpoints.
All endpoints require the admin role.
"""
from fastapi import APIRouter, Depends

from scholarship.api.endpoints.admin import users, students, applications
from scholarship.modules.auth.dependencies import get_current_admin

admin_router = APIRouter(prefix="/admin", dependencies=[Depends(get_current_admin)])

admin_router.include_router(users.router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(students.router, tags=["Admin Students"])
admin_router.include_router(applications.router, tags=["Admin Applications"])
