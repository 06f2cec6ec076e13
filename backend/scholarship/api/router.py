from fastapi import APIRouter
from scholarship.api.endpoints import auth, beneficiary, applications, health
from scholarship.api.endpoints.admin import admin_router

api_router = APIRouter()

api_router.include_router(health.router)

# Authentication endpoints
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Public beneficiary registration (multipart)
api_router.include_router(beneficiary.router, tags=["Beneficiary Registration"])

# Scholarship applications for the signed-in user
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])

# Admin endpoints (requires admin role)
api_router.include_router(admin_router)
