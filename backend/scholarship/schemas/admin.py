from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from scholarship.models.beneficiary import Category, Gender, Religion
from scholarship.models.user import UserRole
from scholarship.schemas.auth import UserResponse
from scholarship.schemas.beneficiary import (
    AcademicResponse,
    BeneficiaryResponse,
    DocumentResponse,
)
from scholarship.schemas.common import (
    AcademicYear,
    CamelModel,
    FormModel,
    LongText,
    MobileNumber,
    NonEmptyStr,
    PaginatedResponse,
    Percentage,
    PinCode,
    ShortStr,
)


# ==================== Account Schemas ====================

class StudentAccountCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)


class StudentAccountCreated(CamelModel):
    msg: str
    user: UserResponse


class AdminUserResponse(CamelModel):
    """User row in the admin listing"""
    id: str
    username: str
    role: UserRole
    created_at: datetime
    last_login: Optional[datetime] = None
    registration_id: Optional[str] = None
    beneficiary_name: Optional[str] = None
    applications_count: int = 0


class AdminUsersResponse(PaginatedResponse):
    items: List[AdminUserResponse]


class StudentDetailResponse(CamelModel):
    """Account with its registration, academic record and documents"""
    user: UserResponse
    registration: Optional[BeneficiaryResponse] = None
    academic: Optional[AcademicResponse] = None
    documents: Optional[DocumentResponse] = None
    applications_count: int = 0


# Registration/academic columns that may never be cleared
_REQUIRED_PROFILE_FIELDS = {
    "first_name", "last_name", "mother_name", "dob", "gender", "mobile_number",
    "address", "city", "state", "pin_code", "caste", "category", "religion",
    "orphan", "physically_disabled",
    "academic_field", "academic_year", "course_name", "college_name",
    "username", "password",
}


class StudentAccountUpdate(FormModel):
    """
    Selective patch of an account and its registration.

    Only the fields present in the request body are applied; everything
    else keeps its stored value.
    """

    # Account
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=6, max_length=128)

    # Registration
    first_name: Optional[ShortStr] = None
    middle_name: Optional[ShortStr] = None
    last_name: Optional[ShortStr] = None
    mother_name: Optional[ShortStr] = None
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    mobile_number: Optional[MobileNumber] = None
    email: Optional[EmailStr] = None
    address: Optional[LongText] = None
    city: Optional[ShortStr] = None
    state: Optional[ShortStr] = None
    pin_code: Optional[PinCode] = None
    caste: Optional[ShortStr] = None
    sub_caste: Optional[ShortStr] = None
    category: Optional[Category] = None
    religion: Optional[Religion] = None
    orphan: Optional[bool] = None
    physically_disabled: Optional[bool] = None

    # Academic
    academic_field: Optional[ShortStr] = None
    academic_year: Optional[AcademicYear] = None
    course_name: Optional[NonEmptyStr] = None
    college_name: Optional[NonEmptyStr] = None
    last_academic_year_percentage: Optional[Percentage] = None
    hobbies: Optional[LongText] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        cleared = [
            name for name in self.model_fields_set
            if name in _REQUIRED_PROFILE_FIELDS and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"Fields cannot be empty: {', '.join(sorted(cleared))}")
        return self

    def account_changes(self) -> dict:
        return self.model_dump(include={"username", "password"}, exclude_unset=True)

    def profile_changes(self) -> dict:
        return self.model_dump(exclude={"username", "password"}, exclude_unset=True)
