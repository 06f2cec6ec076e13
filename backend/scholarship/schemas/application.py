from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from scholarship.models.application import ApplicationStatus, ApplicationType
from scholarship.schemas.common import (
    CamelModel,
    FormModel,
    LongText,
    NonEmptyStr,
    PaginatedResponse,
    ShortStr,
    TinyStr,
)


# ============================================
# Type-specific fields
# ============================================

class SchoolFeesFields(FormModel):
    amount: Optional[float] = Field(None, ge=0)


class TravelExpensesFields(FormModel):
    residence_place: NonEmptyStr
    destination_place: NonEmptyStr
    distance: float = Field(..., ge=0, description="One-way distance in km")
    travel_mode: ShortStr
    aid_required: NonEmptyStr


class StudyBooksFields(FormModel):
    year_of_study: TinyStr
    field: ShortStr
    books_required: LongText
    standard: Optional[TinyStr] = None
    stream: Optional[ShortStr] = None
    medium: Optional[TinyStr] = None


# Admin variants name the beneficiary account explicitly

class AdminSchoolFeesCreate(SchoolFeesFields):
    user_id: str


class AdminTravelExpensesCreate(TravelExpensesFields):
    user_id: str


class AdminStudyBooksCreate(StudyBooksFields):
    user_id: str


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    remarks: Optional[str] = Field(None, max_length=2000)

    @field_validator("status")
    @classmethod
    def must_be_decision(cls, value: ApplicationStatus) -> ApplicationStatus:
        if value == ApplicationStatus.PENDING:
            raise ValueError("status must be 'approved' or 'rejected'")
        return value


# ============================================
# Response schemas
# ============================================

class ApplicationResponse(CamelModel):
    id: str
    user_id: str
    application_type: ApplicationType
    status: ApplicationStatus

    amount: Optional[float] = None

    residence_place: Optional[str] = None
    destination_place: Optional[str] = None
    distance: Optional[float] = None
    travel_mode: Optional[str] = None
    aid_required: Optional[str] = None

    year_of_study: Optional[str] = None
    field: Optional[str] = None
    books_required: Optional[str] = None
    standard: Optional[str] = None
    stream: Optional[str] = None
    medium: Optional[str] = None

    birth_certificate: Optional[str] = None
    leaving_certificate: Optional[str] = None
    marksheet: Optional[str] = None
    admission_proof: Optional[str] = None
    income_proof: Optional[str] = None
    bank_account: Optional[str] = None
    ration_card: Optional[str] = None
    id_card: Optional[str] = None

    reviewed_at: Optional[datetime] = None
    review_remarks: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ApplicationsPage(PaginatedResponse):
    items: List[ApplicationResponse]
