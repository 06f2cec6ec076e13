from datetime import date, datetime
from typing import Optional

from pydantic import EmailStr, field_validator

from scholarship.models.beneficiary import Category, Gender, Religion
from scholarship.schemas.common import (
    AcademicYear,
    CamelModel,
    FormModel,
    LongText,
    MobileNumber,
    NonEmptyStr,
    Percentage,
    PinCode,
    ShortStr,
)


# ============================================
# Input schemas
# ============================================

class BeneficiaryFields(FormModel):
    """Personal, contact, address and social details"""

    first_name: ShortStr
    middle_name: Optional[ShortStr] = None
    last_name: ShortStr
    mother_name: ShortStr
    dob: date
    gender: Gender

    mobile_number: MobileNumber
    email: Optional[EmailStr] = None

    address: LongText
    city: ShortStr
    state: ShortStr
    pin_code: PinCode

    caste: ShortStr
    sub_caste: Optional[ShortStr] = None
    category: Category
    religion: Religion
    orphan: bool = False
    physically_disabled: bool = False

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class AcademicFields(FormModel):
    academic_field: ShortStr
    academic_year: AcademicYear
    course_name: NonEmptyStr
    college_name: NonEmptyStr
    last_academic_year_percentage: Optional[Percentage] = None
    hobbies: Optional[LongText] = None


class BeneficiaryRegistrationForm(BeneficiaryFields, AcademicFields):
    """Text part of the public multipart registration form"""


class AdminRegistrationCreate(BeneficiaryRegistrationForm):
    """Registration created by an administrator for an existing account (no documents)"""

    user_id: str


# ============================================
# Response schemas
# ============================================

class DocumentResponse(CamelModel):
    id: str
    aadhar_card: str
    passport_size_photo: str
    house_image: str
    pan_card: Optional[str] = None
    ration_card: Optional[str] = None
    birth_certificate: Optional[str] = None
    leaving_certificate: Optional[str] = None
    caste_certificate: Optional[str] = None
    caste_validity_certificate: Optional[str] = None
    income_certificate: Optional[str] = None
    domicile_certificate: Optional[str] = None
    created_at: datetime


class BeneficiaryResponse(CamelModel):
    id: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    mother_name: str
    dob: date
    gender: Gender
    mobile_number: str
    email: Optional[str] = None
    address: str
    city: str
    state: str
    pin_code: str
    caste: str
    sub_caste: Optional[str] = None
    category: Category
    religion: Religion
    orphan: bool
    physically_disabled: bool
    document_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AcademicResponse(CamelModel):
    id: str
    academic_field: str
    academic_year: int
    course_name: str
    college_name: str
    last_academic_year_percentage: Optional[float] = None
    hobbies: Optional[str] = None
    beneficiary_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class RegistrationCreatedResponse(CamelModel):
    message: str
    data: BeneficiaryResponse
    academic: Optional[AcademicResponse] = None
    documents: Optional[DocumentResponse] = None
