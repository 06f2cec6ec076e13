# Schemas
from scholarship.schemas.common import CamelModel, FormModel, MessageResponse, PaginatedResponse
from scholarship.schemas.auth import UserRegister, UserLogin, LoginResponse, PublicUser, UserResponse
from scholarship.schemas.beneficiary import (
    BeneficiaryRegistrationForm,
    AdminRegistrationCreate,
    BeneficiaryResponse,
    AcademicResponse,
    DocumentResponse,
    RegistrationCreatedResponse,
)
from scholarship.schemas.application import (
    SchoolFeesFields,
    TravelExpensesFields,
    StudyBooksFields,
    ApplicationStatusUpdate,
    ApplicationResponse,
)

__all__ = [
    "CamelModel",
    "FormModel",
    "MessageResponse",
    "PaginatedResponse",
    "UserRegister",
    "UserLogin",
    "LoginResponse",
    "PublicUser",
    "UserResponse",
    "BeneficiaryRegistrationForm",
    "AdminRegistrationCreate",
    "BeneficiaryResponse",
    "AcademicResponse",
    "DocumentResponse",
    "RegistrationCreatedResponse",
    "SchoolFeesFields",
    "TravelExpensesFields",
    "StudyBooksFields",
    "ApplicationStatusUpdate",
    "ApplicationResponse",
]
