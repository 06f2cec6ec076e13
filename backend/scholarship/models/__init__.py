# Re-export all models for convenient imports
from scholarship.models.user import User, UserRole
from scholarship.models.beneficiary import (
    BeneficiaryRegistration,
    AcademicDetails,
    BeneficiaryDocument,
    Gender,
    Category,
    Religion,
    DOCUMENT_SLOTS,
    MANDATORY_DOCUMENT_SLOTS,
    OPTIONAL_DOCUMENT_SLOTS,
)
from scholarship.models.application import (
    Application,
    ApplicationType,
    ApplicationStatus,
    APPLICATION_DOCUMENT_SLOTS,
)

__all__ = [
    # User
    "User",
    "UserRole",
    # Beneficiary
    "BeneficiaryRegistration",
    "AcademicDetails",
    "BeneficiaryDocument",
    "Gender",
    "Category",
    "Religion",
    "DOCUMENT_SLOTS",
    "MANDATORY_DOCUMENT_SLOTS",
    "OPTIONAL_DOCUMENT_SLOTS",
    # Applications
    "Application",
    "ApplicationType",
    "ApplicationStatus",
    "APPLICATION_DOCUMENT_SLOTS",
]
