from sqlalchemy import Column, String, DateTime, Float, Text, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from scholarship.core.database import Base
from scholarship.core.types import GUID, generate_uuid


class ApplicationType(str, enum.Enum):
    """Scholarship aid types"""
    SCHOOL_FEES = "schoolFees"
    TRAVEL_EXPENSES = "travelExpenses"
    STUDY_BOOKS = "studyBooks"


class ApplicationStatus(str, enum.Enum):
    """Review status"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Review workflow: a decision is final
ALLOWED_STATUS_TRANSITIONS = {
    ApplicationStatus.PENDING: {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED},
    ApplicationStatus.APPROVED: set(),
    ApplicationStatus.REJECTED: set(),
}


# Every attachment slot any application type may carry
APPLICATION_DOCUMENT_SLOTS = (
    "birth_certificate",
    "leaving_certificate",
    "marksheet",
    "admission_proof",
    "income_proof",
    "bank_account",
    "ration_card",
    "id_card",
)


class Application(Base):
    """A request for one kind of scholarship aid, tagged by application_type"""
    __tablename__ = "applications"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    application_type = Column(SQLEnum(ApplicationType), nullable=False, index=True)
    status = Column(
        SQLEnum(ApplicationStatus), default=ApplicationStatus.PENDING, nullable=False, index=True
    )

    # School fees
    amount = Column(Float, nullable=True)

    # Travel expenses
    residence_place = Column(String(255), nullable=True)
    destination_place = Column(String(255), nullable=True)
    distance = Column(Float, nullable=True)
    travel_mode = Column(String(100), nullable=True)
    aid_required = Column(String(255), nullable=True)

    # Study books
    year_of_study = Column(String(50), nullable=True)
    field = Column(String(100), nullable=True)
    books_required = Column(Text, nullable=True)
    standard = Column(String(50), nullable=True)
    stream = Column(String(100), nullable=True)
    medium = Column(String(50), nullable=True)

    # Attachments (public URLs)
    birth_certificate = Column(Text, nullable=True)
    leaving_certificate = Column(Text, nullable=True)
    marksheet = Column(Text, nullable=True)
    admission_proof = Column(Text, nullable=True)
    income_proof = Column(Text, nullable=True)
    bank_account = Column(Text, nullable=True)
    ration_card = Column(Text, nullable=True)
    id_card = Column(Text, nullable=True)

    # Review
    reviewed_by = Column(GUID, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_remarks = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def can_transition_to(self, new_status: ApplicationStatus) -> bool:
        return new_status in ALLOWED_STATUS_TRANSITIONS.get(self.status, set())

    def __repr__(self):
        return f"<Application {self.application_type.value} {self.status.value}>"
