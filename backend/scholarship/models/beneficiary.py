from sqlalchemy import (
    Column, String, Boolean, Date, DateTime, Integer, Float, Text, ForeignKey,
    Enum as SQLEnum,
)
from datetime import datetime
from typing import Dict, Optional
import enum

from scholarship.core.database import Base
from scholarship.core.types import GUID, generate_uuid


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Category(str, enum.Enum):
    """Reservation category"""
    GENERAL = "General"
    OBC = "OBC"
    SC = "SC"
    ST = "ST"
    EWS = "EWS"
    OTHER = "Other"


class Religion(str, enum.Enum):
    HINDU = "Hindu"
    MUSLIM = "Muslim"
    CHRISTIAN = "Christian"
    SIKH = "Sikh"
    BUDDHIST = "Buddhist"
    JAIN = "Jain"
    PARSI = "Parsi"
    JEWISH = "Jewish"
    OTHER = "Other"


# Document slots, in upload form order. Column names match slot names.
MANDATORY_DOCUMENT_SLOTS = (
    "aadhar_card",
    "passport_size_photo",
    "house_image",
)
OPTIONAL_DOCUMENT_SLOTS = (
    "pan_card",
    "ration_card",
    "birth_certificate",
    "leaving_certificate",
    "caste_certificate",
    "caste_validity_certificate",
    "income_certificate",
    "domicile_certificate",
)
DOCUMENT_SLOTS = MANDATORY_DOCUMENT_SLOTS + OPTIONAL_DOCUMENT_SLOTS


class BeneficiaryDocument(Base):
    """Uploaded supporting documents; each slot holds a public URL"""
    __tablename__ = "beneficiary_documents"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Compulsory documents
    aadhar_card = Column(Text, nullable=False)
    passport_size_photo = Column(Text, nullable=False)
    house_image = Column(Text, nullable=False)

    # Optional documents
    pan_card = Column(Text, nullable=True)
    ration_card = Column(Text, nullable=True)
    birth_certificate = Column(Text, nullable=True)
    leaving_certificate = Column(Text, nullable=True)
    caste_certificate = Column(Text, nullable=True)
    caste_validity_certificate = Column(Text, nullable=True)
    income_certificate = Column(Text, nullable=True)
    domicile_certificate = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def urls(self) -> Dict[str, Optional[str]]:
        """Slot name -> URL for every slot, None where nothing was uploaded"""
        return {slot: getattr(self, slot) for slot in DOCUMENT_SLOTS}

    def __repr__(self):
        return f"<BeneficiaryDocument {self.id}>"


class BeneficiaryRegistration(Base):
    """Personal, contact, address and social details of a beneficiary"""
    __tablename__ = "beneficiary_registrations"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Personal details
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=False)
    mother_name = Column(String(100), nullable=False)
    dob = Column(Date, nullable=False)
    gender = Column(SQLEnum(Gender), nullable=False)

    # Contact details
    mobile_number = Column(String(10), nullable=False)
    email = Column(String(255), nullable=True)

    # Address details
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pin_code = Column(String(6), nullable=False)

    # Social and status details
    caste = Column(String(100), nullable=False)
    sub_caste = Column(String(100), nullable=True)
    category = Column(SQLEnum(Category), nullable=False)
    religion = Column(SQLEnum(Religion), nullable=False)
    orphan = Column(Boolean, default=False, nullable=False)
    physically_disabled = Column(Boolean, default=False, nullable=False)

    # References
    document_id = Column(GUID, ForeignKey("beneficiary_documents.id"), nullable=True, index=True)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    def __repr__(self):
        return f"<BeneficiaryRegistration {self.full_name}>"


class AcademicDetails(Base):
    """Current course and last academic result of a beneficiary"""
    __tablename__ = "academic_details"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    academic_field = Column(String(100), nullable=False)
    academic_year = Column(Integer, nullable=False)
    course_name = Column(String(255), nullable=False)
    college_name = Column(String(255), nullable=False)
    last_academic_year_percentage = Column(Float, nullable=True)
    hobbies = Column(Text, nullable=True)

    beneficiary_id = Column(
        GUID, ForeignKey("beneficiary_registrations.id"), nullable=False, index=True
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<AcademicDetails {self.course_name} {self.academic_year}>"
