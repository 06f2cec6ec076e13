"""
Public beneficiary registration.

multipart/form-data with the personal, academic and address fields as
text parts and up to eleven document files:

- required: aadharCard, passportSizePhoto, houseImage
- optional: panCard, rationCard, birthCertificate, leavingCertificate,
  casteCertificate, casteValidityCertificate, incomeCertificate,
  domicileCertificate
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship.core.database import get_db
from scholarship.core.exceptions import RegistrationError, StorageError
from scholarship.core.logging_config import logger
from scholarship.models import DOCUMENT_SLOTS, User
from scholarship.modules.auth.dependencies import get_optional_user
from scholarship.schemas.beneficiary import (
    AcademicResponse,
    BeneficiaryRegistrationForm,
    BeneficiaryResponse,
    DocumentResponse,
    RegistrationCreatedResponse,
)
from scholarship.services.registration_service import RegistrationService
from scholarship.services.storage_service import StorageService, get_storage_service
from scholarship.utils.forms import split_multipart, validate_form

router = APIRouter()


@router.post(
    "/beneficiary-register",
    response_model=RegistrationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_beneficiary(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Register a beneficiary with their supporting documents.

    Text fields and the presence of the required documents are checked
    before anything is uploaded. A valid x-auth-token links the
    registration to that account.
    """
    form = await request.form()
    fields, documents = await split_multipart(form, DOCUMENT_SLOTS)
    registration_form = validate_form(BeneficiaryRegistrationForm, fields)

    service = RegistrationService(db, storage)
    try:
        beneficiary, academic, document = await service.register(
            registration_form,
            documents,
            user_id=current_user.id if current_user else None,
        )
    except (StorageError, RegistrationError) as e:
        logger.log_error_with_context(e, "beneficiary_register", documents=sorted(documents))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": RegistrationError().message},
        )

    return RegistrationCreatedResponse(
        message="Beneficiary registered successfully!",
        data=BeneficiaryResponse.model_validate(beneficiary),
        academic=AcademicResponse.model_validate(academic),
        documents=DocumentResponse.model_validate(document),
    )
