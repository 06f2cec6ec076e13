"""
Custom Exceptions for the Scholarship Portal
============================================

Raise these from services and dependencies instead of HTTPException so the
same error can be reused outside a request. The handlers registered in
``scholarship.main`` turn them into JSON responses of the form::

    {"msg": "...", "code": "...", "details": {...}}

Usage:
    from scholarship.core.exceptions import UserNotFoundError

    if not user:
        raise UserNotFoundError(user_id)
"""

from typing import Optional, Any, Dict


class ScholarshipError(Exception):
    """Base exception for all portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"msg": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ScholarshipError):
    """Request could not be authenticated"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class MissingTokenError(AuthenticationError):
    """No token supplied in the auth header"""

    def __init__(self):
        super().__init__("No token, authorization denied")
        self.code = "TOKEN_MISSING"


class InvalidTokenError(AuthenticationError):
    """Token is malformed, expired, or refers to a deleted user"""

    def __init__(self):
        super().__init__("Token is not valid")
        self.code = "INVALID_TOKEN"


class InvalidCredentialsError(ScholarshipError):
    """Username unknown or password mismatch (deliberately indistinguishable)"""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid Credentials", code="INVALID_CREDENTIALS")


class AuthorizationError(ScholarshipError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Access denied. Admin privileges required."):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(ScholarshipError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class RegistrationNotFoundError(ResourceNotFoundError):
    """Beneficiary registration not found"""

    def __init__(self, registration_id: str):
        super().__init__("Registration", registration_id)


class ApplicationNotFoundError(ResourceNotFoundError):
    """Application not found"""

    def __init__(self, application_id: str):
        super().__init__("Application", application_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(ScholarshipError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[list] = None):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, code="VALIDATION_ERROR", details=details)

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if "errors" in self.details:
            body["errors"] = self.details["errors"]
        return body


class DuplicateUserError(ValidationError):
    """Username already taken"""

    def __init__(self, username: str):
        super().__init__("User already exists", field="username")
        self.code = "USER_EXISTS"


class MissingDocumentsError(ValidationError):
    """One or more mandatory document uploads are absent"""

    def __init__(self, missing: list):
        super().__init__(
            f"Please upload all required documents: {', '.join(missing)}",
            field="documents"
        )
        self.code = "MISSING_DOCUMENTS"
        self.details["missing"] = list(missing)


class InvalidFileTypeError(ValidationError):
    """File type not allowed"""

    def __init__(self, field_name: str, file_type: str, allowed_types: list):
        super().__init__(
            f"File type '{file_type}' not allowed for {field_name}. Allowed: {', '.join(allowed_types)}",
            field=field_name
        )
        self.code = "INVALID_FILE_TYPE"
        self.details.update({"file_type": file_type, "allowed_types": allowed_types})


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the configured limit"""

    def __init__(self, field_name: str, max_bytes: int):
        super().__init__(
            f"{field_name} is too large. Maximum size is {max_bytes // (1024 * 1024)}MB",
            field=field_name
        )
        self.code = "FILE_TOO_LARGE"


class UnexpectedFileFieldError(ValidationError):
    """Multipart request carries a file under an unknown field name"""

    def __init__(self, field_name: str):
        super().__init__(f"Unexpected file field: {field_name}", field=field_name)
        self.code = "UNEXPECTED_FILE_FIELD"


# ============================================
# State Errors (409-type)
# ============================================

class InvalidStatusTransitionError(ScholarshipError):
    """Application status change not allowed by the review workflow"""

    status_code = 409

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change application status from '{current}' to '{requested}'",
            code="INVALID_STATUS_TRANSITION",
            details={"current_status": current, "requested_status": requested}
        )


class RegistrationExistsError(ScholarshipError):
    """User already has a beneficiary registration"""

    status_code = 400

    def __init__(self, user_id: str):
        super().__init__(
            "Registration already exists for this user",
            code="REGISTRATION_EXISTS",
            details={"user_id": str(user_id)}
        )


# ============================================
# Storage Errors
# ============================================

class StorageError(ScholarshipError):
    """Storage operation failed"""

    def __init__(self, message: str):
        super().__init__(message, code="STORAGE_ERROR")


class UploadError(StorageError):
    """One or more document uploads failed"""

    def __init__(self, field_names: list, message: str = "Upload failed"):
        super().__init__(f"Failed to upload documents: {message}")
        self.code = "UPLOAD_FAILED"
        self.details["fields"] = list(field_names)


class RegistrationError(ScholarshipError):
    """Persisting a beneficiary registration failed"""

    def __init__(self, message: str = "Server error during registration or file upload"):
        super().__init__(message, code="REGISTRATION_FAILED")


class ApplicationSubmissionError(ScholarshipError):
    """Persisting a scholarship application failed"""

    def __init__(self, message: str = "Server error while submitting application"):
        super().__init__(message, code="APPLICATION_FAILED")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: ScholarshipError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return error.to_dict()
