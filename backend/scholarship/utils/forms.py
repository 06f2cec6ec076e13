"""
Multipart form helpers.

Registration and application endpoints accept ``multipart/form-data`` with
a mix of text fields and named file fields. The frontend sends camelCase
field names (``aadharCard``, ``passportSizePhoto``); documents are keyed by
their snake_case slot name once they leave this module.
"""
from typing import Dict, Iterable, List, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from starlette.datastructures import FormData, UploadFile

from scholarship.core.config import settings
from scholarship.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    UnexpectedFileFieldError,
    ValidationError,
)
from scholarship.services.storage_service import UploadedDocument

ModelT = TypeVar("ModelT", bound=BaseModel)


def slot_lookup(slots: Iterable[str]) -> Dict[str, str]:
    """Accepted form field name (camelCase or snake_case) -> slot name"""
    lookup = {}
    for slot in slots:
        lookup[slot] = slot
        lookup[to_camel(slot)] = slot
    return lookup


def pydantic_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into [{field, msg}]"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.append({"field": field, "msg": error["msg"]})
    return errors


def validate_form(schema: Type[ModelT], data: dict) -> ModelT:
    """Validate text form data, raising the portal's 400 error on failure"""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = pydantic_errors(e)
        first = errors[0]
        raise ValidationError(f"{first['field']}: {first['msg']}", errors=errors)


def check_document(document: UploadedDocument) -> None:
    """Extension and size checks for one uploaded file"""
    allowed = settings.ALLOWED_EXTENSIONS
    extension = document.extension.lstrip('.')
    if extension not in allowed:
        raise InvalidFileTypeError(document.field_name, extension or "unknown", allowed)

    if document.size_bytes == 0:
        raise ValidationError(f"{document.field_name} is empty", field=document.field_name)

    if document.size_bytes > settings.MAX_UPLOAD_SIZE:
        raise FileTooLargeError(document.field_name, settings.MAX_UPLOAD_SIZE)


async def split_multipart(
    form: FormData,
    document_slots: Iterable[str],
) -> Tuple[Dict[str, str], Dict[str, UploadedDocument]]:
    """
    Separate text fields from file fields.

    Returns (text fields keyed as received, documents keyed by slot name).
    File parts without a filename and content are what browsers send for
    an untouched file input; they count as absent.
    """
    lookup = slot_lookup(document_slots)
    fields: Dict[str, str] = {}
    documents: Dict[str, UploadedDocument] = {}

    for name, value in form.multi_items():
        if not isinstance(value, UploadFile):
            fields[name] = value
            continue

        content = await value.read()
        if not value.filename and not content:
            continue

        slot = lookup.get(name)
        if slot is None:
            raise UnexpectedFileFieldError(name)
        if slot in documents:
            raise ValidationError(f"Only one file may be uploaded for {name}", field=name)

        document = UploadedDocument(
            field_name=slot,
            filename=value.filename or slot,
            content=content,
            content_type=value.content_type or "application/octet-stream",
        )
        check_document(document)
        documents[slot] = document

    return fields, documents


def missing_slots(required: Iterable[str], documents: Dict[str, UploadedDocument]) -> List[str]:
    """Required slots absent from documents, in camelCase as the client names them"""
    return [to_camel(slot) for slot in required if slot not in documents]
