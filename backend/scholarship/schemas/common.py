"""
Shared schema building blocks.

The public API speaks camelCase (``mobileNumber``, ``pinCode``,
``houseImage``) while Python code uses snake_case; ``CamelModel`` bridges the
two and accepts either spelling on input.
"""
from datetime import datetime
from typing import Any, List

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

MOBILE_NUMBER_PATTERN = r'^[0-9]{10}$'
PIN_CODE_PATTERN = r'^[0-9]{6}$'
MIN_ACADEMIC_YEAR = 2000
ACADEMIC_YEAR_LOOKAHEAD = 10


def max_academic_year() -> int:
    return datetime.now().year + ACADEMIC_YEAR_LOOKAHEAD


def check_academic_year(value: int) -> int:
    upper = max_academic_year()
    if value < MIN_ACADEMIC_YEAR or value > upper:
        raise ValueError(f"academicYear must be between {MIN_ACADEMIC_YEAR} and {upper}")
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
ShortStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
TinyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
LongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]
MobileNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=MOBILE_NUMBER_PATTERN)]
PinCode = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PIN_CODE_PATTERN)]
AcademicYear = Annotated[int, AfterValidator(check_academic_year)]
Percentage = Annotated[float, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    """Base for request/response bodies exchanged with the frontend"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FormModel(CamelModel):
    """Input model that treats blank strings as absent values (HTML forms send them)"""

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: (None if isinstance(value, str) and not value.strip() else value)
                for key, value in data.items()
            }
        return data


class MessageResponse(BaseModel):
    msg: str


class PaginatedResponse(CamelModel):
    """Standard paginated response"""
    items: List[Any]
    total: int
    page: int
    page_size: int
    total_pages: int
