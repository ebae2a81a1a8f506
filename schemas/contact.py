from pydantic import Field, ValidationInfo, field_validator

from schemas.base import CamelInput, CamelModel, EMAIL_PATTERN, UtcDatetime, sanitize_within

MAX_LENGTHS = {"name": 50, "email": 254, "message": 1000}

class ContactCreate(CamelInput):
    name: str = Field(..., min_length=1, max_length=MAX_LENGTHS["name"], description="Full name (1–50 characters)")
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=MAX_LENGTHS["email"])
    message: str = Field(..., min_length=1, max_length=MAX_LENGTHS["message"], description="Message (1–1000 characters)")

    @field_validator("name", "email", "message")
    @classmethod
    def sanitize(cls, value: str, info: ValidationInfo) -> str:
        return sanitize_within(value, MAX_LENGTHS[info.field_name])


class ContactRead(CamelModel):
    id: int
    name: str
    email: str
    message: str
    created_at: UtcDatetime
