from pydantic import Field, field_validator

from schemas.base import CamelInput, CamelModel, EMAIL_PATTERN, USERNAME_PATTERN, UtcDatetime, sanitize_within

EMAIL_MAX_LENGTH = 254

class UserCreate(CamelInput):
    username: str = Field(..., pattern=USERNAME_PATTERN, description="3–20 letters, digits or underscores")
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=EMAIL_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def sanitize(cls, value: str) -> str:
        return sanitize_within(value, EMAIL_MAX_LENGTH)


class UserRead(CamelModel):
    id: int
    username: str
    email: str
    created_at: UtcDatetime
