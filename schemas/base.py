from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

from services.sanitize import sanitize_text

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
USERNAME_PATTERN = r"^[A-Za-z0-9_]{3,20}$"


def as_utc(value: datetime) -> datetime:
    # SQLite returns stored timestamps without their offset; they are always UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base for every payload: camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class CamelInput(CamelModel):

    class Config:
        str_strip_whitespace = True


def sanitize_within(value, max_length: int):
    """Escape ``value`` and enforce ``max_length`` on the text that gets stored."""
    if value is None:
        return value
    value = sanitize_text(value)
    if len(value) > max_length:
        raise ValueError(f"Texto muito longo após sanitização (máximo {max_length} caracteres)")
    return value
