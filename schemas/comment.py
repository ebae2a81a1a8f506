from pydantic import AliasChoices, Field, ValidationInfo, field_validator, model_validator
from typing import Optional, List

from schemas.base import CamelInput, CamelModel, EMAIL_PATTERN, UtcDatetime, sanitize_within

AUTHOR_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254
MESSAGE_MAX_LENGTH = 500


class AuthoredMessage(CamelInput):
    """Either an inline author (``author``/``user`` and ``email``) or a ``userId``."""
    author: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=AUTHOR_MAX_LENGTH,
        validation_alias=AliasChoices("author", "user"),
    )
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=EMAIL_MAX_LENGTH)
    user_id: Optional[int] = None
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)

    @field_validator("author", "email", "message")
    @classmethod
    def sanitize(cls, value, info: ValidationInfo):
        limits = {"author": AUTHOR_MAX_LENGTH, "email": EMAIL_MAX_LENGTH, "message": MESSAGE_MAX_LENGTH}
        return sanitize_within(value, limits[info.field_name])

    @model_validator(mode="after")
    def require_author(self):
        if self.user_id is None and not (self.author and self.email):
            raise ValueError("Usuário, email e mensagem são obrigatórios")
        return self


class CommentCreate(AuthoredMessage):
    pass


class ReplyCreate(AuthoredMessage):
    comment_id: int


class ReplyRead(CamelModel):
    id: int
    comment_id: int
    author: str
    email: str
    user_id: Optional[int] = None
    message: str
    created_at: UtcDatetime


class CommentRead(CamelModel):
    id: int
    author: str
    email: str
    user_id: Optional[int] = None
    message: str
    created_at: UtcDatetime
    replies: List[ReplyRead] = []
