from typing import Optional, List
from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from sqlalchemy import DateTime

class Comment(SQLModel, table=True):
    __tablename__ = "comments"
    id: Optional[int] = Field(default=None, primary_key=True)
    # author is copied inline; user_id is set when the author is a registered user
    author: str
    email: str
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    message: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True), index=True,
    )

    user: Optional["User"] = Relationship(back_populates="comments")

    replies: List["CommentReply"] = Relationship(
            back_populates="comment",
            sa_relationship_kwargs={
                "cascade": "all, delete-orphan",
                "order_by": "CommentReply.id",
            }
        )


class CommentReply(SQLModel, table=True):
    __tablename__ = "comment_replies"
    id: Optional[int] = Field(default=None, primary_key=True)
    comment_id: int = Field(foreign_key="comments.id", index=True)
    author: str
    email: str
    user_id: Optional[int] = Field(default=None, foreign_key="users.id")
    message: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )

    comment: Optional["Comment"] = Relationship(back_populates="replies")
    user: Optional["User"] = Relationship(back_populates="comment_replies")
