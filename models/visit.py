from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone
from sqlalchemy import DateTime

class Visit(SQLModel, table=True):
    """A single page visit. Location columns stay empty when the IP lookup fails."""
    __tablename__ = "visits"
    id: Optional[int] = Field(default=None, primary_key=True)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True), index=True,
    )
    ip: Optional[str] = Field(default=None, max_length=45)

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    country: Optional[str] = Field(default=None, index=True)
    city: Optional[str] = None