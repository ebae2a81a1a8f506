from typing import Optional

from schemas.base import CamelModel, UtcDatetime
from models.visit import Visit

class Location(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    country: Optional[str] = None
    city: Optional[str] = None


class VisitRead(CamelModel):
    id: int
    timestamp: UtcDatetime
    ip: Optional[str] = None
    location: Location

    @classmethod
    def from_visit(cls, visit: Visit) -> "VisitRead":
        return cls(
            id=visit.id,
            timestamp=visit.timestamp,
            ip=visit.ip,
            location=Location(
                latitude=visit.latitude,
                longitude=visit.longitude,
                country=visit.country,
                city=visit.city,
            ),
        )


class VisitCount(CamelModel):
    count: int


class LocationCount(Location):
    count: int
