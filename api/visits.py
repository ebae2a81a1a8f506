import logging
import secrets
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status, BackgroundTasks, Header
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import delete
from sqlmodel import Session, select, func

from core.config import settings
from core.errors import server_error
from core.limiter import api_limit
from database import get_session
from models.visit import Visit
from schemas.visit import VisitRead, VisitCount, LocationCount
from services.broadcast import ConnectionManager, get_broadcaster, NEW_VISIT
from services.geolocation import Geolocator, get_geolocator, get_client_ip

router = APIRouter(prefix="/api/visits")
logger = logging.getLogger(__name__)


def require_admin_token(authorization: Optional[str] = Header(default=None)):
    """Static bearer token guard; an unset token locks the endpoint."""
    expected = settings.VISITS_ADMIN_TOKEN
    scheme, _, token = (authorization or "").partition(" ")
    if not expected or scheme.lower() != "bearer" or not secrets.compare_digest(token.strip().encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Não autorizado",
            headers={"WWW-Authenticate": "Bearer"},
        )


def count_visits(session: Session) -> int:
    return session.exec(select(func.count(Visit.id))).one()


def save_visit(session: Session, visit: Visit):
    """Persist ``visit`` and return it with the new running total."""
    ip = visit.ip
    try:
        session.add(visit)
        session.commit()
        session.refresh(visit)
        return visit, count_visits(session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to record visit from %s", ip)
        raise server_error("Erro ao registrar visita", e)


@router.post("", status_code=status.HTTP_201_CREATED)
@api_limit
async def record_visit(
    request: Request,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    geolocator: Geolocator = Depends(get_geolocator),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
):
    ip = get_client_ip(request)
    location = await geolocator.locate(ip)

    # sync session work runs in the threadpool
    visit, total = await run_in_threadpool(save_visit, session, Visit(ip=ip, **location))

    payload = VisitRead.from_visit(visit).model_dump(mode="json", by_alias=True)
    payload["total"] = total
    background_tasks.add_task(broadcaster.broadcast, NEW_VISIT, payload)
    return {"message": "Visita registrada", "total": total}


@router.get("/count", response_model=VisitCount)
@api_limit
def get_visit_count(request: Request, session: Session = Depends(get_session)):
    try:
        return VisitCount(count=count_visits(session))
    except SQLAlchemyError as e:
        logger.exception("Failed to count visits")
        raise server_error("Erro ao contar visitas", e)


@router.get("/locations", response_model=List[LocationCount])
@api_limit
def get_visit_locations(request: Request, session: Session = Depends(get_session)):
    """Visits grouped by country and city, busiest first."""
    visits = func.count(Visit.id).label("visits")
    statement = (
        select(
            Visit.country,
            Visit.city,
            func.avg(Visit.latitude).label("latitude"),
            func.avg(Visit.longitude).label("longitude"),
            visits,
        )
        .where(Visit.country.is_not(None))
        .group_by(Visit.country, Visit.city)
        .order_by(visits.desc(), Visit.country)
    )
    try:
        rows = session.exec(statement).all()
    except SQLAlchemyError as e:
        logger.exception("Failed to aggregate visit locations")
        raise server_error("Erro ao obter localizações", e)

    return [
        LocationCount(
            country=row.country,
            city=row.city,
            latitude=row.latitude,
            longitude=row.longitude,
            count=row.visits,
        )
        for row in rows
    ]


@router.delete("", dependencies=[Depends(require_admin_token)])
@api_limit
def delete_visits(request: Request, session: Session = Depends(get_session)):
    try:
        result = session.exec(delete(Visit))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to delete visits")
        raise server_error("Erro ao apagar visitas", e)

    logger.warning("Deleted %d visits", result.rowcount)
    return {"message": "Visitas apagadas", "deleted": result.rowcount}
