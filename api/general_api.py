import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status, Depends, BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.errors import server_error
from core.limiter import api_limit
from database import get_session
from models.contact import Contact
from schemas.contact import ContactCreate, ContactRead
from services.broadcast import ConnectionManager, get_broadcaster, NEW_CONTACT

router = APIRouter()
logger = logging.getLogger(__name__)


def health_payload():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/")
@api_limit
def read_root(request: Request):
    return health_payload()


@router.get("/ping")
@api_limit
def ping(request: Request):
    return health_payload()


@router.post("/api/contact", status_code=status.HTTP_201_CREATED)
@api_limit
def create_contact(
    request: Request,
    data: ContactCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
):
    contact = Contact(name=data.name, email=data.email, message=data.message)
    try:
        session.add(contact)
        session.commit()
        session.refresh(contact)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to save contact")
        raise server_error("Erro ao salvar contato", e)

    payload = ContactRead.model_validate(contact).model_dump(mode="json", by_alias=True)
    background_tasks.add_task(broadcaster.broadcast, NEW_CONTACT, payload)
    return {"message": "Mensagem enviada com sucesso!", "contact": payload}
