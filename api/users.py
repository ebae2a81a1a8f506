import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, or_

from core.errors import server_error
from core.limiter import api_limit
from database import get_session
from models.user import User
from schemas.user import UserCreate, UserRead

router = APIRouter(prefix="/api/users")
logger = logging.getLogger(__name__)

DUPLICATE_USER = "Usuário ou email já cadastrado"


@router.post("/register", status_code=status.HTTP_201_CREATED)
@api_limit
def register_user(request: Request, user_in: UserCreate, session: Session = Depends(get_session)):
    existing_user = session.exec(
        select(User).where(or_(User.username == user_in.username, User.email == user_in.email))
    ).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_USER)

    db_user = User(username=user_in.username, email=user_in.email)
    try:
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
    except IntegrityError:
        # lost a race against a concurrent registration
        session.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_USER)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to register user %s", user_in.username)
        raise server_error("Erro ao registrar usuário", e)

    logger.info("Registered user %s", db_user.username)
    return {
        "message": "Usuário registrado com sucesso!",
        "user": UserRead.model_validate(db_user).model_dump(mode="json", by_alias=True),
    }
