import logging
import re
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, status, BackgroundTasks
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from core.config import settings
from core.errors import server_error
from core.limiter import api_limit
from database import get_session
from models.comment import Comment, CommentReply
from models.user import User
from schemas.base import USERNAME_PATTERN
from schemas.comment import AuthoredMessage, CommentCreate, CommentRead, ReplyCreate, ReplyRead
from services.broadcast import ConnectionManager, get_broadcaster, NEW_COMMENT, NEW_REPLY

router = APIRouter(prefix="/api/comments")
logger = logging.getLogger(__name__)

USER_EXISTS = "Usuário já existe"


def resolve_author(session: Session, data: AuthoredMessage) -> Tuple[str, str, Optional[int]]:
    """Return ``(author, email, user_id)`` for a comment or reply.

    A ``userId`` must point at a registered user. An inline author whose name
    is a valid username is linked to that user, registering it first when it
    does not exist yet.
    """
    if data.user_id is not None:
        user = session.get(User, data.user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
        return user.username, user.email, user.id

    if not re.fullmatch(USERNAME_PATTERN, data.author):
        return data.author, data.email, None

    user = session.exec(select(User).where(User.username == data.author)).first()
    if not user:
        email_owner = session.exec(select(User).where(User.email == data.email)).first()
        if email_owner:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=USER_EXISTS)
        user = User(username=data.author, email=data.email)
        session.add(user)
        session.flush()
        logger.info("Registered user %s from an inline comment", user.username)
    return data.author, data.email, user.id


@router.post("", status_code=status.HTTP_201_CREATED)
@api_limit
def create_comment(
    request: Request,
    data: CommentCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
):
    try:
        author, email, user_id = resolve_author(session, data)
        comment = Comment(author=author, email=email, user_id=user_id, message=data.message)
        session.add(comment)
        session.commit()
        session.refresh(comment)
    except HTTPException:
        session.rollback()
        raise
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=USER_EXISTS)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to save comment")
        raise server_error("Erro ao salvar comentário", e)

    payload = CommentRead.model_validate(comment).model_dump(mode="json", by_alias=True)
    background_tasks.add_task(broadcaster.broadcast, NEW_COMMENT, payload)
    return {"message": "Comentário enviado com sucesso!", "comment": payload}


@router.get("", response_model=List[CommentRead])
@api_limit
def list_comments(request: Request, session: Session = Depends(get_session)):
    statement = (
        select(Comment)
        .options(selectinload(Comment.replies))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(settings.COMMENTS_LIMIT)
    )
    try:
        return session.exec(statement).all()
    except SQLAlchemyError as e:
        logger.exception("Failed to load comments")
        raise server_error("Erro ao obter comentários", e)


@router.post("/reply", status_code=status.HTTP_201_CREATED)
@api_limit
def reply_to_comment(
    request: Request,
    data: ReplyCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
):
    try:
        parent = session.get(Comment, data.comment_id)
        if not parent:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comentário não encontrado")

        author, email, user_id = resolve_author(session, data)
        reply = CommentReply(
            comment_id=parent.id,
            author=author,
            email=email,
            user_id=user_id,
            message=data.message,
        )
        session.add(reply)
        session.commit()
        session.refresh(reply)
    except HTTPException:
        session.rollback()
        raise
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=USER_EXISTS)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to save reply to comment %s", data.comment_id)
        raise server_error("Erro ao salvar resposta", e)

    reply_payload = ReplyRead.model_validate(reply).model_dump(mode="json", by_alias=True)
    background_tasks.add_task(
        broadcaster.broadcast,
        NEW_REPLY,
        {"commentId": reply.comment_id, "reply": reply_payload},
    )
    return {"message": "Resposta enviada com sucesso!", "reply": reply_payload}
