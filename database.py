# backend/database.py
import logging

from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine, SQLModel, Session

from core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    """Create the engine; SQLite connections are shared across threads."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # an in-memory database only lives as long as its single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_recycle=3600, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

def create_db_and_tables():
    """Initializes the database and creates all tables from models package"""
    # Importing models package ensures SQLModel metadata is populated
    import models  # noqa: F401
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")

# Dependency to get a database session
def get_session():
    """Provides a transactional database session."""
    with Session(engine) as session:
        yield session
