import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.errors import register_exception_handlers
from core.limiter import limiter
from core.middleware import catch_unhandled_errors, security_headers, log_requests
from database import create_db_and_tables

from api import general_api, comments, users, visits, realtime

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 App starting up (%s)...", settings.ENVIRONMENT)
    try:
        create_db_and_tables()
    except SQLAlchemyError as e:
        logger.critical("❌ Could not connect to the database: %s", e)
        sys.exit(1)
    logger.info("✅ Connected to the database")
    yield
    logger.info("🛑 App shutting down...")


app = FastAPI(lifespan=lifespan, title="Realtime Comments Backend")

register_exception_handlers(app)

# Rate limits are applied per endpoint with core.limiter.api_limit
app.state.limiter = limiter

# Middleware added last runs first: CORS, logging, headers, then the 500 catch-all
app.middleware("http")(catch_unhandled_errors)
app.middleware("http")(security_headers)
app.middleware("http")(log_requests)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# Routers
app.include_router(general_api.router)
app.include_router(comments.router)
app.include_router(users.router)
app.include_router(visits.router)
app.include_router(realtime.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        ws_ping_interval=settings.WS_PING_INTERVAL,
        ws_ping_timeout=settings.WS_PING_TIMEOUT,
    )
