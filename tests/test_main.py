import asyncio

import pytest
from sqlalchemy.exc import OperationalError

import main
from core.config import Settings


def test_store_failure_at_startup_exits(monkeypatch):
    def unreachable_store():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(main, "create_db_and_tables", unreachable_store)

    async def start():
        async with main.lifespan(main.app):
            pass

    with pytest.raises(SystemExit) as excinfo:
        asyncio.run(start())
    assert excinfo.value.code == 1


def test_cors_is_restricted_to_the_frontend_in_production():
    assert Settings(ENVIRONMENT="production").cors_origins == ["https://foness.vercel.app"]


def test_cors_allows_any_origin_outside_production():
    assert Settings(ENVIRONMENT="development").cors_origins == ["*"]
