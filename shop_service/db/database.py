# shop_service/db/database.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shop_service.config import Settings
from shop_service.errors import StorageError

logger = structlog.get_logger(__name__)

# Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, echo=settings.db_echo)
    # SQLite ignores foreign keys unless asked, Postgres always checks them
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# One session per request; the factory lives on app.state
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.sessionmaker() as session:
        yield session


@asynccontextmanager
async def storage_guard(db: AsyncSession, action: str, **context):
    """Turn driver/ORM failures into StorageError, rolling the session back first.

    The full error goes to the log; the caller only sees the generic message.
    """
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("storage_error", action=action, error=str(e), **context)
        raise StorageError() from e
