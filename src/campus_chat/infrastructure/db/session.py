"""Async engine and session factory for the campus Postgres database."""
from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from campus_chat.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    pool_recycle=settings.DB_POOL_RECYCLE,
    connect_args={
        # Supabase's transaction pooler cannot keep prepared statements
        "statement_cache_size": settings.DB_STATEMENT_CACHE_SIZE,
        "server_settings": {"application_name": settings.DB_APPLICATION_NAME},
    },
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


async def ping_database() -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    await engine.dispose()
    logger.info("Postgres connection pool closed")
