"""
United Pets Backend — Database Engine & Session Management
===========================================================

What:  The `Database` object (async engine + session factory), the ORM base
       class, and the per-request session dependency.
Why:   One process-scoped store handle, created when the app is built and
       disposed on shutdown, injected into every handler via `app.state`.
How:   `Database.session()` opens one transaction per request: commit on
       success, rollback on any error, SQLAlchemy failures re-raised as
       DatabaseError so the global handler answers with a generic 500.

Connection Pooling Strategy (PostgreSQL):
    pool_size / max_overflow:  from settings (defaults 20 + 10)
    pool_pre_ping:            drop stale connections after a DB restart
    pool_recycle=3600:        recycle hourly
    connect / command timeout: asyncpg-level bounds so a hung store cannot
                               hold a request forever
SQLite (tests, local experiments) ignores the pool sizing options.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from united_pets.config import settings
from united_pets.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model (and Alembic autogenerate)."""
    pass


class Database:
    """
    Owns the async engine and hands out transactional sessions.

    Example:
        database = Database(settings.database_url)
        async with database.session() as session:
            session.add(user)
    """

    def __init__(self, url: Optional[str] = None, **engine_options: Any):
        self.url = url or settings.database_url
        options = self._default_engine_options(self.url)
        options.update(engine_options)
        self.engine: AsyncEngine = create_async_engine(self.url, **options)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @staticmethod
    def _default_engine_options(url: str) -> dict:
        options: dict = {"echo": settings.log_level == "DEBUG"}
        if url.startswith("sqlite"):
            return options
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
        if "+asyncpg" in url:
            options["connect_args"] = {
                "timeout": settings.db_connect_timeout,
                "command_timeout": settings.db_command_timeout,
            }
        return options

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session wrapped in a single transaction.

        Everything a handler writes (e.g. the campaign total, the donator
        entry and the user donation record of one donation) commits together
        or not at all.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Database transaction failed: %s", exc, exc_info=True)
                raise DatabaseError(context={"error_type": type(exc).__name__}) from exc
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet (tests and local runs; production uses Alembic)."""
        # Models must be imported so they register with Base.metadata
        import united_pets.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by /health and startup."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as exc:
            logger.warning("Database ping failed: %s", exc)
            return False

    async def dispose(self) -> None:
        """Close every pooled connection (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing one transactional session per request.

    Usage:
        @router.get("/pets")
        async def list_pets(db: AsyncSession = Depends(get_db_session)): ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
