"""Async database engine and session management.

The engine and session factory live on an explicit ``Database`` object
that the application factory builds and stores on ``app.state``.
"""

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING, Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


if TYPE_CHECKING:
    from salescrm.config import Settings


class Database:
    """Owns the async engine and the session factory built on it."""

    def __init__(self, url: str, **engine_options: Any) -> None:
        self.engine: AsyncEngine = create_async_engine(url, **engine_options)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """Build a Database from application settings."""
        return cls(settings.async_database_url, **settings.engine_options)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session.

    Commits when the handler returns normally and rolls back otherwise.

    Usage:
        @router.get("/items")
        async def list_items(db: DBSession):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
