"""Async database access.

The engine and session factory live on a :class:`Database` object that is
built once at startup and handed to whoever needs it: the FastAPI app keeps
it on ``app.state.database`` and the background worker keeps it in its
context dict.
"""

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING, Any

from fastapi import Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gatekeeper.core.errors.exceptions import ConflictError


if TYPE_CHECKING:
    from gatekeeper.config import Settings


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ) -> None:
        engine_kwargs: dict[str, Any] = {"echo": echo}
        # SQLite drivers use a single-connection pool without sizing options
        if not url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True  # Verify connections before use
            if pool_size is not None:
                engine_kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                engine_kwargs["max_overflow"] = max_overflow

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "Database":
        """Build a Database from application settings.

        Args:
            settings: Application settings
            **overrides: Keyword arguments that replace the settings values

        Returns:
            A new Database instance
        """
        options: dict[str, Any] = {
            "echo": settings.database_echo,
            "pool_size": settings.database_pool_size,
            "max_overflow": settings.database_max_overflow,
        }
        options.update(overrides)
        return cls(settings.async_database_url, **options)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session for one request.

    The session commits when the handler returns normally and rolls back
    when anything raises, so every write made while serving a request is
    applied together or not at all.

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


async def flush_unique(session: AsyncSession, message: str, error_code: str) -> None:
    """Flush pending changes, reporting a unique-key violation as a conflict.

    Services check uniqueness before writing, but two concurrent requests
    can both pass that check; the database constraint decides the loser.

    Raises:
        ConflictError: If the flush violates a unique constraint
    """
    try:
        await session.flush()
    except IntegrityError as e:
        raise ConflictError(message, error_code=error_code) from e
