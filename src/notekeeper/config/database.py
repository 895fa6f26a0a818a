"""Database configuration and session management."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from notekeeper.exceptions import DatabaseUnavailable
from .settings import settings

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


class Database:
    """
    Process-wide database handle.

    The engine is created lazily by the first ``acquire()``. That call
    starts a single connect attempt and every concurrent caller awaits the
    same attempt instead of opening its own. Once connected the engine is
    reused for the lifetime of the process. A failed attempt is forgotten
    so that the next call starts again from scratch.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        connect_timeout: Optional[float] = None,
        **engine_options,
    ):
        self.url = url or settings.DATABASE_URL
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.DB_CONNECT_TIMEOUT
        self.engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _build_engine(self) -> AsyncEngine:
        options = {
            "echo": settings.DEBUG,
            "pool_pre_ping": True,
        }
        if not self.url.startswith("sqlite"):
            options.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=3600,
            )
        options.update(self.engine_options)
        return create_async_engine(self.url, **options)

    @staticmethod
    async def _ping(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def _connect(self) -> AsyncEngine:
        logger.info("Connecting to database...")
        engine = self._build_engine()
        try:
            await asyncio.wait_for(self._ping(engine), timeout=self.connect_timeout)
        except BaseException:
            await engine.dispose()
            raise
        logger.info("Database connected successfully")
        return engine

    def _forget_failed_attempt(self, attempt: asyncio.Future):
        """Drop a failed attempt as soon as it ends so the next caller retries."""
        if self._pending is attempt and (attempt.cancelled() or attempt.exception() is not None):
            self._pending = None

    async def acquire(self) -> AsyncEngine:
        """Return the shared engine, connecting on first use."""
        if self._engine is not None:
            return self._engine

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect())
            self._pending.add_done_callback(self._forget_failed_attempt)
        pending = self._pending

        try:
            # shield: a cancelled waiter must not cancel the shared attempt
            engine = await asyncio.shield(pending)
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise DatabaseUnavailable(f"Database connection failed: {e}") from e

        if self._engine is None:
            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            self._pending = None
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session on the shared engine."""
        await self.acquire()
        async with self._session_factory() as session:
            yield session

    async def create_all(self) -> None:
        """Create all tables registered on ``Base``."""
        import notekeeper.models  # noqa: F401  registers the mapped tables

        engine = await self.acquire()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Check that the database answers, without raising."""
        try:
            engine = await self.acquire()
            await self._ping(engine)
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._pending = None


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting database session."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
