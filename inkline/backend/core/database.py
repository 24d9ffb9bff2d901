"""
Database engine and sessions.

The engine is built on first use so that importing the app never needs
config/.env. SQLite (the default, a single file next to the project) gets
no pool settings; server databases use the pool options in database.yaml.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from inkline.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(db) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": db.echo}
    if not db.driver.startswith("sqlite"):
        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_recycle=db.pool_recycle,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        from inkline.backend.core.config import get_app_config, get_database_url

        db = get_app_config().database
        _engine = create_async_engine(get_database_url(), **_engine_options(db))
        logger.info("Database engine created", extra={"driver": db.driver, "database": db.name})
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def create_tables() -> None:
    """Create missing tables; existing ones are not altered."""
    from inkline.backend.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    One transaction per request: committed after the handler returns,
    rolled back if it raises.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
