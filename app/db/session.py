from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from app.core.config import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_pre_ping=True,
)
SessionLocal = async_sessionmaker(
    bind=engine, expire_on_commit=False, autoflush=False
)


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """
    Session factory for handlers that open more than one session
    (concurrent reads need one session each).
    """
    return SessionLocal