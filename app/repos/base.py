from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import PersistenceError
from app.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def translate_errors(db: AsyncSession, action: str) -> AsyncIterator[None]:
    """
    Roll back and re-raise store failures as PersistenceError.
    Usage: async with translate_errors(db, "creating author"): ...
    """
    try:
        yield
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Error %s: %s", action, exc)
        raise PersistenceError(f"Error {action}") from exc
