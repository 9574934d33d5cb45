from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.repos.author_repo import AuthorRepository
from app.repos.book_repo import BookRepository
from app.services.concurrency import run_concurrently
from app.schemas.views import IndexView


class CatalogService:
    @staticmethod
    # Record counts for the home page, fetched concurrently
    async def index(sessions: async_sessionmaker[AsyncSession]) -> IndexView:
        async def count_authors() -> int:
            async with sessions() as db:
                return await AuthorRepository.count(db)

        async def count_books() -> int:
            async with sessions() as db:
                return await BookRepository.count(db)

        author_count, book_count = await run_concurrently(count_authors(), count_books())
        return IndexView(
            title=f"{settings.PROJECT_NAME} Home",
            author_count=author_count,
            book_count=book_count,
        )
