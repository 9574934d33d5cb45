from __future__ import annotations
import uuid
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import NotFoundError
from app.repos.book_repo import BookRepository
from app.schemas.views import BookDetailView, BookListView


class BookService:
    @staticmethod
    # List books
    async def list_books(sessions: async_sessionmaker[AsyncSession]) -> BookListView:
        async with sessions() as db:
            books = await BookRepository.list(db)
        return BookListView(title="Book List", book_list=books)

    @staticmethod
    # Book detail
    async def book_detail(
        sessions: async_sessionmaker[AsyncSession], book_id: uuid.UUID
    ) -> BookDetailView:
        async with sessions() as db:
            book = await BookRepository.get(db, book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return BookDetailView(title=book.title, book=book)
