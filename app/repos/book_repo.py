from __future__ import annotations
from collections.abc import Sequence
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, load_only
import uuid

from app.models.book import Book
from app.repos.base import translate_errors
from app.schemas.book import BookCreate


class BookRepository:
    @staticmethod

    # Create a new book
    async def create(db: AsyncSession, data: BookCreate) -> Book:
        book = Book(**data.model_dump())
        async with translate_errors(db, "creating book"):
            db.add(book)
            await db.commit()
            await db.refresh(book)
        return book

    @staticmethod
    # List books with their authors
    async def list(db: AsyncSession) -> list[Book]:
        stmt = select(Book).options(joinedload(Book.author)).order_by(Book.title.asc())
        async with translate_errors(db, "listing books"):
            return list((await db.scalars(stmt)).all())

    @staticmethod
    # List the books of one author, loading only the projected columns
    async def list_by_author(
        db: AsyncSession,
        author_id: uuid.UUID,
        fields: Sequence[str] = ("title", "summary"),
    ) -> list[Book]:
        columns = [getattr(Book, name) for name in fields]
        stmt = (
            select(Book)
            .where(Book.author_id == author_id)
            .options(load_only(*columns))
            .order_by(Book.title.asc())
        )
        async with translate_errors(db, "listing books by author"):
            return list((await db.scalars(stmt)).all())

    @staticmethod
    # Get a book by ID with its author
    async def get(db: AsyncSession, book_id: uuid.UUID) -> Book | None:
        async with translate_errors(db, "loading book"):
            return await db.get(Book, book_id, options=[joinedload(Book.author)])

    @staticmethod
    # Count books
    async def count(db: AsyncSession) -> int:
        async with translate_errors(db, "counting books"):
            return int(await db.scalar(select(func.count()).select_from(Book)) or 0)
