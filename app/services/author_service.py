from __future__ import annotations
import uuid
from collections.abc import Mapping
from typing import Any
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.forms.author import validate_author
from app.models.author import Author
from app.models.book import Book
from app.repos.author_repo import AuthorRepository
from app.repos.book_repo import BookRepository
from app.services.concurrency import run_concurrently
from app.schemas.views import (
    AuthorDeleteView,
    AuthorDetailView,
    AuthorFormView,
    AuthorListView,
    Redirect,
)

logger = get_logger(__name__)

Sessions = async_sessionmaker[AsyncSession]


def author_list_url() -> str:
    return f"{settings.CATALOG_PREFIX}/authors"


async def _author_with_books(
    sessions: Sessions, author_id: uuid.UUID
) -> tuple[Author | None, list[Book]]:
    """Load an author and its books concurrently, one session per read."""

    async def load_author() -> Author | None:
        async with sessions() as db:
            return await AuthorRepository.get(db, author_id)

    async def load_books() -> list[Book]:
        async with sessions() as db:
            return await BookRepository.list_by_author(
                db, author_id, fields=("title", "summary")
            )

    author, books = await run_concurrently(load_author(), load_books())
    return author, books


class AuthorService:
    @staticmethod
    # List authors
    async def list_authors(sessions: Sessions) -> AuthorListView:
        async with sessions() as db:
            authors = await AuthorRepository.list(db, sort="family_name", direction="asc")
        return AuthorListView(title="Author List", author_list=authors)

    @staticmethod
    # Author detail with their books
    async def author_detail(sessions: Sessions, author_id: uuid.UUID) -> AuthorDetailView:
        author, books = await _author_with_books(sessions, author_id)
        if author is None:
            raise NotFoundError("Author not found")
        return AuthorDetailView(title="Author Detail", author=author, author_books=books)

    @staticmethod
    # Empty create form
    async def create_form() -> AuthorFormView:
        return AuthorFormView(title="Create Author")

    @staticmethod
    # Validate and create
    async def create_author(
        sessions: Sessions, form: Mapping[str, Any]
    ) -> AuthorFormView | Redirect:
        result = validate_author(form)
        if result.draft is None:
            logger.info("Author create rejected (%d errors)", len(result.errors))
            return AuthorFormView(
                title="Create Author", author=result.echo, errors=result.errors
            )

        async with sessions() as db:
            author = await AuthorRepository.create(db, result.draft)
        logger.info("Created author %s", author.id)
        return Redirect(author.url)

    @staticmethod
    # Delete confirmation
    async def delete_form(
        sessions: Sessions, author_id: uuid.UUID
    ) -> AuthorDeleteView | Redirect:
        author, books = await _author_with_books(sessions, author_id)
        if author is None:
            return Redirect(author_list_url())
        return AuthorDeleteView(title="Delete Author", author=author, author_books=books)

    @staticmethod
    # Delete unless the author still has books
    async def delete_author(
        sessions: Sessions, author_id: uuid.UUID
    ) -> AuthorDeleteView | Redirect:
        author, books = await _author_with_books(sessions, author_id)
        if books:
            logger.info("Refusing to delete author %s: %d books", author_id, len(books))
            return AuthorDeleteView(title="Delete Author", author=author, author_books=books)

        async with sessions() as db:
            await AuthorRepository.delete(db, author_id)
        logger.info("Deleted author %s", author_id)
        return Redirect(author_list_url())

    @staticmethod
    # Update form pre-filled with the stored values
    async def update_form(
        sessions: Sessions, author_id: uuid.UUID
    ) -> AuthorFormView | Redirect:
        async with sessions() as db:
            author = await AuthorRepository.get(db, author_id)
        if author is None:
            return Redirect(author_list_url())
        return AuthorFormView(title="Update Author", author=author)

    @staticmethod
    # Validate and replace
    async def update_author(
        sessions: Sessions, author_id: uuid.UUID, form: Mapping[str, Any]
    ) -> AuthorFormView | Redirect:
        result = validate_author(form)
        if result.draft is None:
            logger.info("Author update rejected (%d errors)", len(result.errors))
            return AuthorFormView(
                title="Update Author",
                author={**result.echo, "id": author_id},
                errors=result.errors,
            )

        async with sessions() as db:
            author = await AuthorRepository.update(db, author_id, result.draft)
        if author is None:
            return Redirect(author_list_url())
        logger.info("Updated author %s", author.id)
        return Redirect(author.url)
