from __future__ import annotations
import uuid
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.author import Author
from app.repos.base import translate_errors
from app.schemas.author import AuthorCreate

_SORTABLE = {
    "family_name": Author.family_name,
    "first_name": Author.first_name,
    "date_of_birth": Author.date_of_birth,
}


class AuthorRepository:

    @staticmethod
    # List authors, unknown sort keys fall back to family_name
    async def list(
        db: AsyncSession,
        sort: str = "family_name",
        direction: str = "asc",
    ) -> list[Author]:
        column = _SORTABLE.get(sort, Author.family_name)
        order = column.desc() if direction == "desc" else column.asc()
        stmt = select(Author).order_by(order, Author.first_name.asc())
        async with translate_errors(db, "listing authors"):
            return list((await db.scalars(stmt)).all())

    @staticmethod
    # Get an author by ID
    async def get(db: AsyncSession, author_id: uuid.UUID) -> Author | None:
        async with translate_errors(db, "loading author"):
            return await db.get(Author, author_id)

    @staticmethod
    # Create a new author
    async def create(db: AsyncSession, data: AuthorCreate) -> Author:
        author = Author(**data.model_dump())
        async with translate_errors(db, "creating author"):
            db.add(author)
            await db.commit()
            await db.refresh(author)
        return author

    @staticmethod
    # Replace the mutable fields of an author, None if it does not exist
    async def update(
        db: AsyncSession, author_id: uuid.UUID, data: AuthorCreate
    ) -> Author | None:
        async with translate_errors(db, "updating author"):
            author = await db.get(Author, author_id)
            if author is None:
                return None
            for name, value in data.model_dump().items():
                setattr(author, name, value)
            await db.commit()
            await db.refresh(author)
        return author

    @staticmethod
    # Delete an author by ID (no-op when absent)
    async def delete(db: AsyncSession, author_id: uuid.UUID) -> None:
        stmt = delete(Author).where(Author.id == author_id)
        async with translate_errors(db, "deleting author"):
            _ = await db.execute(stmt)
            await db.commit()

    @staticmethod
    # Count authors
    async def count(db: AsyncSession) -> int:
        async with translate_errors(db, "counting authors"):
            return int(await db.scalar(select(func.count()).select_from(Author)) or 0)
