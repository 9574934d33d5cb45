from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, String, Text, Uuid
import uuid
from app.core.config import settings
from app.models.author import Author
from app.models.base import Base

#Book
class Book(Base):
    __tablename__: str = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("authors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Loaded explicitly by the repository; async sessions cannot lazy load.
    author: Mapped[Author] = relationship(lazy="raise")

    @property
    def url(self) -> str:
        return f"{settings.CATALOG_PREFIX}/book/{self.id}"

    def __repr__(self) -> str:
        return f"<Book id={self.id} title='{self.title}'>"
