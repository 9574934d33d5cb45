from __future__ import annotations
from datetime import date
from sqlalchemy import Date, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import uuid
from app.core.config import settings
from app.models.base import Base


def format_date(value: date | None) -> str:
    """Medium date format, e.g. "Jun 3, 1919"; empty when absent."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


#Author
class Author(Base):
    __tablename__: str = "authors"
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[date | None] = mapped_column(Date, nullable=True)

    @property
    def name(self) -> str:
        if self.first_name and self.family_name:
            return f"{self.family_name}, {self.first_name}"
        return self.family_name or self.first_name or "unknown"

    full_name = name

    @property
    def url(self) -> str:
        return f"{settings.CATALOG_PREFIX}/author/{self.id}"

    @property
    def date_of_birth_formatted(self) -> str:
        return format_date(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_date(self.date_of_death)

    @property
    def lifespan(self) -> str:
        if self.date_of_birth is None and self.date_of_death is None:
            return ""
        return f"{self.date_of_birth_formatted} - {self.date_of_death_formatted}"

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name={self.name!r})"
