import os

# Settings are read at import time; point them at a throw-away store first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.session import get_sessionmaker
from app.models.author import Author
from app.models.base import Base
from app.models.book import Book


def make_sessionmaker(url: str) -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(url, poolclass=NullPool)
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
def database_path(tmp_path):
    """SQLite file with the catalog tables created."""
    path = tmp_path / "library.sqlite"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def sessions(database_path) -> async_sessionmaker[AsyncSession]:
    """Async session factory bound to the test database."""
    return make_sessionmaker(f"sqlite+aiosqlite:///{database_path}")


@pytest.fixture
def db_session(database_path):
    """Synchronous session for seeding rows directly."""
    engine = create_engine(f"sqlite:///{database_path}")
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def test_client(sessions):
    """Create a test client for the app, bound to the test database."""
    app.dependency_overrides[get_sessionmaker] = lambda: sessions
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_author_model(db_session) -> Author:
    author = Author(
        id=uuid.uuid4(),
        first_name="Jane",
        family_name="Austen",
        date_of_birth=date(1775, 12, 16),
        date_of_death=date(1817, 7, 18),
    )
    db_session.add(author)
    db_session.commit()
    return author


@pytest.fixture
def sample_book_model(db_session, sample_author_model) -> Book:
    book = Book(
        id=uuid.uuid4(),
        title="Emma",
        summary="A young woman meddles in the love lives of her friends.",
        isbn="9780141439587",
        author_id=sample_author_model.id,
    )
    db_session.add(book)
    db_session.commit()
    return book


@pytest.fixture
def author_form():
    """Valid author form submission."""
    return {
        "first_name": "Jane",
        "family_name": "Austen",
        "date_of_birth": "1775-12-16",
        "date_of_death": "1817-07-18",
    }
