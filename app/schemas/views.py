"""
View models returned by the workflow services.

One frozen type per (action, outcome); each names the template that renders
it. ``Redirect`` is the only outcome that is not a page.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeAlias

from app.forms.pipeline import FieldError
from app.models.author import Author
from app.models.book import Book


@dataclass(frozen=True)
class Redirect:
    location: str


@dataclass(frozen=True)
class IndexView:
    template: ClassVar[str] = "index.html"
    title: str
    author_count: int
    book_count: int


@dataclass(frozen=True)
class AuthorListView:
    template: ClassVar[str] = "author_list.html"
    title: str
    author_list: Sequence[Author]


@dataclass(frozen=True)
class AuthorDetailView:
    template: ClassVar[str] = "author_detail.html"
    title: str
    author: Author
    author_books: Sequence[Book]


@dataclass(frozen=True)
class AuthorFormView:
    """Create/update form; ``author`` is a stored Author or the echoed submission."""
    template: ClassVar[str] = "author_form.html"
    title: str
    author: Author | Mapping[str, Any] | None = None
    errors: Sequence[FieldError] = field(default_factory=tuple)


@dataclass(frozen=True)
class AuthorDeleteView:
    template: ClassVar[str] = "author_delete.html"
    title: str
    author: Author | None
    author_books: Sequence[Book]


@dataclass(frozen=True)
class BookListView:
    template: ClassVar[str] = "book_list.html"
    title: str
    book_list: Sequence[Book]


@dataclass(frozen=True)
class BookDetailView:
    template: ClassVar[str] = "book_detail.html"
    title: str
    book: Book


PageView: TypeAlias = (
    IndexView
    | AuthorListView
    | AuthorDetailView
    | AuthorFormView
    | AuthorDeleteView
    | BookListView
    | BookDetailView
)
Outcome: TypeAlias = PageView | Redirect
