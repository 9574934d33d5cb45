import asyncio
import uuid
from datetime import date
from unittest.mock import AsyncMock

import pytest

from app.core.errors import NotFoundError, PersistenceError
from app.forms.author import validate_author
from app.repos import AuthorRepository, BookRepository
from app.schemas.author import AuthorCreate, AuthorRead
from app.schemas.book import BookCreate
from app.schemas.views import (
    AuthorDeleteView,
    AuthorDetailView,
    AuthorFormView,
    AuthorListView,
    BookDetailView,
    IndexView,
    Redirect,
)
from app.services.author_service import AuthorService
from app.services.book_service import BookService
from app.services.catalog_service import CatalogService
from app.services.concurrency import run_concurrently


def _id_from(redirect: Redirect) -> uuid.UUID:
    return uuid.UUID(redirect.location.rsplit("/", 1)[-1])


async def _add_book(sessions, author_id: uuid.UUID, title: str = "Emma") -> None:
    async with sessions() as db:
        await BookRepository.create(
            db, BookCreate(title=title, summary="summary", isbn="9780141439587", author_id=author_id)
        )


class TestCreateAuthor:
    @pytest.mark.asyncio
    async def test_create_then_detail_returns_sanitized_draft(self, sessions, author_form):
        outcome = await AuthorService.create_author(sessions, {**author_form, "first_name": " Jane "})

        assert isinstance(outcome, Redirect)
        detail = await AuthorService.author_detail(sessions, _id_from(outcome))
        expected = validate_author(author_form).draft
        assert AuthorRead.model_validate(detail.author).model_dump(exclude={"id"}) == expected.model_dump()
        assert outcome.location == detail.author.url

    @pytest.mark.asyncio
    async def test_invalid_submission_never_reaches_repository(
        self, sessions, author_form, monkeypatch
    ):
        create = AsyncMock()
        monkeypatch.setattr(AuthorRepository, "create", create)

        outcome = await AuthorService.create_author(sessions, {**author_form, "first_name": ""})

        assert isinstance(outcome, AuthorFormView)
        assert outcome.title == "Create Author"
        assert any(e.field == "first_name" for e in outcome.errors)
        assert outcome.author["family_name"] == "Austen"
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_form_is_empty(self):
        outcome = await AuthorService.create_form()
        assert outcome == AuthorFormView(title="Create Author")


class TestAuthorDetail:
    @pytest.mark.asyncio
    async def test_missing_author_raises_not_found(self, sessions):
        with pytest.raises(NotFoundError) as exc_info:
            await AuthorService.author_detail(sessions, uuid.uuid4())
        assert exc_info.value.message == "Author not found"

    @pytest.mark.asyncio
    async def test_result_does_not_depend_on_fetch_order(self, sessions, monkeypatch):
        original_get = AuthorRepository.get
        original_books = BookRepository.list_by_author
        async with sessions() as db:
            author = await AuthorRepository.create(
                db, AuthorCreate(first_name="Jane", family_name="Austen")
            )
        author_id = author.id
        await _add_book(sessions, author_id)

        async def run(author_delay: float, books_delay: float) -> AuthorDetailView:
            async def slow_get(db, key):
                await asyncio.sleep(author_delay)
                return await original_get(db, key)

            async def slow_books(db, key, fields=("title", "summary")):
                await asyncio.sleep(books_delay)
                return await original_books(db, key, fields)

            monkeypatch.setattr(AuthorRepository, "get", slow_get)
            monkeypatch.setattr(BookRepository, "list_by_author", slow_books)
            return await AuthorService.author_detail(sessions, author_id)

        author_first = await run(0.0, 0.05)
        books_first = await run(0.05, 0.0)

        assert author_first.author.id == books_first.author.id == author_id
        assert [b.title for b in author_first.author_books] == ["Emma"]
        assert [b.title for b in books_first.author_books] == ["Emma"]

    @pytest.mark.asyncio
    async def test_failed_read_cancels_the_other(self, sessions, monkeypatch):
        cancelled = asyncio.Event()

        async def failing_get(db, key):
            await asyncio.sleep(0.01)
            raise PersistenceError("store unavailable")

        async def slow_books(db, key, fields=("title", "summary")):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return []

        monkeypatch.setattr(AuthorRepository, "get", failing_get)
        monkeypatch.setattr(BookRepository, "list_by_author", slow_books)

        with pytest.raises(PersistenceError, match="store unavailable"):
            await AuthorService.author_detail(sessions, uuid.uuid4())
        assert cancelled.is_set()


class TestListAuthors:
    @pytest.mark.asyncio
    async def test_empty_list(self, sessions):
        outcome = await AuthorService.list_authors(sessions)
        assert outcome == AuthorListView(title="Author List", author_list=[])


class TestDeleteAuthor:
    @pytest.mark.asyncio
    async def test_delete_form_for_missing_author_redirects(self, sessions):
        outcome = await AuthorService.delete_form(sessions, uuid.uuid4())
        assert outcome == Redirect("/catalog/authors")

    @pytest.mark.asyncio
    async def test_delete_form_lists_books(self, sessions, author_form):
        created = await AuthorService.create_author(sessions, author_form)
        author_id = _id_from(created)
        await _add_book(sessions, author_id)

        outcome = await AuthorService.delete_form(sessions, author_id)

        assert isinstance(outcome, AuthorDeleteView)
        assert [b.title for b in outcome.author_books] == ["Emma"]

    @pytest.mark.asyncio
    async def test_deleting_missing_author_is_noop(self, sessions):
        outcome = await AuthorService.delete_author(sessions, uuid.uuid4())
        assert outcome == Redirect("/catalog/authors")

    @pytest.mark.asyncio
    async def test_author_with_books_is_kept(self, sessions, author_form):
        created = await AuthorService.create_author(sessions, author_form)
        author_id = _id_from(created)
        await _add_book(sessions, author_id)

        outcome = await AuthorService.delete_author(sessions, author_id)

        assert isinstance(outcome, AuthorDeleteView)
        assert outcome.author is not None
        assert outcome.author.id == author_id
        async with sessions() as db:
            assert await AuthorRepository.get(db, author_id) is not None

    @pytest.mark.asyncio
    async def test_author_without_books_is_deleted(self, sessions, author_form):
        created = await AuthorService.create_author(sessions, author_form)
        author_id = _id_from(created)

        outcome = await AuthorService.delete_author(sessions, author_id)

        assert outcome == Redirect("/catalog/authors")
        async with sessions() as db:
            assert await AuthorRepository.get(db, author_id) is None


class TestUpdateAuthor:
    @pytest.mark.asyncio
    async def test_update_form_for_missing_author_redirects(self, sessions):
        outcome = await AuthorService.update_form(sessions, uuid.uuid4())
        assert outcome == Redirect("/catalog/authors")

    @pytest.mark.asyncio
    async def test_update_form_is_prefilled(self, sessions, author_form):
        author_id = _id_from(await AuthorService.create_author(sessions, author_form))

        outcome = await AuthorService.update_form(sessions, author_id)

        assert isinstance(outcome, AuthorFormView)
        assert outcome.title == "Update Author"
        assert outcome.author.first_name == "Jane"

    @pytest.mark.asyncio
    async def test_unchanged_update_round_trips(self, sessions, author_form):
        author_id = _id_from(await AuthorService.create_author(sessions, author_form))
        before = AuthorRead.model_validate((await AuthorService.author_detail(sessions, author_id)).author)

        outcome = await AuthorService.update_author(sessions, author_id, author_form)

        after = AuthorRead.model_validate((await AuthorService.author_detail(sessions, author_id)).author)
        assert outcome == Redirect(f"/catalog/author/{author_id}")
        assert after == before

    @pytest.mark.asyncio
    async def test_update_changes_fields(self, sessions, author_form):
        author_id = _id_from(await AuthorService.create_author(sessions, author_form))

        await AuthorService.update_author(
            sessions, author_id, {"first_name": "Janet", "family_name": "Austen", "date_of_birth": ""}
        )

        detail = await AuthorService.author_detail(sessions, author_id)
        assert detail.author.first_name == "Janet"
        assert detail.author.date_of_birth is None
        assert detail.author.date_of_death is None

    @pytest.mark.asyncio
    async def test_invalid_update_echoes_draft_with_id(self, sessions, author_form, monkeypatch):
        author_id = _id_from(await AuthorService.create_author(sessions, author_form))
        update = AsyncMock()
        monkeypatch.setattr(AuthorRepository, "update", update)

        outcome = await AuthorService.update_author(
            sessions, author_id, {**author_form, "date_of_death": "not a date"}
        )

        assert isinstance(outcome, AuthorFormView)
        assert outcome.author["id"] == author_id
        assert outcome.author["date_of_death"] == "not a date"
        assert [e.message for e in outcome.errors] == ["Invalid date of death"]
        update.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_of_missing_author_redirects_to_list(self, sessions, author_form):
        outcome = await AuthorService.update_author(sessions, uuid.uuid4(), author_form)
        assert outcome == Redirect("/catalog/authors")


class TestBookAndCatalogServices:
    @pytest.mark.asyncio
    async def test_book_detail(self, sessions, author_form):
        author_id = _id_from(await AuthorService.create_author(sessions, author_form))
        await _add_book(sessions, author_id)
        listing = await BookService.list_books(sessions)

        outcome = await BookService.book_detail(sessions, listing.book_list[0].id)

        assert isinstance(outcome, BookDetailView)
        assert outcome.title == "Emma"
        assert outcome.book.author.name == "Austen, Jane"

    @pytest.mark.asyncio
    async def test_missing_book_raises_not_found(self, sessions):
        with pytest.raises(NotFoundError):
            await BookService.book_detail(sessions, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_index_counts(self, sessions, author_form):
        author_id = _id_from(await AuthorService.create_author(sessions, author_form))
        await _add_book(sessions, author_id)
        await _add_book(sessions, author_id, title="Persuasion")

        outcome = await CatalogService.index(sessions)

        assert outcome == IndexView(title="Local Library Home", author_count=1, book_count=2)


class TestRunConcurrently:
    @pytest.mark.asyncio
    async def test_results_keep_argument_order(self):
        async def value(result, delay):
            await asyncio.sleep(delay)
            return result

        assert await run_concurrently(value("a", 0.02), value("b", 0.0)) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_first_failure_is_raised_unwrapped(self):
        async def fail():
            raise NotFoundError("gone")

        with pytest.raises(NotFoundError, match="gone"):
            await run_concurrently(fail(), asyncio.sleep(5))
