from dataclasses import fields
from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.status import HTTP_303_SEE_OTHER

from app.core.config import settings
from app.schemas.views import (
    AuthorDeleteView,
    AuthorDetailView,
    AuthorFormView,
    AuthorListView,
    BookDetailView,
    BookListView,
    IndexView,
    Outcome,
    PageView,
    Redirect,
)

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
templates.env.globals["project_name"] = settings.PROJECT_NAME
templates.env.globals["catalog_prefix"] = settings.CATALOG_PREFIX


def _context(view: PageView) -> dict[str, object]:
    # Shallow on purpose: views hold ORM instances.
    return {f.name: getattr(view, f.name) for f in fields(view)}


def render(request: Request, outcome: Outcome) -> Response:
    """Turn a workflow outcome into a page or a redirect."""
    match outcome:
        case Redirect(location=location):
            return RedirectResponse(location, status_code=HTTP_303_SEE_OTHER)
        case (
            IndexView()
            | AuthorListView()
            | AuthorDetailView()
            | AuthorFormView()
            | AuthorDeleteView()
            | BookListView()
            | BookDetailView()
        ):
            return templates.TemplateResponse(request, outcome.template, _context(outcome))
    raise TypeError(f"Cannot render {type(outcome).__name__}")
