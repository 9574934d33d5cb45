from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.api.render import render
from app.db.session import get_sessionmaker
from app.services.author_service import AuthorService
from typing import Annotated
import uuid

router = APIRouter(tags=["authors"])

Sessions = Annotated[async_sessionmaker[AsyncSession], Depends(get_sessionmaker)]


@router.get("/authors")
async def author_list(request: Request, sessions: Sessions) -> Response:
    return render(request, await AuthorService.list_authors(sessions))


# Registered before /author/{author_id} so "create" is not read as an id.
@router.get("/author/create")
async def author_create_get(request: Request) -> Response:
    return render(request, await AuthorService.create_form())


@router.post("/author/create")
async def author_create_post(request: Request, sessions: Sessions) -> Response:
    form = await request.form()
    return render(request, await AuthorService.create_author(sessions, form))


@router.get("/author/{author_id}")
async def author_detail(
    request: Request, author_id: uuid.UUID, sessions: Sessions
) -> Response:
    return render(request, await AuthorService.author_detail(sessions, author_id))


@router.get("/author/{author_id}/delete")
async def author_delete_get(
    request: Request, author_id: uuid.UUID, sessions: Sessions
) -> Response:
    return render(request, await AuthorService.delete_form(sessions, author_id))


@router.post("/author/{author_id}/delete")
async def author_delete_post(
    request: Request, author_id: uuid.UUID, sessions: Sessions
) -> Response:
    # The path id is authoritative; the form's authorid field is informational.
    return render(request, await AuthorService.delete_author(sessions, author_id))


@router.get("/author/{author_id}/update")
async def author_update_get(
    request: Request, author_id: uuid.UUID, sessions: Sessions
) -> Response:
    return render(request, await AuthorService.update_form(sessions, author_id))


@router.post("/author/{author_id}/update")
async def author_update_post(
    request: Request, author_id: uuid.UUID, sessions: Sessions
) -> Response:
    form = await request.form()
    return render(request, await AuthorService.update_author(sessions, author_id, form))
