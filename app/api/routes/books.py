from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.api.render import render
from app.db.session import get_sessionmaker
from app.services.book_service import BookService
from typing import Annotated
import uuid

router = APIRouter(tags=["books"])

Sessions = Annotated[async_sessionmaker[AsyncSession], Depends(get_sessionmaker)]


@router.get("/books")
async def book_list(request: Request, sessions: Sessions) -> Response:
    return render(request, await BookService.list_books(sessions))


@router.get("/book/{book_id}")
async def book_detail(
    request: Request, book_id: uuid.UUID, sessions: Sessions
) -> Response:
    return render(request, await BookService.book_detail(sessions, book_id))
