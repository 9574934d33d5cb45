from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.api.render import render
from app.db.session import get_sessionmaker
from app.services.catalog_service import CatalogService
from typing import Annotated

router = APIRouter(tags=["catalog"])


@router.get("")
async def index(
    request: Request,
    sessions: Annotated[async_sessionmaker[AsyncSession], Depends(get_sessionmaker)],
) -> Response:
    return render(request, await CatalogService.index(sessions))
