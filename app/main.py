from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from app.core.config import settings
from app.core.middleware_correlation import CorrelationIdMiddleware
from app.core.logging import setup_logging
from app.core.errors import register_exception_handlers
from app.api.render import templates


# Routers
from app.api.routes.catalog import router as catalog_router
from app.api.routes.authors import router as authors_router
from app.api.routes.books import router as books_router


setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Local Library - a server-rendered catalog of authors and books.",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    """Send visitors to the catalog home page."""
    return RedirectResponse(settings.CATALOG_PREFIX)

register_exception_handlers(app, templates)

# Mount routers
app.include_router(catalog_router, prefix=settings.CATALOG_PREFIX)
app.include_router(authors_router, prefix=settings.CATALOG_PREFIX)
app.include_router(books_router, prefix=settings.CATALOG_PREFIX)
