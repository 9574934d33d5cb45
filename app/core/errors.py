from collections.abc import Mapping, Sequence
from typing import Any,  cast
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel

from app.core.logging import get_logger


class NotFoundError(Exception):
    """Entity missing on a detail-style lookup; rendered as a 404 page."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
        self.message: str = message


class PersistenceError(Exception):
    """The store rejected or could not run an operation."""


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error responses."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }

def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                error_value = ctx["error"]

                if hasattr(error_value, "__str__"):
                    ctx["error"] = str(error_value)
            serialized_error["ctx"] = ctx
        serialized_errors.append(serialized_error)
    return serialized_errors


def register_exception_handlers(app: FastAPI, templates: Jinja2Templates) -> None:
    """Register centralized exception handlers rendering the error page."""

    def render_error(request: Request, status_code: int, body: ErrorBody) -> Response:
        envelope = ErrorEnvelope(error=body, meta=_build_meta(request))
        response = templates.TemplateResponse(
            request,
            "error.html",
            {"title": body.message, "envelope": envelope},
            status_code=status_code,
        )
        # The catch-all handler runs outside CorrelationIdMiddleware.
        response.headers["X-Request-ID"] = str(envelope.meta["request_id"])
        return response

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> Response:
        logger = get_logger(__name__, request)
        logger.info("Not found: %s", exc.message)
        return render_error(
            request, HTTP_404_NOT_FOUND, ErrorBody(type="not_found", message=exc.message)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        message = exc.detail if isinstance(exc.detail, str) and exc.detail else "HTTP error"
        return render_error(
            request, exc.status_code, ErrorBody(type="http_error", message=message)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> Response:
        # Only path parameters are typed, so a malformed id is a missing page.
        logger = get_logger(__name__, request)
        logger.info("Malformed request path")
        body = ErrorBody(
            type="not_found",
            message="Not Found",
            details={"errors": _serialize_validation_errors(exc.errors())},
        )
        return render_error(request, HTTP_404_NOT_FOUND, body)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> Response:
        logger = get_logger(__name__, request)
        logger.exception("Persistence failure", exc_info=exc)
        return render_error(
            request,
            HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorBody(type="persistence_error", message="Internal Server Error"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return render_error(
            request,
            HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorBody(type="server_error", message="Internal Server Error"),
        )
