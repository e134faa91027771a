"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from pantry_tracker.api.food_items import router as food_items_router
from pantry_tracker.api.notifications import router as notifications_router
from pantry_tracker.api.shopping_cart import router as shopping_cart_router
from pantry_tracker.app_logging import configure_logging
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.errors import (
    FieldError,
    InvalidArgumentError,
    NotFoundError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Pantry tracker starting",
            extra={"storage_backend": container.settings.storage_backend},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(food_items_router)
    app.include_router(notifications_router)
    app.include_router(shopping_cart_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(NotFoundError)
    async def not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"message": str(exc)}
        )

    @app.exception_handler(ValidationError)
    async def validation_failed(_: Request, exc: ValidationError) -> JSONResponse:
        return _validation_response(
            [FieldError(to_camel(error.field), error.message) for error in exc.errors]
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_failed(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _validation_response(
            [
                FieldError(_field_name(error.get("loc", ())), error.get("msg", ""))
                for error in exc.errors()
            ]
        )

    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument(_: Request, exc: InvalidArgumentError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content={"message": str(exc.detail)}
        )

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error", extra={"path": request.url.path, "method": request.method}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": _format_internal_error(container, exc)},
        )

    return app


def _validation_response(errors: list[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation error",
            "errors": [
                {"field": error.field, "message": error.message} for error in errors
            ],
        },
    )


def _field_name(loc: tuple[object, ...] | list[object]) -> str:
    """Drop the request section ("body", "query") from a pydantic error location."""
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in {"body", "query", "path"}:
        parts = parts[1:]
    return ".".join(parts)


def _format_internal_error(container: AppContainer, exc: Exception) -> str:
    """Return a generic error message with local debug info."""
    fallback = "Internal server error"
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
