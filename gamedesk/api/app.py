"""FastAPI application factory for GameDesk.

Usage::

    from gamedesk.api.app import create_app

    app = create_app(client=HttpResourceClient.from_config(config.remote))

The factory is used by both the production bootstrap (``gamedesk.app``) and
unit tests, which pass an in-memory ResourceClient.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gamedesk.api.routes import router
from gamedesk.api.schemas import ErrorResponse, LoadFailureResponse, ValidationErrorResponse
from gamedesk.api.sessions import DEFAULT_MAX_SESSIONS, SessionNotFoundError, SessionRegistry
from gamedesk.client.base import ResourceClient
from gamedesk.errors import (
    LoadFailure,
    NetworkFailure,
    NotFound,
    RemoteError,
    SessionClosedError,
    UnknownFieldError,
    ValidationError,
)
from gamedesk.models.config import GameDeskConfig

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


def create_app(
    client: ResourceClient,
    config: GameDeskConfig | None = None,
    sessions: SessionRegistry | None = None,
) -> FastAPI:
    """Create and configure the GameDesk FastAPI application.

    Args:
        client:   ResourceClient shared by every route and edit session.
        config:   GameDeskConfig, kept on ``app.state`` for reference.
        sessions: Optional pre-built SessionRegistry.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from gamedesk import __version__

    app = FastAPI(
        title="GameDesk",
        summary="Autosaving edit API for a remote game collection",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.client = client
    app.state.config = config
    if sessions is None:
        max_sessions = config.api.max_sessions if config else DEFAULT_MAX_SESSIONS
        sessions = SessionRegistry(client, max_sessions=max_sessions)
    app.state.sessions = sessions

    app.include_router(router, prefix=_API_PREFIX)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        detail = str(errors[0].get("msg", "")) if errors else "Invalid request"
        return _error(400, "INVALID_REQUEST", detail)

    @app.exception_handler(ValidationError)
    async def validation_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=ValidationErrorResponse(
                error="VALIDATION_FAILED",
                detail="Please fix validation errors before saving",
                fields=exc.errors,
            ).model_dump(),
        )

    @app.exception_handler(LoadFailure)
    async def load_failure_handler(_request: Request, exc: LoadFailure) -> JSONResponse:
        if exc.not_found:
            status_code = 404
        elif isinstance(exc.cause, NetworkFailure):
            status_code = 503
        else:
            status_code = 502
        return JSONResponse(
            status_code=status_code,
            content=LoadFailureResponse(
                error="LOAD_FAILED",
                detail=str(exc),
                game_id=exc.game_id,
                back=f"{_API_PREFIX}/games",
            ).model_dump(),
        )

    @app.exception_handler(UnknownFieldError)
    async def unknown_field_handler(_request: Request, exc: UnknownFieldError) -> JSONResponse:
        return _error(400, "UNKNOWN_FIELD", str(exc))

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(_request: Request, exc: SessionNotFoundError) -> JSONResponse:
        return _error(404, "SESSION_NOT_FOUND", f"No open edit session {exc.args[0]!r}")

    @app.exception_handler(SessionClosedError)
    async def session_closed_handler(_request: Request, exc: SessionClosedError) -> JSONResponse:
        return _error(409, "SESSION_CLOSED", str(exc))

    @app.exception_handler(NotFound)
    async def not_found_handler(_request: Request, exc: NotFound) -> JSONResponse:
        return _error(404, "NOT_FOUND", str(exc))

    @app.exception_handler(RemoteError)
    async def remote_error_handler(_request: Request, exc: RemoteError) -> JSONResponse:
        return _error(502, "REMOTE_ERROR", str(exc))

    @app.exception_handler(NetworkFailure)
    async def network_failure_handler(_request: Request, exc: NetworkFailure) -> JSONResponse:
        return _error(503, "NETWORK_FAILURE", str(exc))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return _error(500, "INTERNAL_ERROR", "An unexpected error occurred.")

    return app
