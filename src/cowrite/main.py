"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cowrite import __version__
from cowrite.api.models import ErrorResponse
from cowrite.api.routes import router
from cowrite.app import Application
from cowrite.config.settings import get_settings
from cowrite.core.exceptions import ExternalCollaboratorError, PreconditionError
from cowrite.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    application = Application()
    await application.startup()

    # Store references in app state
    app.state.store = application.store
    app.state.notes_accumulator = application.notes_accumulator

    yield

    await application.shutdown()


def _error_response(
    status_code: int, error_code: str, exc: Exception, recoverable: bool
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        error_message=str(exc),
        recoverable=recoverable,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def precondition_error_handler(
    request: Request, exc: PreconditionError
) -> JSONResponse:
    logger.warning(
        "Precondition failed", path=request.url.path, field=exc.field, error=str(exc)
    )
    return _error_response(422, "precondition_failed", exc, exc.recoverable)


async def collaborator_error_handler(
    request: Request, exc: ExternalCollaboratorError
) -> JSONResponse:
    logger.error(
        "External collaborator failed",
        path=request.url.path,
        error_code=exc.error_code,
        error=str(exc),
    )
    return _error_response(502, exc.error_code, exc, exc.recoverable)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="Cowrite API",
        description="Versioned artifacts, suggestion reconciliation and conversation notes",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PreconditionError, precondition_error_handler)
    app.add_exception_handler(ExternalCollaboratorError, collaborator_error_handler)

    # Include routes
    app.include_router(router, prefix="/api/v1")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "name": "Cowrite API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


# Create application instance
app = create_app()


def main() -> None:
    """Entry point for running the application."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "cowrite.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
