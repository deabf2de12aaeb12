"""
FastAPI application entry point.

This is the main application that ties together all components:
- API routes for onboarding, transfers and reports
- Database lifecycle management
- Translation of registry errors to HTTP responses
- Logging
"""

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from empresas import __version__
from empresas.api.routes import companies, health
from empresas.api.schemas import ErrorResponse
from empresas.config import Settings, get_settings
from empresas.domain.errors import RegistryError, StoreFailureError
from empresas.infrastructure.database import Database
from empresas.infrastructure.seed import seed_demo_data

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Create the database handle and tables
    - Optionally load demo data
    - Dispose connections on shutdown
    """
    settings: Settings = app.state.settings

    logger.info(f"Starting empresas v{__version__}")
    logger.info(f"Debug mode: {settings.debug}")

    database = Database(settings)
    await database.init()
    app.state.database = database

    if settings.seed_demo_data:
        await seed_demo_data(database)

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down empresas")
    await database.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit settings (defaults to the cached environment settings)

    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level)

    app = FastAPI(
        title="Empresas API",
        description=(
            "Company onboarding and transfer registry.\n\n"
            "Registers companies joining the payments network once per CUIT, "
            "records their transfers and reports on the last month of activity."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    # Register routers
    app.include_router(health.router)
    app.include_router(companies.router)

    @app.exception_handler(RegistryError)
    async def registry_exception_handler(request: Request, exc: RegistryError):
        """Map registry errors to their HTTP status."""
        if isinstance(exc, StoreFailureError):
            logger.error(f"Store failure on {request.method} {request.url.path}: {exc.message}")
            detail = str(exc.__cause__ or exc) if settings.debug else exc.message
        else:
            logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
            detail = exc.message

        body = ErrorResponse(
            error=HTTPStatus(exc.status_code).phrase,
            detail=detail,
            code=exc.code,
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")

        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = "An internal error occurred"

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": detail,
            },
        )

    return app


# Create the application instance
app = create_app()


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "empresas.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
