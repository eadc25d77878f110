"""
Invoicer API - Main Application Entry Point
Invoicing back-end for freelancers and small businesses.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory, init_db, close_db
from app.core.exceptions import AppException, StorageError
from app.core.security import PasswordHasher, TokenService
from app.api.v1.router import api_router


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # Initialize database tables (for development)
    if settings.is_development:
        await init_db(app.state.engine)

    yield

    logger.info("Shutting down...")
    await close_db(app.state.engine)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Domain errors carry their own status code and error code."""
        content = {"detail": exc.detail, "error_code": exc.error_code}
        if exc.extra:
            content.update(exc.extra)

        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors with one entry per invalid field."""
        errors = []
        for error in exc.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"],
            })

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Request validation failed",
                "errors": errors,
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Storage failure on {request.method} {request.url.path}")
        error = StorageError()
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": error.detail, "error_code": error.error_code},
        )


def create_app(settings: Settings | None = None, engine: AsyncEngine | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration, read from the environment when omitted
        engine: Database engine, built from the settings when omitted

    Returns:
        Configured application; settings, engine, session factory and the
        auth collaborators live on `app.state`
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
## Invoicer API

Invoicing back-end: accounts, clients, invoices with line items, revenue
summary and PDF rendering.

* **Authentication** - sign-up (with account reactivation), sign-in, JWT tokens
* **Clients** - CRUD with soft delete
* **Invoices** - items reconciliation, status changes, summary
* **PDF** - invoice download and public preview
        """,
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    engine = engine or build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(settings)
    app.state.password_hasher = PasswordHasher()

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    @app.get(
        "/health",
        tags=["Health"],
        summary="Server health check",
    )
    async def health_check():
        """Check if the API is running."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get(
        "/",
        tags=["Info"],
        summary="API information",
    )
    async def root():
        """Get API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs" if not settings.is_production else "Disabled in production",
            "health": "/health",
        }

    return app


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
    )
