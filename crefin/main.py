"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from typing import Annotated, Dict, Any

from crefin.config import settings
from crefin.application.dto.base_dto import HealthCheckResponseDTO
from crefin.infrastructure.db.database import create_all_tables
from crefin.infrastructure.ml import get_payment_predictor
from crefin.domain.services.payment_predictor import PaymentPredictor
from crefin.infrastructure.web.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers
)
from crefin.infrastructure.web.routers import clients, invoices, income

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    Setup and teardown operations.
    """
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}")

    if not settings.is_production:
        create_all_tables()
        logger.info("Database tables ensured")

    yield

    logger.info("Shutting down application")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Expected failures are mapped by the handlers; the middleware catches the rest
    register_exception_handlers(app)
    app.add_middleware(ErrorHandlerMiddleware)

    app.include_router(
        clients.router,
        prefix=f"{settings.api_prefix}/clients",
        tags=["Clients"]
    )
    app.include_router(
        invoices.router,
        prefix=f"{settings.api_prefix}/invoices",
        tags=["Invoices"]
    )
    app.include_router(
        income.router,
        prefix=f"{settings.api_prefix}/income",
        tags=["Income"]
    )

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if settings.debug else None,
            "health": f"{settings.api_prefix}/health"
        }

    @app.get(f"{settings.api_prefix}/health")
    async def health_check(
        predictor: Annotated[PaymentPredictor, Depends(get_payment_predictor)]
    ) -> HealthCheckResponseDTO:
        """
        Health check endpoint for monitoring.
        A down prediction service degrades the report but never the status code.
        """
        predictor_up = await predictor.check_health()
        return HealthCheckResponseDTO(
            status="healthy" if predictor_up else "degraded",
            environment=settings.environment,
            version=settings.api_version,
            dependencies={"payment_predictor": "up" if predictor_up else "down"}
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Custom 404 error handler."""
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": f"The path {request.url.path} was not found",
                "path": request.url.path
            }
        )

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crefin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
