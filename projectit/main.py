"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from projectit import __version__
from projectit.api.v1.router import api_router
from projectit.core.config import settings
from projectit.core.database import init_db
from projectit.core.exceptions import ProjectITError
from projectit.core.logging import setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    await init_db()
    logger.info("Application started", environment=settings.ENVIRONMENT)
    yield


async def projectit_error_handler(request: Request, exc: ProjectITError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Project tracking backend with third-party integration webhooks",
        version=__version__,
        openapi_url=None if settings.is_production() else f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ProjectITError, projectit_error_handler)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    return app


app = create_application()
