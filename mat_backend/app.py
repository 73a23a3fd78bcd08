"""
Application FastAPI du backend Massive Action Tracker.

create_app() instancie le Container DI (le wiring des routes se fait a
l'instanciation), monte les routers et uniformise les erreurs au format
{"error": ...}.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mat_backend import __version__
from mat_backend.config import settings
from mat_backend.infrastructure.container import Container
from mat_backend.routes import accounts, integrations, subscriptions, sync, webhooks

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        content = {"error": "Method not allowed"}
    elif isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps illisible ou mal type: 400 plutot que le 422 par defaut de FastAPI."""
    logger.warning(f"Invalid request on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or "Internal server error"},
    )


def create_app(container: Container = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container deja configure (tests); un nouveau sinon
    """
    container = container or Container()

    app = FastAPI(
        title="Massive Action Tracker API",
        description="Provisioning des comptes et synchronisation GoHighLevel",
        version=__version__,
    )
    app.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(webhooks.router)
    app.include_router(accounts.router)
    app.include_router(subscriptions.router)
    app.include_router(integrations.router)
    app.include_router(sync.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app
