"""Main module for the document co-signing API service."""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from signflow.api.v1.api import api_router
from signflow.core.config import Settings, get_settings
from signflow.core.exceptions import SignflowError
from signflow.core.middleware import AuthMiddleware
from signflow.services.content_store.factory import ContentStoreFactory
from signflow.services.document_registry import DocumentRegistry
from signflow.services.document_store import DocumentStore
from signflow.services.query_service import QueryService
from signflow.services.signing_engine import SigningEngine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.project_name,
        openapi_url=f"{settings.api_v1_str}/openapi.json",
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.services_initialized = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.add_middleware(AuthMiddleware)

    app.include_router(api_router, prefix=settings.api_v1_str)

    @app.exception_handler(SignflowError)
    async def signflow_error_handler(request: Request, exc: SignflowError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code, "extra": exc.extra},
        )

    @app.on_event("startup")
    async def startup_event():
        """Initialize services once at application startup."""
        logger.info("Initializing application services...")

        document_store = DocumentStore(settings.documents_db_uri)
        try:
            await document_store.init_db()
        except Exception as e:
            logger.critical(f"Failed to initialize document store: {e}", exc_info=True)
            return

        try:
            content_store = ContentStoreFactory.create_store(settings)
        except (OSError, ValueError) as e:
            logger.critical(f"Failed to create content store: {e}", exc_info=True)
            return
        if content_store is None:
            logger.error(f"Failed to create content store for provider: {settings.content_store_provider}")
            return

        app.state.document_store = document_store
        app.state.content_store = content_store
        app.state.document_registry = DocumentRegistry(
            document_store,
            content_store,
            max_content_bytes=settings.max_content_bytes,
            content_store_timeout=settings.content_store_timeout_seconds,
        )
        app.state.signing_engine = SigningEngine(document_store)
        app.state.query_service = QueryService(app.state.document_registry)

        app.state.services_initialized = True
        logger.info("All application services initialized successfully")

    @app.get("/ping")
    async def pong() -> Dict[str, Any]:
        """Ping the API to check if it's running."""
        return {
            "ping": "pong!",
            "environment": settings.environment,
            "testing": settings.testing,
            "services_initialized": app.state.services_initialized,
        }

    return app


app = create_app()
