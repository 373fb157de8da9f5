"""FastAPI dependencies that hand out the services built at startup."""

from fastapi import HTTPException, Request, status

from signflow.services.document_registry import DocumentRegistry
from signflow.services.identity.base import IdentityProvider
from signflow.services.identity.bearer_token_identity_provider import (
    BearerTokenIdentityProvider,
)
from signflow.services.query_service import QueryService
from signflow.services.signing_engine import SigningEngine


def _require_services(request: Request) -> None:
    if not getattr(request.app.state, "services_initialized", False):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Services are not initialized",
        )


def get_document_registry(request: Request) -> DocumentRegistry:
    _require_services(request)
    return request.app.state.document_registry


def get_signing_engine(request: Request) -> SigningEngine:
    _require_services(request)
    return request.app.state.signing_engine


def get_query_service(request: Request) -> QueryService:
    _require_services(request)
    return request.app.state.query_service


def get_identity_provider(request: Request) -> IdentityProvider:
    return BearerTokenIdentityProvider(getattr(request.state, "account", None))
