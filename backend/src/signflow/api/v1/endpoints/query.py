"""Query router: per-account views over the document list."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from signflow.core.dependencies import get_identity_provider, get_query_service
from signflow.core.exceptions import AuthenticationError
from signflow.models.document import Document
from signflow.schemas.document_api import DocumentListResponseSchema, DocumentResponseSchema
from signflow.services.identity.base import IdentityProvider
from signflow.services.query_service import QueryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["query"])


def _resolve_account(account: Optional[str], identity: IdentityProvider) -> str:
    """Use the explicit account, falling back to the caller's own."""
    resolved = account or identity.current_account()
    if not resolved:
        raise AuthenticationError("Log in or pass an account to query")
    return resolved


def _to_response(documents: List[Document]) -> DocumentListResponseSchema:
    return DocumentListResponseSchema(
        documents=[DocumentResponseSchema(**d.model_dump()) for d in documents],
        total=len(documents),
    )


@router.get("/created", response_model=DocumentListResponseSchema)
async def created_documents_endpoint(
    account: Optional[str] = Query(None, description="Defaults to the authenticated account."),
    query_service: QueryService = Depends(get_query_service),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> DocumentListResponseSchema:
    """Documents created by the account."""
    resolved = _resolve_account(account, identity)
    return _to_response(await query_service.documents_created_by(resolved))


@router.get("/pending", response_model=DocumentListResponseSchema)
async def pending_documents_endpoint(
    account: Optional[str] = Query(None, description="Defaults to the authenticated account."),
    query_service: QueryService = Depends(get_query_service),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> DocumentListResponseSchema:
    """Documents the account still has to sign."""
    resolved = _resolve_account(account, identity)
    return _to_response(await query_service.documents_pending_for(resolved))


@router.get("/signed", response_model=DocumentListResponseSchema)
async def signed_documents_endpoint(
    account: Optional[str] = Query(None, description="Defaults to the authenticated account."),
    query_service: QueryService = Depends(get_query_service),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> DocumentListResponseSchema:
    resolved = _resolve_account(account, identity)
    return _to_response(await query_service.documents_signed_by(resolved))
