"""Document router: registration, reads and signing."""

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from signflow.core.dependencies import (
    get_document_registry,
    get_identity_provider,
    get_signing_engine,
)
from signflow.schemas.document_api import (
    DocumentListResponseSchema,
    DocumentRegisterSchema,
    DocumentResponseSchema,
    ErrorResponseSchema,
)
from signflow.services.document_registry import DocumentRegistry
from signflow.services.identity.base import IdentityProvider, OperationDescriptor
from signflow.services.signing_engine import SigningEngine

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Document"],
    responses={
        401: {"model": ErrorResponseSchema},
        404: {"model": ErrorResponseSchema},
        409: {"model": ErrorResponseSchema},
        422: {"model": ErrorResponseSchema},
    },
)


def _parse_signers(signers: str) -> List[str]:
    """Split a comma separated signer list."""
    if not signers.strip():
        return []
    return [s.strip() for s in signers.split(",")]


@router.post(
    "",
    response_model=DocumentResponseSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_document_endpoint(
    file: UploadFile = File(...),
    signers: str = Form("", description="Comma separated account identifiers."),
    registry: DocumentRegistry = Depends(get_document_registry),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> DocumentResponseSchema:
    """
    Upload a document blob and register it for signing.

    Parameters
    ----------
    file : UploadFile
        The document to store in the content store.
    signers : str
        Comma separated list of required signers.

    Returns
    -------
    DocumentResponseSchema
        The created document.
    """
    required_signers = _parse_signers(signers)
    handle = identity.authorize(
        OperationDescriptor(
            function="create_document",
            arguments={"filename": file.filename, "required_signers": required_signers},
        )
    )

    start_time = time.time()
    content = await file.read()
    logger.info(f"Received {file.filename} ({len(content)} bytes) from {handle.account}")

    document = await registry.create(content, required_signers, handle.account)
    logger.info(f"Document {document.id} created in {time.time() - start_time:.2f} seconds")
    return DocumentResponseSchema(**document.model_dump())


@router.post(
    "/register",
    response_model=DocumentResponseSchema,
    status_code=status.HTTP_201_CREATED,
)
async def register_document_endpoint(
    data: DocumentRegisterSchema,
    registry: DocumentRegistry = Depends(get_document_registry),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> DocumentResponseSchema:
    """Register a document for content already in the content store."""
    handle = identity.authorize(
        OperationDescriptor(function="create_document", arguments=data.model_dump())
    )
    document = await registry.register(data.content_id, data.required_signers, handle.account)
    return DocumentResponseSchema(**document.model_dump())


@router.get("", response_model=DocumentListResponseSchema)
async def list_documents_endpoint(
    registry: DocumentRegistry = Depends(get_document_registry),
) -> DocumentListResponseSchema:
    """Return every document in creation order."""
    documents = await registry.list_all()
    return DocumentListResponseSchema(
        documents=[DocumentResponseSchema(**d.model_dump()) for d in documents],
        total=len(documents),
    )


@router.get("/{document_id}", response_model=DocumentResponseSchema)
async def get_document_endpoint(
    document_id: int,
    registry: DocumentRegistry = Depends(get_document_registry),
) -> DocumentResponseSchema:
    document = await registry.get(document_id)
    return DocumentResponseSchema(**document.model_dump())


@router.get("/{document_id}/content")
async def get_document_content_endpoint(
    document_id: int,
    registry: DocumentRegistry = Depends(get_document_registry),
) -> Response:
    """Stream back the blob a document refers to."""
    content = await registry.get_content(document_id)
    return Response(content=content, media_type="application/octet-stream")


@router.post("/{document_id}/sign", response_model=DocumentResponseSchema)
async def sign_document_endpoint(
    document_id: int,
    signing_engine: SigningEngine = Depends(get_signing_engine),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> DocumentResponseSchema:
    """Sign a document as the authenticated account."""
    handle = identity.authorize(
        OperationDescriptor(function="sign_document", arguments={"document_id": document_id})
    )
    document = await signing_engine.sign(document_id, handle.account)
    return DocumentResponseSchema(**document.model_dump())
