"""Document registry."""

import asyncio
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from signflow.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from signflow.models.document import Document
from signflow.services.content_store.base import ContentStore
from signflow.services.document_store import DocumentStore

logger = logging.getLogger(__name__)


class DocumentRegistry:
    """Creates documents and assigns their ids."""

    def __init__(
        self,
        document_store: DocumentStore,
        content_store: ContentStore,
        max_content_bytes: int,
        content_store_timeout: float,
    ):
        self.document_store = document_store
        self.content_store = content_store
        self.max_content_bytes = max_content_bytes
        self.content_store_timeout = content_store_timeout

    async def create(
        self,
        content: bytes,
        required_signers: Sequence[str],
        creator: Optional[str],
    ) -> Document:
        """
        Store a blob in the content store and register a document for it.

        Parameters
        ----------
        content : bytes
            The document blob.
        required_signers : Sequence[str]
            Accounts that must sign, in order.
        creator : Optional[str]
            The authenticated caller.

        Returns
        -------
        Document
            The new document, with no signatures.

        Raises
        ------
        AuthenticationError
            If there is no creator.
        ValidationError
            If the content or the signer list is invalid.
        StorageError
            If the content store fails or times out.
        """
        creator = self._require_creator(creator)
        signers = self._validate_signers(required_signers)
        if not content:
            raise ValidationError("Document content is empty")
        if len(content) > self.max_content_bytes:
            raise ValidationError(
                f"Document content is {len(content)} bytes, the limit is {self.max_content_bytes} bytes",
                extra={"size": len(content), "max_size": self.max_content_bytes},
            )

        content_id = await self._put_content(content)
        return await self._append(content_id, signers, creator)

    async def register(
        self,
        content_id: str,
        required_signers: Sequence[str],
        creator: Optional[str],
    ) -> Document:
        """Register a document for content already placed in the content store."""
        creator = self._require_creator(creator)
        signers = self._validate_signers(required_signers)
        if not content_id or not content_id.strip():
            raise ValidationError("Content identifier is empty")
        return await self._append(content_id.strip(), signers, creator)

    async def get(self, document_id: int) -> Document:
        document = await self.document_store.get_document(document_id)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found", extra={"document_id": document_id})
        return document

    async def list_all(self) -> List[Document]:
        """Return all documents in creation order."""
        return await self.document_store.list_documents()

    async def get_content(self, document_id: int) -> bytes:
        """Fetch the blob a document refers to."""
        document = await self.get(document_id)
        try:
            return await asyncio.wait_for(
                self.content_store.get(document.content_id),
                timeout=self.content_store_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Content store timed out reading {document.content_id}")
            raise StorageError(
                f"Content store did not respond within {self.content_store_timeout} seconds"
            )

    async def _put_content(self, content: bytes) -> str:
        try:
            return await asyncio.wait_for(
                self.content_store.put(content),
                timeout=self.content_store_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Content store timed out storing {len(content)} bytes")
            raise StorageError(
                f"Content store did not respond within {self.content_store_timeout} seconds"
            )

    async def _append(self, content_id: str, signers: List[str], creator: str) -> Document:
        document = await self.document_store.append_document(
            content_id=content_id,
            creator=creator,
            required_signers=signers,
            created_at=datetime.now(timezone.utc),
        )
        logger.info(f"Document {document.id} created by {creator} for content {content_id}")
        return document

    @staticmethod
    def _require_creator(creator: Optional[str]) -> str:
        if not creator:
            raise AuthenticationError("An authenticated account is required to create a document")
        return creator

    @staticmethod
    def _validate_signers(required_signers: Sequence[str]) -> List[str]:
        if isinstance(required_signers, str):
            raise ValidationError("Required signers must be a list of account identifiers")
        signers = [s.strip() if isinstance(s, str) else s for s in required_signers]
        if not signers:
            raise ValidationError("At least one required signer is needed")
        if any(not isinstance(s, str) or not s for s in signers):
            raise ValidationError("Required signers must be non-empty account identifiers")
        duplicates = sorted(s for s, count in Counter(signers).items() if count > 1)
        if duplicates:
            raise ValidationError(
                f"Duplicate required signers: {', '.join(duplicates)}",
                extra={"duplicates": duplicates},
            )
        return signers
