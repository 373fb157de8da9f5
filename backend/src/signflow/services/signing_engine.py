"""Signing engine."""

import logging
from datetime import datetime, timezone
from typing import Optional

from signflow.core.exceptions import AuthenticationError, SignflowError
from signflow.models.document import Document
from signflow.services.document_store import DocumentStore
from signflow.services.signing_policy import check_can_sign

logger = logging.getLogger(__name__)


class SigningEngine:
    """Applies signature events to documents."""

    def __init__(self, document_store: DocumentStore):
        self.document_store = document_store

    async def sign(self, document_id: int, signer: Optional[str]) -> Document:
        """
        Record ``signer``'s signature on a document.

        The existence, completion, membership and duplicate checks run in that
        order inside the document's transaction, so concurrent signers on the
        same document are applied one at a time.

        Raises
        ------
        AuthenticationError
            If there is no signer.
        NotFoundError
            If the document does not exist.
        AlreadyCompletedError
            If every required signer has already signed.
        UnauthorizedSignerError
            If the signer is not a required signer.
        DuplicateSignatureError
            If the signer has already signed.
        """
        if not signer:
            raise AuthenticationError("An authenticated account is required to sign a document")

        try:
            document = await self.document_store.append_signature(
                document_id,
                signer,
                signed_at=datetime.now(timezone.utc),
                check=check_can_sign,
            )
        except SignflowError as e:
            logger.warning(f"Rejected signature by {signer} on document {document_id}: {e.code}")
            raise

        logger.info(
            f"Document {document_id} signed by {signer} "
            f"({len(document.signatures)}/{len(document.required_signers)})"
        )
        if document.is_completed:
            logger.info(f"Document {document_id} completed")
        return document
