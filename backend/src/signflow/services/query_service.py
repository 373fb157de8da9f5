"""Query service."""

import logging
from typing import List

from signflow.models.document import Document
from signflow.services.document_registry import DocumentRegistry
from signflow.services.signing_policy import can_sign

logger = logging.getLogger(__name__)


class QueryService:
    """Read-only projections over the registry.

    Each call fetches a fresh snapshot; nothing is cached between calls.
    """

    def __init__(self, registry: DocumentRegistry):
        self.registry = registry

    async def documents_created_by(self, account: str) -> List[Document]:
        """Documents created by ``account``, in creation order."""
        documents = await self.registry.list_all()
        return [d for d in documents if d.creator == account]

    async def documents_pending_for(self, account: str) -> List[Document]:
        """Documents ``account`` could sign right now."""
        documents = await self.registry.list_all()
        pending = [d for d in documents if can_sign(d, account)]
        logger.info(f"{len(pending)} documents pending for {account}")
        return pending

    async def documents_signed_by(self, account: str) -> List[Document]:
        documents = await self.registry.list_all()
        return [d for d in documents if d.has_signed(account)]
