"""The base class for content stores."""

import hashlib
from abc import ABC, abstractmethod


class ContentStore(ABC):
    """Content-addressable blob store."""

    @abstractmethod
    async def put(self, blob: bytes) -> str:
        """Store a blob and return its content identifier.

        Raises
        ------
        StorageError
            If the store rejects the blob or is unavailable.
        """
        pass

    @abstractmethod
    async def get(self, content_id: str) -> bytes:
        """Return the blob stored under a content identifier.

        Raises
        ------
        NotFoundError
            If no blob exists for the identifier.
        """
        pass

    @staticmethod
    def compute_content_id(blob: bytes) -> str:
        """Derive a content identifier from the blob's sha256 digest."""
        return hashlib.sha256(blob).hexdigest()
