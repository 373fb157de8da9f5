"""Factory for creating content stores."""

import logging
from typing import Optional

from signflow.core.config import Settings
from signflow.services.content_store.base import ContentStore
from signflow.services.content_store.filesystem_content_store import (
    FilesystemContentStore,
)
from signflow.services.content_store.pinata_content_store import (
    PinataContentStore,
)

logger = logging.getLogger(__name__)


class ContentStoreFactory:
    """Factory for creating content stores."""

    @staticmethod
    def create_store(settings: Settings) -> Optional[ContentStore]:
        """Create a content store."""
        logger.info(
            f"Creating content store for provider: {settings.content_store_provider}"
        )

        if settings.content_store_provider == "filesystem":
            return FilesystemContentStore(
                settings.content_store_dir,
                settings.max_content_bytes,
            )
        if settings.content_store_provider == "pinata":
            return PinataContentStore(
                api_url=settings.pinata_api_url,
                gateway_url=settings.pinata_gateway_url,
                api_key=settings.pinata_api_key,
                secret_api_key=settings.pinata_secret_api_key,
                max_content_bytes=settings.max_content_bytes,
                timeout=settings.content_store_timeout_seconds,
            )
        return None
