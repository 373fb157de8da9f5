"""Content store that keeps blobs on the local filesystem."""

import logging
import os
import re
import uuid

import aiofiles

from signflow.core.exceptions import NotFoundError, StorageError
from signflow.services.content_store.base import ContentStore

logger = logging.getLogger(__name__)

CONTENT_ID_PATTERN = re.compile(r"^[0-9a-f]{64}$")


class FilesystemContentStore(ContentStore):
    """Stores each blob in a file named after its sha256 digest."""

    def __init__(self, root_dir: str, max_content_bytes: int):
        self.root_dir = root_dir
        self.max_content_bytes = max_content_bytes
        os.makedirs(self.root_dir, exist_ok=True)
        logger.info(f"Filesystem content store at {self.root_dir}")

    async def put(self, blob: bytes) -> str:
        if len(blob) > self.max_content_bytes:
            raise StorageError(
                f"Blob of {len(blob)} bytes exceeds the store limit of {self.max_content_bytes} bytes"
            )

        content_id = self.compute_content_id(blob)
        path = self._path_for(content_id)
        if os.path.exists(path):
            logger.info(f"Content {content_id} already stored")
            return content_id

        # Write to a temp file first so a reader never sees a partial blob
        tmp_path = f"{path}.{uuid.uuid4().hex}.tmp"
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(blob)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Error writing content {content_id}: {e}", exc_info=True)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not store content: {e}") from e

        logger.info(f"Stored content {content_id} ({len(blob)} bytes)")
        return content_id

    async def get(self, content_id: str) -> bytes:
        if not CONTENT_ID_PATTERN.match(content_id):
            raise NotFoundError(f"Content {content_id} not found")

        path = self._path_for(content_id)
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            raise NotFoundError(f"Content {content_id} not found")
        except OSError as e:
            logger.error(f"Error reading content {content_id}: {e}", exc_info=True)
            raise StorageError(f"Could not read content: {e}") from e

    def _path_for(self, content_id: str) -> str:
        return os.path.join(self.root_dir, content_id)
