"""Content store backed by Pinata's IPFS pinning service."""

import asyncio
import json
import logging
from typing import Optional

import requests

from signflow.core.exceptions import NotFoundError, StorageError
from signflow.services.content_store.base import ContentStore

logger = logging.getLogger(__name__)


class PinataContentStore(ContentStore):
    """Pins blobs to IPFS through Pinata and reads them back from its gateway.

    ``requests`` is blocking, so each call runs in the default executor.
    """

    def __init__(
        self,
        api_url: str,
        gateway_url: str,
        api_key: Optional[str],
        secret_api_key: Optional[str],
        max_content_bytes: int,
        timeout: float,
    ):
        if not api_key or not secret_api_key:
            raise ValueError("Pinata API key and secret are required for the pinata content store")
        self.api_url = api_url
        self.gateway_url = gateway_url.rstrip("/")
        self.max_content_bytes = max_content_bytes
        self.timeout = timeout
        self.headers = {
            "pinata_api_key": api_key,
            "pinata_secret_api_key": secret_api_key,
        }

    async def put(self, blob: bytes) -> str:
        if len(blob) > self.max_content_bytes:
            raise StorageError(
                f"Blob of {len(blob)} bytes exceeds the store limit of {self.max_content_bytes} bytes"
            )
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._pin, blob)

    async def get(self, content_id: str) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch, content_id)

    def _pin(self, blob: bytes) -> str:
        files = {"file": ("document", blob)}
        data = {
            "pinataMetadata": json.dumps({"name": self.compute_content_id(blob)}),
            "pinataOptions": json.dumps({"cidVersion": 0}),
        }
        try:
            response = requests.post(
                self.api_url,
                files=files,
                data=data,
                headers=self.headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            content_id = response.json()["IpfsHash"]
        except requests.RequestException as e:
            logger.error(f"Error pinning content to Pinata: {e}", exc_info=True)
            raise StorageError(f"Pinata rejected the content: {e}") from e
        except (KeyError, ValueError) as e:
            logger.error(f"Unexpected Pinata response: {e}", exc_info=True)
            raise StorageError("Pinata returned an unexpected response") from e

        logger.info(f"Pinned content {content_id} ({len(blob)} bytes)")
        return content_id

    def _fetch(self, content_id: str) -> bytes:
        url = f"{self.gateway_url}/{content_id}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Error fetching content {content_id}: {e}", exc_info=True)
            raise StorageError(f"Could not reach the IPFS gateway: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Content {content_id} not found")
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise StorageError(f"IPFS gateway error: {e}") from e
        return response.content
