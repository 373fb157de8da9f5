"""Shared fixtures: services wired against a temporary database and content dir."""

import asyncio

import pytest
import pytest_asyncio

from signflow.services.content_store.base import ContentStore
from signflow.services.content_store.filesystem_content_store import FilesystemContentStore
from signflow.services.document_registry import DocumentRegistry
from signflow.services.document_store import DocumentStore
from signflow.services.query_service import QueryService
from signflow.services.signing_engine import SigningEngine

MAX_CONTENT_BYTES = 1024


class SlowContentStore(ContentStore):
    """Content store that never answers in time."""

    def __init__(self, delay: float):
        self.delay = delay

    async def put(self, blob: bytes) -> str:
        await asyncio.sleep(self.delay)
        return self.compute_content_id(blob)

    async def get(self, content_id: str) -> bytes:
        await asyncio.sleep(self.delay)
        return b""


@pytest_asyncio.fixture
async def document_store(tmp_path):
    store = DocumentStore(str(tmp_path / "documents.db"))
    await store.init_db()
    return store


@pytest.fixture
def content_store(tmp_path):
    return FilesystemContentStore(str(tmp_path / "content"), MAX_CONTENT_BYTES)


@pytest.fixture
def registry(document_store, content_store):
    return DocumentRegistry(
        document_store,
        content_store,
        max_content_bytes=MAX_CONTENT_BYTES,
        content_store_timeout=1.0,
    )


@pytest.fixture
def signing_engine(document_store):
    return SigningEngine(document_store)


@pytest.fixture
def query_service(registry):
    return QueryService(registry)
