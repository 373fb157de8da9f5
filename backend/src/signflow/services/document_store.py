"""Async SQLite persistence for documents, signatures and the id counter."""

import asyncio
import json
import logging
import os
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Dict, List, Optional, Tuple

import aiosqlite

from signflow.core.exceptions import NotFoundError
from signflow.models.document import Document, Signature

logger = logging.getLogger(__name__)

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id INTEGER PRIMARY KEY,
    content_id TEXT NOT NULL,
    creator TEXT NOT NULL,
    required_signers TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_documents_creator ON documents(creator);
CREATE TABLE IF NOT EXISTS signatures (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id INTEGER NOT NULL REFERENCES documents(id),
    signer TEXT NOT NULL,
    signed_at TEXT NOT NULL,
    UNIQUE (document_id, signer)
);
CREATE TABLE IF NOT EXISTS document_counter (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    next_id INTEGER NOT NULL
);
INSERT OR IGNORE INTO document_counter (id, next_id) VALUES (1, 0);
"""

DocumentRow = Tuple[int, str, str, str, str]
SignatureRow = Tuple[int, str, str]

# Largest value an SQLite INTEGER column can hold
MAX_DOCUMENT_ID = 2**63 - 1

# Raises if the signature must not be appended to the loaded document
SignatureCheck = Callable[[Document, str], None]


class DocumentStore:
    """Append-only document list plus the counter that assigns ids.

    Every write runs in a single ``BEGIN IMMEDIATE`` transaction. Within the
    process, id allocation is serialized by one lock and signature appends by
    a lock per document, so different documents can be signed concurrently.
    Reads take no locks and see a consistent snapshot.
    """

    def __init__(self, db_path: str, busy_timeout: float = 5.0):
        self.db_path = db_path
        self.busy_timeout = busy_timeout
        self._create_lock = asyncio.Lock()
        self._document_locks: Dict[int, asyncio.Lock] = {}
        self._document_lock_users: Dict[int, int] = {}

    @asynccontextmanager
    async def _document_lock(self, document_id: int) -> AsyncIterator[None]:
        """Hold the document's lock, dropping it once no task holds or awaits it."""
        lock = self._document_locks.setdefault(document_id, asyncio.Lock())
        self._document_lock_users[document_id] = self._document_lock_users.get(document_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._document_lock_users[document_id] -= 1
            if self._document_lock_users[document_id] == 0:
                del self._document_lock_users[document_id]
                del self._document_locks[document_id]

    def _connect(self) -> aiosqlite.Connection:
        return aiosqlite.connect(self.db_path, timeout=self.busy_timeout, isolation_level=None)

    async def init_db(self):
        dir_path = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(dir_path, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL")
            await db.executescript(CREATE_TABLES_SQL)
        logger.info(f"Initialized document store at {self.db_path}")

    async def append_document(
        self,
        content_id: str,
        creator: str,
        required_signers: List[str],
        created_at: datetime,
    ) -> Document:
        """Allocate the next id and append a document with no signatures."""
        async with self._create_lock:
            async with self._connect() as db:
                await db.execute("BEGIN IMMEDIATE")
                try:
                    async with db.execute("SELECT next_id FROM document_counter WHERE id = 1") as cursor:
                        (document_id,) = await cursor.fetchone()
                    await db.execute(
                        """
                        INSERT INTO documents (id, content_id, creator, required_signers, created_at)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (document_id, content_id, creator, json.dumps(required_signers), created_at.isoformat()),
                    )
                    await db.execute(
                        "UPDATE document_counter SET next_id = ? WHERE id = 1",
                        (document_id + 1,),
                    )
                    await db.execute("COMMIT")
                except BaseException:
                    await db.execute("ROLLBACK")
                    raise

        logger.info(f"Appended document {document_id} with {len(required_signers)} required signers")
        return Document(
            id=document_id,
            content_id=content_id,
            creator=creator,
            required_signers=required_signers,
            signatures=[],
            created_at=created_at,
        )

    async def append_signature(
        self,
        document_id: int,
        signer: str,
        signed_at: datetime,
        check: SignatureCheck,
    ) -> Document:
        """Append one signature inside the document's transaction.

        ``check`` runs against the freshly loaded document before the append
        and aborts the transaction by raising.

        Raises
        ------
        NotFoundError
            If the document does not exist.
        """
        if not _valid_id(document_id):
            raise NotFoundError(f"Document {document_id} not found")
        async with self._document_lock(document_id):
            async with self._connect() as db:
                await db.execute("BEGIN IMMEDIATE")
                try:
                    document = await self._load_document(db, document_id)
                    if document is None:
                        raise NotFoundError(f"Document {document_id} not found")
                    check(document, signer)
                    await db.execute(
                        "INSERT INTO signatures (document_id, signer, signed_at) VALUES (?, ?, ?)",
                        (document_id, signer, signed_at.isoformat()),
                    )
                    await db.execute("COMMIT")
                except BaseException:
                    await db.execute("ROLLBACK")
                    raise

        document.signatures.append(Signature(signer=signer, timestamp=signed_at))
        return document

    async def get_document(self, document_id: int) -> Optional[Document]:
        if not _valid_id(document_id):
            return None
        async with self._connect() as db:
            await db.execute("BEGIN")
            try:
                return await self._load_document(db, document_id)
            finally:
                await db.execute("COMMIT")

    async def list_documents(self) -> List[Document]:
        """Return every document in creation order."""
        async with self._connect() as db:
            await db.execute("BEGIN")
            try:
                async with db.execute(
                    "SELECT id, content_id, creator, required_signers, created_at FROM documents ORDER BY id"
                ) as cursor:
                    document_rows = await cursor.fetchall()
                async with db.execute(
                    "SELECT document_id, signer, signed_at FROM signatures ORDER BY seq"
                ) as cursor:
                    signature_rows = await cursor.fetchall()
            finally:
                await db.execute("COMMIT")

        signatures_by_document: Dict[int, List[SignatureRow]] = defaultdict(list)
        for row in signature_rows:
            signatures_by_document[row[0]].append(row)
        return [_to_document(row, signatures_by_document[row[0]]) for row in document_rows]

    async def next_document_id(self) -> int:
        """Return the id the next created document will receive."""
        async with self._connect() as db:
            async with db.execute("SELECT next_id FROM document_counter WHERE id = 1") as cursor:
                (next_id,) = await cursor.fetchone()
        return next_id

    async def _load_document(self, db: aiosqlite.Connection, document_id: int) -> Optional[Document]:
        async with db.execute(
            "SELECT id, content_id, creator, required_signers, created_at FROM documents WHERE id = ?",
            (document_id,),
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        async with db.execute(
            "SELECT document_id, signer, signed_at FROM signatures WHERE document_id = ? ORDER BY seq",
            (document_id,),
        ) as cursor:
            signature_rows = await cursor.fetchall()
        return _to_document(row, signature_rows)


def _valid_id(document_id: int) -> bool:
    return 0 <= document_id <= MAX_DOCUMENT_ID


def _to_document(row: DocumentRow, signature_rows: List[SignatureRow]) -> Document:
    return Document(
        id=row[0],
        content_id=row[1],
        creator=row[2],
        required_signers=json.loads(row[3]),
        signatures=[
            Signature(signer=s[1], timestamp=datetime.fromisoformat(s[2]))
            for s in signature_rows
        ],
        created_at=datetime.fromisoformat(row[4]),
    )
