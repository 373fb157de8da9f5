"""Rules deciding whether an account may sign a document right now.

Both the signing engine and the pending-documents query go through
``signing_refusal`` so they can never disagree.
"""

from typing import Optional

from signflow.core.exceptions import (
    AlreadyCompletedError,
    DuplicateSignatureError,
    SignflowError,
    UnauthorizedSignerError,
)
from signflow.models.document import Document


def signing_refusal(document: Document, account: str) -> Optional[SignflowError]:
    """Return the error that blocks ``account`` from signing, or None.

    Checks run in a fixed order: completion, membership, prior signature.
    """
    if document.is_completed:
        return AlreadyCompletedError(
            f"Document {document.id} is already completed",
            extra={"document_id": document.id},
        )
    if account not in document.required_signers:
        return UnauthorizedSignerError(
            f"Account {account} is not a required signer of document {document.id}",
            extra={"document_id": document.id, "account": account},
        )
    if document.has_signed(account):
        return DuplicateSignatureError(
            f"Account {account} has already signed document {document.id}",
            extra={"document_id": document.id, "account": account},
        )
    return None


def check_can_sign(document: Document, account: str) -> None:
    """Raise the refusal for ``account`` if there is one."""
    refusal = signing_refusal(document, account)
    if refusal is not None:
        raise refusal


def can_sign(document: Document, account: str) -> bool:
    return signing_refusal(document, account) is None
