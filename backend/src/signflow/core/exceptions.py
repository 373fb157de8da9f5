"""Error taxonomy for the co-signing workflow.

Every failure carries an HTTP status and a stable ``code`` so clients can tell
a missing login apart from an already-signed document or a retryable storage
outage.
"""

from typing import Any, Dict, Optional


class SignflowError(Exception):
    """Base class for all workflow errors."""

    status_code: int = 400
    code: str = "ERROR"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class ValidationError(SignflowError):
    """Bad input shape: size, emptiness or duplicates."""

    status_code = 422
    code = "VALIDATION_ERROR"


class AuthenticationError(SignflowError):
    """No authenticated identity is available."""

    status_code = 401
    code = "AUTHENTICATION_REQUIRED"


class AuthorizationError(SignflowError):
    """Identity present but not entitled to the operation."""

    status_code = 403
    code = "NOT_AUTHORIZED"


class UnauthorizedSignerError(AuthorizationError):
    """The caller is not one of the document's required signers."""

    code = "UNAUTHORIZED_SIGNER"


class NotFoundError(SignflowError):
    """Unknown document or content identifier."""

    status_code = 404
    code = "NOT_FOUND"


class AlreadyCompletedError(SignflowError):
    """The document already carries every required signature."""

    status_code = 409
    code = "ALREADY_COMPLETED"


class DuplicateSignatureError(SignflowError):
    """The signer has already signed the document."""

    status_code = 409
    code = "DUPLICATE_SIGNATURE"


class StorageError(SignflowError):
    """The content store rejected the blob, failed or timed out."""

    status_code = 502
    code = "STORAGE_ERROR"
