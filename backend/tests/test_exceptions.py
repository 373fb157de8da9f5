from signflow.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    UnauthorizedSignerError,
)


def test_unauthorized_signer_is_an_authorization_error():
    error = UnauthorizedSignerError("not a signer")

    assert isinstance(error, AuthorizationError)
    assert error.status_code == AuthorizationError.status_code == 403
    assert error.code == "UNAUTHORIZED_SIGNER"
    assert AuthorizationError.code == "NOT_AUTHORIZED"


def test_error_carries_message_and_extra():
    error = NotFoundError("Document 3 not found", extra={"document_id": 3})

    assert error.message == "Document 3 not found"
    assert error.extra == {"document_id": 3}
    assert error.code == "NOT_FOUND"
