import pytest
from fastapi.testclient import TestClient

from signflow.core.auth import create_access_token
from signflow.core.config import Settings, get_settings
from signflow.main import create_app


@pytest.fixture
def client(tmp_path):
    settings = Settings(
        documents_db_uri=str(tmp_path / "documents.db"),
        content_store_dir=str(tmp_path / "content"),
        max_content_bytes=1024,
        testing=True,
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def _auth(account):
    return {"Authorization": f"Bearer {create_access_token(account)}"}


def _upload(client, account, signers, body=b"%PDF-1.4 contract"):
    return client.post(
        "/api/v1/documents",
        files={"file": ("contract.pdf", body, "application/pdf")},
        data={"signers": signers},
        headers=_auth(account),
    )


def test_ping(client):
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json()["services_initialized"] is True


def test_login_issues_token_for_account(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"account": "0xalice", "password": get_settings().login_password},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    verify = client.post("/api/v1/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert verify.json()["account"] == "0xalice"


def test_login_with_wrong_password(client):
    response = client.post("/api/v1/auth/login", json={"account": "0xalice", "password": "nope"})

    assert response.status_code == 401


def test_full_signing_workflow(client):
    created = _upload(client, "0xcreator", "0xX, 0xY")
    assert created.status_code == 201
    document = created.json()
    assert document["required_signers"] == ["0xX", "0xY"]
    assert document["is_completed"] is False
    assert document["status"] == "created"

    first = client.post(f"/api/v1/documents/{document['id']}/sign", headers=_auth("0xX"))
    assert first.status_code == 200
    assert first.json()["status"] == "partially_signed"

    second = client.post(f"/api/v1/documents/{document['id']}/sign", headers=_auth("0xY"))
    assert second.status_code == 200
    assert second.json()["is_completed"] is True
    assert [s["signer"] for s in second.json()["signatures"]] == ["0xX", "0xY"]

    again = client.post(f"/api/v1/documents/{document['id']}/sign", headers=_auth("0xY"))
    assert again.status_code == 409
    assert again.json()["code"] == "ALREADY_COMPLETED"


def test_duplicate_signature_is_distinguishable(client):
    document = _upload(client, "0xcreator", "0xX,0xY").json()
    client.post(f"/api/v1/documents/{document['id']}/sign", headers=_auth("0xX"))

    response = client.post(f"/api/v1/documents/{document['id']}/sign", headers=_auth("0xX"))

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_SIGNATURE"


def test_outsider_signature_is_forbidden(client):
    document = _upload(client, "0xcreator", "0xX").json()

    response = client.post(f"/api/v1/documents/{document['id']}/sign", headers=_auth("0xZ"))

    assert response.status_code == 403
    assert response.json()["code"] == "UNAUTHORIZED_SIGNER"
    assert client.get(f"/api/v1/documents/{document['id']}").json()["signatures"] == []


def test_writes_require_authentication(client):
    response = client.post(
        "/api/v1/documents",
        files={"file": ("contract.pdf", b"body", "application/pdf")},
        data={"signers": "0xX"},
    )
    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_REQUIRED"

    response = client.post("/api/v1/documents/0/sign")
    assert response.status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/documents", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_validation_errors(client):
    empty = _upload(client, "0xcreator", "")
    assert empty.status_code == 422
    assert empty.json()["code"] == "VALIDATION_ERROR"

    duplicates = _upload(client, "0xcreator", "0xX,0xX")
    assert duplicates.status_code == 422

    too_large = _upload(client, "0xcreator", "0xX", body=b"x" * 2048)
    assert too_large.status_code == 422

    assert client.get("/api/v1/documents").json()["total"] == 0


def test_unknown_document(client):
    response = client.get("/api/v1/documents/999")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_register_and_list(client):
    response = client.post(
        "/api/v1/documents/register",
        json={"content_id": "QmExisting", "required_signers": ["0xX"]},
        headers=_auth("0xcreator"),
    )
    assert response.status_code == 201

    listing = client.get("/api/v1/documents").json()
    assert listing["total"] == 1
    assert listing["documents"][0]["content_id"] == "QmExisting"


def test_document_content_round_trip(client):
    document = _upload(client, "0xcreator", "0xX", body=b"%PDF-1.4 original").json()

    response = client.get(f"/api/v1/documents/{document['id']}/content")

    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 original"


def test_query_views_for_current_account(client):
    mine = _upload(client, "0xalice", "0xbob", body=b"one").json()
    _upload(client, "0xcarol", "0xalice", body=b"two")

    created = client.get("/api/v1/query/created", headers=_auth("0xalice")).json()
    assert [d["id"] for d in created["documents"]] == [mine["id"]]

    pending_bob = client.get("/api/v1/query/pending", params={"account": "0xbob"}).json()
    assert [d["id"] for d in pending_bob["documents"]] == [mine["id"]]

    client.post(f"/api/v1/documents/{mine['id']}/sign", headers=_auth("0xbob"))
    assert client.get("/api/v1/query/pending", headers=_auth("0xbob")).json()["total"] == 0
    assert client.get("/api/v1/query/signed", headers=_auth("0xbob")).json()["total"] == 1


def test_query_without_account(client):
    response = client.get("/api/v1/query/pending")

    assert response.status_code == 401


def test_oversized_document_id_is_not_found(client):
    huge = 99999999999999999999

    read = client.get(f"/api/v1/documents/{huge}")
    assert read.status_code == 404
    assert read.json()["code"] == "NOT_FOUND"

    content = client.get(f"/api/v1/documents/{huge}/content")
    assert content.status_code == 404

    sign = client.post(f"/api/v1/documents/{huge}/sign", headers=_auth("0xX"))
    assert sign.status_code == 404
    assert sign.json()["code"] == "NOT_FOUND"


def test_login_with_blank_account_is_rejected(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"account": "   ", "password": get_settings().login_password},
    )

    assert response.status_code == 422


def test_login_trims_account(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"account": "  0xalice ", "password": get_settings().login_password},
    )
    token = response.json()["access_token"]

    verify = client.post("/api/v1/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert verify.json()["account"] == "0xalice"
