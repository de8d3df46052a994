"""内置身份提供方的集成测试用例。"""

import uuid

from fastapi.testclient import TestClient


def _email() -> str:
    return f"auth-{uuid.uuid4().hex[:10]}@example.com"


def test_sign_up_success(client: TestClient):
    email = _email()
    response = client.post(
        "/api/auth/sign-up",
        json={"email": email, "password": "longenough", "passwordConfirmation": "longenough"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["code"] == 200
    assert payload["data"]["email"] == email
    assert payload["data"]["userId"].startswith("user_")


def test_sign_up_duplicate_email(client: TestClient):
    email = _email()
    body = {"email": email, "password": "longenough", "passwordConfirmation": "longenough"}
    client.post("/api/auth/sign-up", json=body)

    response = client.post("/api/auth/sign-up", json=body)
    assert response.status_code == 409
    assert response.json()["msg"] == "Email is already registered"


def test_sign_up_password_mismatch(client: TestClient):
    response = client.post(
        "/api/auth/sign-up",
        json={"email": _email(), "password": "longenough", "passwordConfirmation": "different1"},
    )
    assert response.status_code == 422
    assert "Passwords do not match" in response.text


def test_sign_up_rejects_short_password_and_bad_email(client: TestClient):
    short = client.post(
        "/api/auth/sign-up",
        json={"email": _email(), "password": "short", "passwordConfirmation": "short"},
    )
    assert short.status_code == 422

    bad_email = client.post(
        "/api/auth/sign-up",
        json={"email": "not-an-email", "password": "longenough", "passwordConfirmation": "longenough"},
    )
    assert bad_email.status_code == 422


def test_sign_in_and_me(client: TestClient, make_account):
    account = make_account()

    response = client.get("/api/auth/me", headers=account.headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"userId": account.user_id, "email": account.email}


def test_sign_in_invalid_credentials(client: TestClient, make_account):
    account = make_account()
    response = client.post("/api/auth/sign-in", json={"email": account.email, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["msg"] == "Invalid email or password"


def test_sign_out_revokes_session(client: TestClient, make_account):
    account = make_account()

    response = client.post("/api/auth/sign-out", headers=account.headers)
    assert response.status_code == 200

    again = client.get("/api/auth/me", headers=account.headers)
    assert again.status_code == 401


def test_tampered_token_is_rejected(client: TestClient, make_account):
    account = make_account()
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {account.token}x"})
    assert response.status_code == 401
