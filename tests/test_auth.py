"""Tests for sign-in, sessions and password reset."""
from fastapi.testclient import TestClient

from core.auth import SESSION_COOKIE
from models.user import AuthSession, UserRole, Verification
from routers import auth_router

PASSWORD = "Str0ng!Passw0rd"
NEW_PASSWORD = "Ev3n-Str0nger!Pass"


def test_admin_sign_in_sets_session_cookie(client: TestClient, admin, sign_in):
    response = sign_in(client, admin.email)
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == admin.email
    assert data["user"]["role"] == "ADMIN"
    assert SESSION_COOKIE in response.cookies

    session = client.get("/api/auth/session")
    assert session.status_code == 200
    assert session.json()["email"] == admin.email


def test_wrong_password(client: TestClient, admin, sign_in, db):
    response = sign_in(client, admin.email, "Wr0ng!Password")
    assert response.status_code == 401
    assert response.json()["code"] == "invalid_credentials"
    assert db.query(AuthSession).count() == 0


def test_unknown_email(client: TestClient, sign_in):
    response = sign_in(client, "nobody@gmail.com")
    assert response.status_code == 401


def test_subscriber_cannot_sign_in(client: TestClient, make_user, sign_in, db):
    make_user("reader@gmail.com", role=UserRole.SUBSCRIBER)
    response = sign_in(client, "reader@gmail.com")
    assert response.status_code == 403
    assert response.json()["error"] == "Access denied"
    assert "set-cookie" not in response.headers
    assert db.query(AuthSession).count() == 0


def test_deactivated_account_cannot_sign_in(client: TestClient, make_user, sign_in):
    make_user("former@kyleesblog.org", role=UserRole.DEVELOPER, is_active=False)
    response = sign_in(client, "former@kyleesblog.org")
    assert response.status_code == 403
    assert response.json()["error"] == "Account deactivated"


def test_session_revoked_when_role_changes_mid_sign_in(client: TestClient, admin, sign_in, db, monkeypatch):
    """The role is re-read after the session is issued."""
    monkeypatch.setattr(auth_router, "session_role", lambda db, user_id: UserRole.SUBSCRIBER)

    response = sign_in(client, admin.email)
    assert response.status_code == 403
    assert response.json()["error"] == "Access denied"
    assert "set-cookie" not in response.headers
    assert db.query(AuthSession).count() == 0


def test_sign_out_revokes_session(client: TestClient, admin, sign_in, db):
    sign_in(client, admin.email)
    assert db.query(AuthSession).count() == 1

    response = client.post("/api/auth/sign-out")
    assert response.status_code == 200
    cleared = response.headers.get_list("set-cookie")
    assert any(c.startswith(f"{SESSION_COOKIE}=") for c in cleared)
    assert any(c.startswith("__Secure-kylee.session_token=") for c in cleared)
    assert db.query(AuthSession).count() == 0
    assert client.get("/api/auth/session").status_code == 401


def test_session_requires_cookie(client: TestClient):
    response = client.get("/api/auth/session")
    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required", "code": "unauthenticated"}


def test_tampered_cookie_is_ignored(client: TestClient, admin, sign_in):
    sign_in(client, admin.email)
    value = client.cookies.get(SESSION_COOKIE)
    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE, value + "x")
    assert client.get("/api/auth/session").status_code == 401


def test_password_reset_flow(client: TestClient, admin, sign_in, db):
    sign_in(client, admin.email)

    response = client.post("/api/auth/forgot-password", json={"email": admin.email})
    assert response.status_code == 200
    token = db.query(Verification).one().token

    weak = client.post("/api/auth/reset-password", json={"token": token, "new_password": "short"})
    assert weak.status_code == 400
    assert "12 characters" in weak.json()["error"]

    response = client.post("/api/auth/reset-password", json={"token": token, "new_password": NEW_PASSWORD})
    assert response.status_code == 200
    # existing sessions are signed out
    assert db.query(AuthSession).count() == 0
    assert db.query(Verification).count() == 0

    reused = client.post("/api/auth/reset-password", json={"token": token, "new_password": NEW_PASSWORD})
    assert reused.status_code == 400

    assert sign_in(client, admin.email, PASSWORD).status_code == 401
    assert sign_in(client, admin.email, NEW_PASSWORD).status_code == 200


def test_forgot_password_does_not_reveal_accounts(client: TestClient, make_user, db):
    make_user("reader@gmail.com", role=UserRole.SUBSCRIBER)
    unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@gmail.com"})
    subscriber = client.post("/api/auth/forgot-password", json={"email": "reader@gmail.com"})
    assert unknown.status_code == subscriber.status_code == 200
    assert unknown.json() == subscriber.json()
    assert db.query(Verification).count() == 0
