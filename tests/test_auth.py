from datetime import datetime, timedelta, timezone

from app.deps import ensure_email_available
from app.main import app
from app.models.user import Role, User
from app.models.verification_code import CodePurpose, VerificationCode
from app.schemas.auth import RegisterIn
from app.services import mail_service, oauth_service
from app.services.security import decode_token

from conftest import PASSWORD, auth, last_code


def _register(client, email, path="/api/auth/register"):
    return client.post(
        path,
        json={"first_name": "Alice", "last_name": "Tester", "email": email, "password": PASSWORD},
    )


def test_register_creates_unverified_user_with_code(client, outbox, db):
    res = _register(client, "alice@acme.io")
    assert res.status_code == 201
    assert "check your email" in res.json()["message"]

    user = db.query(User).filter_by(email="alice@acme.io").one()
    assert user.role == Role.USER
    assert user.is_verified is False
    assert user.password_hash and user.password_hash != PASSWORD

    row = db.query(VerificationCode).filter_by(user_id=user.id).one()
    assert row.purpose == CodePurpose.VERIFY_EMAIL
    assert 100000 <= row.code <= 999999
    assert last_code(outbox, "alice@acme.io") == row.code


def test_register_manager_sets_manager_role(client, db):
    res = _register(client, "boss@acme.io", path="/api/auth/register-manager")
    assert res.status_code == 201

    user = db.query(User).filter_by(email="boss@acme.io").one()
    assert user.role == Role.MANAGER
    assert user.is_verified is False


def test_register_duplicate_email_conflicts(client):
    assert _register(client, "alice@acme.io").status_code == 201

    res = _register(client, "alice@acme.io", path="/api/auth/register-manager")
    assert res.status_code == 409
    assert res.json()["detail"]["message"] == "user_exists"


def test_register_duplicate_past_precheck_conflicts(client, db):
    # 사전 중복 검사를 건너뛰어 동시 가입 상황을 재현
    def skip_check(body: RegisterIn) -> RegisterIn:
        return body

    app.dependency_overrides[ensure_email_available] = skip_check
    try:
        assert _register(client, "alice@acme.io").status_code == 201
        res = _register(client, "alice@acme.io")
    finally:
        app.dependency_overrides.pop(ensure_email_available, None)

    assert res.status_code == 409
    assert res.json()["detail"]["message"] == "user_exists"
    assert db.query(User).filter_by(email="alice@acme.io").count() == 1


def test_register_mail_failure_is_internal_error_and_rolls_back(client, db, monkeypatch):
    def broken(*args, **kwargs):
        raise ConnectionError("smtp down")

    monkeypatch.setattr(mail_service, "send_mail", broken)

    res = _register(client, "alice@acme.io")
    assert res.status_code == 500
    assert res.json()["detail"]["message"] == "registration_failed"
    assert db.query(User).filter_by(email="alice@acme.io").first() is None


def test_login_requires_verification_first(client, outbox):
    _register(client, "alice@acme.io")

    res = client.post("/api/auth/login", json={"email": "alice@acme.io", "password": PASSWORD})
    assert res.status_code == 401
    assert res.json()["detail"]["message"] == "email_not_verified"

    code = last_code(outbox, "alice@acme.io")
    res = client.post("/api/auth/verify", json={"email": "alice@acme.io", "verification_code": code})
    assert res.status_code == 200

    res = client.post("/api/auth/login", json={"email": "alice@acme.io", "password": PASSWORD})
    assert res.status_code == 200
    data = res.json()["data"]
    assert "password_hash" not in data["user"]
    assert data["user"]["is_verified"] is True

    principal = decode_token(data["access_token"])
    assert principal.email == "alice@acme.io"
    assert principal.role == Role.USER
    assert principal.id == data["user"]["id"]


def test_login_rejects_wrong_password_and_unknown_email(signup, client):
    signup("alice@acme.io")

    res = client.post("/api/auth/login", json={"email": "alice@acme.io", "password": "wrong-pass"})
    assert res.status_code == 401

    res = client.post("/api/auth/login", json={"email": "nobody@acme.io", "password": PASSWORD})
    assert res.status_code == 401


def test_wrong_code_never_verifies(client, outbox, db):
    _register(client, "alice@acme.io")
    code = last_code(outbox, "alice@acme.io")
    wrong = 100000 if code != 100000 else 100001

    res = client.post("/api/auth/verify", json={"email": "alice@acme.io", "verification_code": wrong})
    assert res.status_code == 401

    user = db.query(User).filter_by(email="alice@acme.io").one()
    assert user.is_verified is False


def test_verification_code_is_single_use(client, outbox, db):
    _register(client, "alice@acme.io")
    code = last_code(outbox, "alice@acme.io")

    body = {"email": "alice@acme.io", "verification_code": code}
    assert client.post("/api/auth/verify", json=body).status_code == 200
    assert client.post("/api/auth/verify", json=body).status_code == 401

    user = db.query(User).filter_by(email="alice@acme.io").one()
    assert user.is_verified is True
    assert db.query(VerificationCode).filter_by(user_id=user.id).count() == 0


def test_expired_code_is_rejected(client, outbox, db):
    _register(client, "alice@acme.io")
    code = last_code(outbox, "alice@acme.io")

    row = db.query(VerificationCode).one()
    row.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    res = client.post("/api/auth/verify", json={"email": "alice@acme.io", "verification_code": code})
    assert res.status_code == 401


def test_forgot_and_reset_password(signup, client, outbox):
    signup("alice@acme.io")

    res = client.post("/api/auth/forgot-password", json={"email": "alice@acme.io"})
    assert res.status_code == 200
    assert outbox[-1]["subject"] == "Password Reset Verification"
    code = last_code(outbox, "alice@acme.io")

    res = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@acme.io", "verification_code": code, "new_password": "brandnew1"},
    )
    assert res.status_code == 200

    assert client.post("/api/auth/login", json={"email": "alice@acme.io", "password": PASSWORD}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "alice@acme.io", "password": "brandnew1"}).status_code == 200

    # 재사용 불가
    res = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@acme.io", "verification_code": code, "new_password": "another1"},
    )
    assert res.status_code == 401


def test_reset_code_cannot_verify_email(client, outbox):
    _register(client, "alice@acme.io")
    client.post("/api/auth/forgot-password", json={"email": "alice@acme.io"})
    reset_code = last_code(outbox, "alice@acme.io")

    res = client.post("/api/auth/verify", json={"email": "alice@acme.io", "verification_code": reset_code})
    assert res.status_code == 401


def test_forgot_password_unknown_email(client):
    res = client.post("/api/auth/forgot-password", json={"email": "nobody@acme.io"})
    assert res.status_code == 401


def test_change_password(signup, client):
    alice = signup("alice@acme.io")

    res = client.post(
        "/api/auth/change-password",
        json={"current_password": "not-mine", "new_password": "newpass1"},
        headers=alice["headers"],
    )
    assert res.status_code == 401

    res = client.post(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "newpass1"},
        headers=alice["headers"],
    )
    assert res.status_code == 200
    assert client.post("/api/auth/login", json={"email": "alice@acme.io", "password": "newpass1"}).status_code == 200


def test_change_password_requires_token(client):
    res = client.post(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "newpass1"},
    )
    assert res.status_code == 401


def test_me_rejects_missing_and_invalid_token(signup, client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=auth("not-a-jwt")).status_code == 401

    alice = signup("alice@acme.io")
    res = client.get("/api/auth/me", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["data"]["email"] == "alice@acme.io"


def test_oauth_callback_creates_verified_user_once(client, db, monkeypatch):
    monkeypatch.setattr(
        oauth_service,
        "fetch_profile",
        lambda provider, code: {"email": "gh@acme.io", "first_name": "Git", "last_name": "Hub"},
    )

    first = client.get("/api/auth/github/callback", params={"code": "abc"})
    second = client.get("/api/auth/github/callback", params={"code": "def"})
    assert first.status_code == 200
    assert second.status_code == 200

    users = db.query(User).filter_by(email="gh@acme.io").all()
    assert len(users) == 1
    assert users[0].is_verified is True
    assert users[0].password_hash is None
    assert first.json()["data"]["profile"]["id"] == second.json()["data"]["profile"]["id"]

    token = second.json()["data"]["access_token"]
    assert client.get("/api/auth/me", headers=auth(token)).status_code == 200

    # 비밀번호 없는 계정은 비밀번호 로그인 불가
    res = client.post("/api/auth/login", json={"email": "gh@acme.io", "password": PASSWORD})
    assert res.status_code == 401


def test_oauth_unknown_provider(client):
    res = client.get("/api/auth/facebook/callback", params={"code": "abc"})
    assert res.status_code == 404
