from datetime import datetime, timedelta, timezone

import pytest

from campusnav.config import get_settings
from campusnav.models import AdminSession
from campusnav.services.auth import hash_password, utcnow, verify_password


class TestPasswords:
    @pytest.mark.security
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret", rounds=4)
        assert hashed != "s3cret"
        assert hashed.startswith("$2")
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    @pytest.mark.security
    def test_non_bcrypt_hash_rejected(self):
        assert not verify_password("password", "plaintext")

    @pytest.mark.security
    def test_utcnow_is_naive(self):
        now = utcnow()
        assert now.tzinfo is None
        assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)


class TestAuthApi:
    @pytest.mark.security
    @pytest.mark.api
    def test_login_sets_cookie(self, client, admin_user):
        res = client.post("/auth/login", json={"username": "ADMIN", "password": "password"})
        assert res.status_code == 200
        body = res.json()
        assert body["user"]["username"] == "admin"
        assert body["user"]["role"] == "SUPERADMIN"
        assert body["user"]["last_login_at"] is not None
        assert res.cookies.get(get_settings().session_cookie_name) == body["token"]

    @pytest.mark.security
    @pytest.mark.api
    @pytest.mark.parametrize(
        "username,password",
        [("admin", "wrong"), ("nobody", "password")],
    )
    def test_bad_credentials(self, client, admin_user, username, password):
        res = client.post("/auth/login", json={"username": username, "password": password})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid username or password"

    @pytest.mark.security
    @pytest.mark.api
    def test_me_requires_session(self, client, admin_user):
        assert client.get("/auth/me").status_code == 401
        assert client.get("/auth/me", headers={"Authorization": "Bearer bogus"}).status_code == 401

    @pytest.mark.security
    @pytest.mark.api
    def test_me_with_bearer(self, client, auth_headers):
        res = client.get("/auth/me", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["email"] == "admin@example.com"

    @pytest.mark.security
    @pytest.mark.api
    def test_logout_ends_session(self, client, auth_headers):
        res = client.post("/auth/logout", headers=auth_headers)
        assert res.json() == {"ok": True, "ended": True}
        client.cookies.clear()
        assert client.get("/auth/me", headers=auth_headers).status_code == 401

    @pytest.mark.security
    @pytest.mark.api
    def test_expired_session_rejected(self, client, db, auth_headers):
        token = auth_headers["Authorization"].split(" ", 1)[1]
        session = db.get(AdminSession, token)
        session.expires_at = utcnow() - timedelta(minutes=1)
        db.commit()
        client.cookies.clear()
        res = client.get("/auth/me", headers=auth_headers)
        assert res.status_code == 401
        db.expire_all()
        assert db.get(AdminSession, token) is None

    @pytest.mark.security
    @pytest.mark.api
    def test_writes_require_admin(self, client, campus):
        client.cookies.clear()
        assert client.post("/maps", json={"slug": "x-map", "name": "X map"}).status_code == 401
        assert client.delete(f"/maps/{campus.id}").status_code == 401
        assert client.post("/pins", json={}).status_code in (401, 422)
