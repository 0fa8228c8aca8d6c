# tests/test_auth.py
"""Signup, login with role selection, role switching, promotion."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.config import settings
from app.models.user import UserRole
from app.utils.security import decode_jwt

from conftest import PASSWORD, make_user, client_for


def _signup(client, **overrides):
    body = {
        "full_name": "Nina New",
        "email": "nina@example.com",
        "password": "pass1234",
        "confirm_password": "pass1234",
    }
    body.update(overrides)
    return client.post("/api/auth/signup", json=body)


class TestSignup:
    def test_creates_customer_with_normalized_email(self, anon_client, db):
        resp = _signup(anon_client, email="Nina@Example.com")
        assert resp.status_code == 201
        user = resp.json()["user"]
        assert user["email"] == "nina@example.com"
        assert user["role"] == "customer"

    def test_duplicate_email_rejected(self, anon_client, customer):
        resp = _signup(anon_client, email="CARLA@example.com")
        assert resp.status_code == 400
        assert "already exists" in resp.json()["detail"]

    def test_password_mismatch(self, anon_client, db):
        resp = _signup(anon_client, email="nina@example.com", confirm_password="other123")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Passwords don't match"

    def test_short_password(self, anon_client, db):
        resp = _signup(anon_client, email="nina@example.com", password="123", confirm_password="123")
        assert resp.status_code == 400


class TestLogin:
    def test_customer_login_sets_cookie_and_redirect(self, anon_client, customer):
        resp = anon_client.post("/api/auth/login", json={"email": customer.email, "password": PASSWORD})
        assert resp.status_code == 200
        data = resp.json()
        assert data["role"] == "customer"
        assert data["redirect"] == "/dashboard"
        assert resp.cookies.get(settings.COOKIE_NAME) == data["token"]
        assert resp.headers["cache-control"] == "no-store"
        assert decode_jwt(data["token"])["sub"] == str(customer.id)

    def test_wrong_password(self, anon_client, customer):
        resp = anon_client.post("/api/auth/login", json={"email": customer.email, "password": "nope123"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid email or password"

    def test_unknown_email(self, anon_client, db):
        resp = anon_client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
        assert resp.status_code == 401

    def test_role_mismatch_names_registered_role(self, anon_client, customer):
        resp = anon_client.post(
            "/api/auth/login",
            json={"email": customer.email, "password": PASSWORD, "role": "driver"},
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid role. You are registered as a customer"

    def test_driver_goes_to_driver_home(self, anon_client, driver):
        resp = anon_client.post(
            "/api/auth/login",
            json={"email": driver.email, "password": PASSWORD, "role": "driver"},
        )
        assert resp.status_code == 200
        assert resp.json()["redirect"] == "/driver"

    def test_login_without_role_uses_registered_role(self, anon_client, driver):
        resp = anon_client.post("/api/auth/login", json={"email": driver.email, "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["role"] == "driver"
        assert resp.json()["redirect"] == "/driver"

    def test_admin_may_pick_any_role(self, anon_client, admin):
        resp = anon_client.post(
            "/api/auth/login",
            json={"email": admin.email, "password": PASSWORD, "role": "Administrator"},
        )
        assert resp.json()["role"] == "admin"
        assert resp.json()["redirect"] == "/admin"

        resp = anon_client.post(
            "/api/auth/login",
            json={"email": admin.email, "password": PASSWORD, "role": "driver"},
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "driver"

    def test_admin_email_list_grants_admin(self, anon_client, db, monkeypatch):
        u = make_user(db, "owner@example.com")
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "owner@example.com")
        resp = anon_client.post(
            "/api/auth/login",
            json={"email": u.email, "password": PASSWORD, "role": "admin"},
        )
        assert resp.status_code == 200
        token = resp.json()["token"]
        stats = client_for().get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})
        assert stats.status_code == 200


class TestSession:
    def test_me_requires_session(self, anon_client, db):
        assert anon_client.get("/api/me").status_code == 401

    def test_me_reports_role_and_admin_flag(self, admin_client, admin):
        data = admin_client.get("/api/me").json()
        assert data["user"]["email"] == admin.email
        assert data["role"] == "admin"
        assert data["is_admin"] is True

    def test_cookie_session_is_accepted(self, anon_client, customer):
        anon_client.post("/api/auth/login", json={"email": customer.email, "password": PASSWORD})
        assert anon_client.get("/api/me").json()["role"] == "customer"

    def test_logout_clears_cookie(self, anon_client, customer):
        anon_client.post("/api/auth/login", json={"email": customer.email, "password": PASSWORD})
        anon_client.post("/api/auth/logout")
        assert anon_client.get("/api/me").status_code == 401

    def test_token_of_deleted_user_is_rejected(self, db, customer):
        client = client_for(customer)
        db.delete(customer); db.commit()
        assert client.get("/api/me").status_code == 401


class TestSwitchRole:
    def test_admin_switches_to_customer_and_loses_admin_api(self, admin_client):
        resp = admin_client.post("/api/auth/switch-role", json={"role": "customer"})
        assert resp.status_code == 200
        assert resp.json()["redirect"] == "/dashboard"
        token = resp.json()["token"]
        assert decode_jwt(token)["role"] == "customer"

        headers = {"Authorization": f"Bearer {token}"}
        assert client_for().get("/api/admin/stats", headers=headers).status_code == 403
        assert client_for().get("/api/trips/upcoming", headers=headers).status_code == 200

    def test_customer_view_can_switch_back(self, admin):
        client = client_for(admin, "customer")
        resp = client.post("/api/auth/switch-role", json={"role": "admin"})
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"

    def test_non_admin_cannot_switch(self, customer_client):
        resp = customer_client.post("/api/auth/switch-role", json={"role": "admin"})
        assert resp.status_code == 403

    def test_switch_to_driver_is_not_offered(self, admin_client):
        resp = admin_client.post("/api/auth/switch-role", json={"role": "driver"})
        assert resp.status_code == 400


class TestPromote:
    def test_admin_promotes_existing_user(self, admin_client, customer, db):
        resp = admin_client.post("/api/admin/promote", json={"email": customer.email})
        assert resp.status_code == 200
        db.refresh(customer)
        assert customer.role == UserRole.ADMIN

    def test_unknown_email(self, admin_client):
        resp = admin_client.post("/api/admin/promote", json={"email": "ghost@example.com"})
        assert resp.status_code == 404

    def test_customer_cannot_promote(self, customer_client, customer):
        resp = customer_client.post("/api/admin/promote", json={"email": customer.email})
        assert resp.status_code == 403
