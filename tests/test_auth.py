"""Identity resolution test suite — Bearer tokens, proxy headers, dev
impersonation, admin detection and the RFC 7807 error shape.
"""

from __future__ import annotations

from unittest.mock import patch

from hr_dashboard.config import settings
from tests.conftest import (
    ADMIN_EMAIL,
    EMPLOYEE_EMAIL,
    MANAGER_EMAIL,
    as_user,
    bearer,
    create_access_token,
)


class TestIdentity:

    async def test_health_needs_no_identity(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    async def test_me_with_proxy_header(self, client, employee):
        resp = await client.get("/api/me", headers=as_user("Eve.Employee@Example.com"))
        assert resp.status_code == 200
        body = resp.json()
        assert body["email"] == EMPLOYEE_EMAIL
        assert body["isAdmin"] is False
        assert body["employee"]["full_name"] == "Eve Employee"
        assert body["employee"]["manager_email"] == MANAGER_EMAIL

    async def test_me_admin_without_employee_row(self, client):
        resp = await client.get("/api/me", headers={"X-User-Email": ADMIN_EMAIL})
        assert resp.status_code == 200
        assert resp.json()["isAdmin"] is True
        assert resp.json()["employee"] is None

    async def test_bearer_token(self, client, employee):
        resp = await client.get("/api/me", headers=bearer(EMPLOYEE_EMAIL))
        assert resp.status_code == 200
        assert resp.json()["email"] == EMPLOYEE_EMAIL

    async def test_bearer_takes_precedence_over_headers(self, client, employee):
        headers = {**bearer(EMPLOYEE_EMAIL), **as_user(ADMIN_EMAIL)}
        resp = await client.get("/api/me", headers=headers)
        assert resp.json()["email"] == EMPLOYEE_EMAIL

    async def test_expired_token(self, client):
        token = create_access_token(EMPLOYEE_EMAIL, expired=True)
        resp = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token has expired."

    async def test_wrong_token_type(self, client):
        token = create_access_token(EMPLOYEE_EMAIL, token_type="refresh")
        resp = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    async def test_garbage_token(self, client):
        resp = await client.get("/api/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 401

    async def test_missing_identity(self, client):
        resp = await client.get("/api/me")
        assert resp.status_code == 401
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["status"] == 401
        assert body["instance"] == "/api/me"

    async def test_impersonation_in_development(self, client, employee):
        resp = await client.get("/api/me", params={"as": EMPLOYEE_EMAIL})
        assert resp.status_code == 200
        assert resp.json()["email"] == EMPLOYEE_EMAIL

    async def test_impersonation_disabled_in_production(self, client, employee):
        with patch.object(settings, "ENVIRONMENT", "production"):
            resp = await client.get("/api/me", params={"as": EMPLOYEE_EMAIL})
        assert resp.status_code == 401

    async def test_allowed_domain(self, client):
        with patch.object(settings, "ALLOWED_DOMAIN", "corp.example.com"):
            resp = await client.get("/api/me", headers=as_user(EMPLOYEE_EMAIL))
        assert resp.status_code == 403
