"""Employee module test suite — upsert by email, listing, validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from hr_dashboard.common.audit import AuditTrail
from hr_dashboard.common.validators import blank_to_none
from hr_dashboard.employees.models import Employee
from hr_dashboard.employees.schemas import EmployeeUpsert
from hr_dashboard.employees.service import EmployeeService
from tests.conftest import ADMIN_EMAIL, EMPLOYEE_EMAIL, as_user, make_employee


class TestEmployeeUpsertSchema:

    @pytest.mark.parametrize(
        "value, expected",
        [("  ", None), ("", None), (" Mia ", "Mia"), (None, None), (3, 3)],
    )
    def test_blank_to_none(self, value, expected):
        assert blank_to_none(value) == expected

    def test_emails_lower_cased(self):
        data = EmployeeUpsert(
            email="Eve.Employee@Example.com",
            full_name=" Eve Employee ",
            manager_email="MIA.Manager@example.com",
        )
        assert data.email == EMPLOYEE_EMAIL
        assert data.manager_email == "mia.manager@example.com"
        assert data.full_name == "Eve Employee"

    def test_blank_manager_is_none(self):
        data = EmployeeUpsert(email=EMPLOYEE_EMAIL, full_name="Eve", manager_email="  ")
        assert data.manager_email is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "not-an-email", "full_name": "Eve"},
            {"email": EMPLOYEE_EMAIL, "full_name": ""},
            {"email": EMPLOYEE_EMAIL, "full_name": "Eve", "onedrive_folder_url": "ftp://x"},
        ],
    )
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValidationError):
            EmployeeUpsert(**payload)


class TestEmployeeService:

    async def test_upsert_creates_then_updates(self, db):
        created, was_created = await EmployeeService.upsert(
            db,
            EmployeeUpsert(email=EMPLOYEE_EMAIL, full_name="Eve Employee"),
            actor_email=ADMIN_EMAIL,
        )
        assert was_created is True
        assert created.manager_email is None

        updated, was_created = await EmployeeService.upsert(
            db,
            EmployeeUpsert(
                email="EVE.employee@example.com",
                full_name="Eve E. Employee",
                manager_email="mia.manager@example.com",
                onedrive_folder_url="https://onedrive.example.com/eve",
            ),
            actor_email=ADMIN_EMAIL,
        )
        assert was_created is False
        assert updated.id == created.id
        assert updated.full_name == "Eve E. Employee"
        assert updated.manager_email == "mia.manager@example.com"

        count = len((await db.execute(select(Employee))).scalars().all())
        assert count == 1
        actions = (await db.execute(select(AuditTrail.action))).scalars().all()
        assert actions == ["create", "update"]

    async def test_list_ordered_by_name(self, db):
        await make_employee(db, email="zed@example.com", full_name="Zed")
        await make_employee(db, email="amy@example.com", full_name="Amy")
        names = [e.full_name for e in await EmployeeService.list_employees(db)]
        assert names == ["Amy", "Zed"]


class TestEmployeeAPI:

    async def test_post_creates_201_then_updates_200(self, client):
        body = {"email": EMPLOYEE_EMAIL, "full_name": "Eve Employee"}
        first = await client.post("/api/admin/employees", json=body, headers=as_user(ADMIN_EMAIL))
        second = await client.post(
            "/api/admin/employees",
            json={**body, "full_name": "Eve Renamed"},
            headers=as_user(ADMIN_EMAIL),
        )
        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]

        listed = await client.get("/api/admin/employees", headers=as_user(ADMIN_EMAIL))
        assert [e["full_name"] for e in listed.json()] == ["Eve Renamed"]

    async def test_post_invalid_email(self, client):
        resp = await client.post(
            "/api/admin/employees",
            json={"email": "nope", "full_name": "Eve"},
            headers=as_user(ADMIN_EMAIL),
        )
        assert resp.status_code == 422
        assert "email" in resp.json()["errors"]

    async def test_post_invalid_folder_url_message(self, client):
        resp = await client.post(
            "/api/admin/employees",
            json={"email": EMPLOYEE_EMAIL, "full_name": "Eve", "onedrive_folder_url": "ftp://x"},
            headers=as_user(ADMIN_EMAIL),
        )
        assert resp.status_code == 422
        assert resp.json()["errors"]["onedrive_folder_url"] == [
            "onedrive_folder_url must be an http(s) URL."
        ]

    async def test_post_requires_admin(self, client):
        resp = await client.post(
            "/api/admin/employees",
            json={"email": EMPLOYEE_EMAIL, "full_name": "Eve"},
            headers=as_user(EMPLOYEE_EMAIL),
        )
        assert resp.status_code == 403
