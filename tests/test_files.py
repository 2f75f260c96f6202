"""Agent file register test suite."""

from __future__ import annotations

from hr_dashboard.files.models import AgentFile
from tests.conftest import (
    ADMIN_EMAIL,
    COLLEAGUE_EMAIL,
    EMPLOYEE_EMAIL,
    OUTSIDER_EMAIL,
    as_user,
)


def _payload(**overrides) -> dict:
    body = {
        "filename": "handbook.pdf",
        "file_description": "Employee handbook",
        "onedrive_file_url": "https://onedrive.example.com/eve/handbook.pdf",
        "file_size_bytes": 20480,
        "file_type": "application/pdf",
    }
    body.update(overrides)
    return body


class TestFilesAPI:

    async def test_upload_and_list_newest_first(self, client, employee):
        first = await client.post(
            "/api/files/upload", json=_payload(), headers=as_user(EMPLOYEE_EMAIL),
        )
        second = await client.post(
            "/api/files/upload",
            json=_payload(filename="contract.docx", file_description=""),
            headers=as_user(EMPLOYEE_EMAIL),
        )
        assert first.status_code == 201
        assert second.json()["file_description"] is None

        listed = await client.get("/api/files/my-files", headers=as_user(EMPLOYEE_EMAIL))
        assert listed.status_code == 200
        assert [f["filename"] for f in listed.json()] == ["contract.docx", "handbook.pdf"]

    async def test_upload_rejects_non_http_url(self, client, employee):
        resp = await client.post(
            "/api/files/upload",
            json=_payload(onedrive_file_url="file:///etc/passwd"),
            headers=as_user(EMPLOYEE_EMAIL),
        )
        assert resp.status_code == 422

    async def test_upload_rejects_blank_filename(self, client, employee):
        resp = await client.post(
            "/api/files/upload", json=_payload(filename="  "), headers=as_user(EMPLOYEE_EMAIL),
        )
        assert resp.status_code == 422

    async def test_upload_requires_employee_record(self, client):
        resp = await client.post(
            "/api/files/upload", json=_payload(), headers=as_user(OUTSIDER_EMAIL),
        )
        assert resp.status_code == 404

    async def test_other_employees_file_is_not_found(self, client, employee, colleague, db):
        row = AgentFile(
            employee_id=colleague.id,
            filename="carl.pdf",
            onedrive_file_url="https://onedrive.example.com/carl.pdf",
        )
        db.add(row)
        await db.commit()

        resp = await client.delete(f"/api/files/{row.id}", headers=as_user(EMPLOYEE_EMAIL))
        assert resp.status_code == 404

        own = await client.get("/api/files/my-files", headers=as_user(COLLEAGUE_EMAIL))
        assert len(own.json()) == 1

    async def test_owner_and_admin_can_delete(self, client, employee):
        created = await client.post(
            "/api/files/upload", json=_payload(), headers=as_user(EMPLOYEE_EMAIL),
        )
        other = await client.post(
            "/api/files/upload", json=_payload(filename="b.pdf"), headers=as_user(EMPLOYEE_EMAIL),
        )

        resp = await client.delete(
            f"/api/files/{created.json()['id']}", headers=as_user(EMPLOYEE_EMAIL),
        )
        assert resp.status_code == 204

        resp = await client.delete(
            f"/api/files/{other.json()['id']}", headers=as_user(ADMIN_EMAIL),
        )
        assert resp.status_code == 204

        listed = await client.get("/api/files/my-files", headers=as_user(EMPLOYEE_EMAIL))
        assert listed.json() == []
