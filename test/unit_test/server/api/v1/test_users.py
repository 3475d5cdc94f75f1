import pytest
from httpx import AsyncClient

from interior_manager.core.database.entities.rbac import Role

pytestmark = pytest.mark.asyncio

NEW_USER = {
    "email": "priya@example.com",
    "username": "priya",
    "full_name": "Priya Nair",
    "password": "welcome-123",
    "role": "project_manager",
}


async def test_admin_creates_user(client: AsyncClient, admin_headers):
    response = await client.post("/api/v1/admin/users", headers=admin_headers, json=NEW_USER)
    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "project_manager"
    assert data["password_changed"] is False

    login = await client.post("/api/v1/auth/login", json={"username": "priya", "password": "welcome-123"})
    assert login.status_code == 200


async def test_duplicate_email_conflicts(client: AsyncClient, admin_headers):
    assert (await client.post("/api/v1/admin/users", headers=admin_headers, json=NEW_USER)).status_code == 201
    response = await client.post(
        "/api/v1/admin/users", headers=admin_headers, json={**NEW_USER, "username": "priya2"}
    )
    assert response.status_code == 409


async def test_unknown_role_id_rejected(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/admin/users", headers=admin_headers, json={**NEW_USER, "role_id": "missing"}
    )
    assert response.status_code == 400


async def test_known_role_id_accepted(client: AsyncClient, session, admin_headers):
    role = Role(name="Site Supervisor")
    session.add(role)
    await session.commit()

    response = await client.post("/api/v1/admin/users", headers=admin_headers, json={**NEW_USER, "role_id": role.id})
    assert response.status_code == 201
    assert response.json()["role_id"] == role.id


async def test_list_users_admin_only(client: AsyncClient, admin_headers, employee_headers):
    response = await client.get("/api/v1/admin/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"admin", "ravi"}

    response = await client.get("/api/v1/admin/users", headers=employee_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"
