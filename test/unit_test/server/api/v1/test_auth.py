from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.users import AuthSession

pytestmark = pytest.mark.asyncio


async def test_login_with_username(client: AsyncClient, employee):
    response = await client.post("/api/v1/auth/login", json={"username": "ravi", "password": "password123"})
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == employee.id
    assert data["user"]["email"] == "ravi@example.com"
    assert "password_hash" not in data["user"]
    assert data["token"]
    assert "session_token=" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()


async def test_login_with_email_is_case_insensitive(client: AsyncClient, employee):
    response = await client.post("/api/v1/auth/login", json={"email": "RAVI@example.com", "password": "password123"})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == employee.id


async def test_login_requires_identifier_and_password(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"password": "x"})
    assert response.status_code == 400

    response = await client.post("/api/v1/auth/login", json={"username": "ravi"})
    assert response.status_code == 400


@pytest.mark.parametrize(
    "credentials",
    [
        {"username": "ravi", "password": "wrong-password"},
        {"username": "nobody", "password": "password123"},
    ],
)
async def test_login_bad_credentials_share_one_message(client: AsyncClient, employee, credentials):
    response = await client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


async def test_login_inactive_user(client: AsyncClient, make_user):
    await make_user(username="former", is_active=False)
    response = await client.post("/api/v1/auth/login", json={"username": "former", "password": "password123"})
    assert response.status_code == 403


async def test_session_with_bearer_token(client: AsyncClient, employee, employee_headers):
    response = await client.get("/api/v1/auth/session", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["username"] == "ravi"


async def test_session_with_cookie(client: AsyncClient, employee):
    login = await client.post("/api/v1/auth/login", json={"username": "ravi", "password": "password123"})
    token = login.json()["token"]
    client.cookies.set("session_token", token)
    try:
        response = await client.get("/api/v1/auth/session")
    finally:
        client.cookies.clear()
    assert response.status_code == 200
    assert response.json()["id"] == employee.id


async def test_session_without_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/session")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_expired_session_is_deleted(client: AsyncClient, session, employee, employee_headers):
    auth_session = (await session.execute(select(AuthSession))).scalars().one()
    auth_session.expires_at = utc_now() - timedelta(minutes=1)
    session.add(auth_session)
    await session.commit()

    response = await client.get("/api/v1/auth/session", headers=employee_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Session expired"
    assert (await session.execute(select(AuthSession))).scalars().all() == []


async def test_logout_ends_session(client: AsyncClient, employee_headers):
    response = await client.post("/api/v1/auth/logout", headers=employee_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await client.get("/api/v1/auth/session", headers=employee_headers)
    assert response.status_code == 401


async def test_change_password(client: AsyncClient, employee, employee_headers, login):
    other_device = await login(employee)

    response = await client.post(
        "/api/v1/auth/change-password",
        headers=employee_headers,
        json={"current_password": "password123", "new_password": "new-password-1"},
    )
    assert response.status_code == 200

    # The calling session survives, other sessions are revoked
    assert (await client.get("/api/v1/auth/session", headers=employee_headers)).status_code == 200
    assert (await client.get("/api/v1/auth/session", headers=other_device)).status_code == 401

    response = await client.post("/api/v1/auth/login", json={"username": "ravi", "password": "new-password-1"})
    assert response.status_code == 200
    assert response.json()["user"]["password_changed"] is True


async def test_change_password_wrong_current(client: AsyncClient, employee_headers):
    response = await client.post(
        "/api/v1/auth/change-password",
        headers=employee_headers,
        json={"current_password": "nope", "new_password": "new-password-1"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Current password is incorrect"


async def test_change_password_too_short(client: AsyncClient, employee_headers):
    response = await client.post(
        "/api/v1/auth/change-password",
        headers=employee_headers,
        json={"current_password": "password123", "new_password": "short"},
    )
    assert response.status_code == 422
