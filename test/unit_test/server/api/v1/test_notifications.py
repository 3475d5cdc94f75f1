import pytest
from httpx import AsyncClient

from interior_manager.core.database.entities.notifications import Notification

pytestmark = pytest.mark.asyncio


@pytest.fixture
def notify(session):
    async def _notify(user, title, is_read=False):
        notification = Notification(user_id=user.id, title=title, message=f"{title} message", is_read=is_read)
        session.add(notification)
        await session.commit()
        return notification

    return _notify


async def test_admin_sends_notification(client: AsyncClient, employee, employee_headers, admin_headers, push_client):
    response = await client.post(
        "/api/v1/notifications",
        headers=admin_headers,
        json={
            "user_id": employee.id,
            "title": "Site visit",
            "message": "Client visit on Saturday",
            "type": "snag_created",
            "related_id": "snag-1",
        },
    )
    assert response.status_code == 201
    assert response.json()["type"] == "snag_created"
    assert response.json()["is_read"] is False

    (call,) = push_client.sent
    assert call["external_user_ids"] == [employee.id]
    assert call["url"] == "http://localhost:3000/dashboard/snags?snagId=snag-1"

    response = await client.get("/api/v1/notifications", headers=employee_headers)
    assert [n["title"] for n in response.json()] == ["Site visit"]


async def test_send_to_unknown_user(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/notifications",
        headers=admin_headers,
        json={"user_id": "missing", "title": "Hi", "message": "Hi", "type": "general"},
    )
    assert response.status_code == 404


async def test_send_rejects_unknown_type(client: AsyncClient, employee, admin_headers):
    response = await client.post(
        "/api/v1/notifications",
        headers=admin_headers,
        json={"user_id": employee.id, "title": "Hi", "message": "Hi", "type": "telepathy"},
    )
    assert response.status_code == 422


async def test_send_admin_only(client: AsyncClient, employee, employee_headers):
    response = await client.post(
        "/api/v1/notifications",
        headers=employee_headers,
        json={"user_id": employee.id, "title": "Hi", "message": "Hi", "type": "general"},
    )
    assert response.status_code == 403


async def test_list_only_own_and_unread_filter(client: AsyncClient, admin, employee, employee_headers, notify):
    await notify(employee, "Old", is_read=True)
    await notify(employee, "New")
    await notify(admin, "Not yours")

    response = await client.get("/api/v1/notifications", headers=employee_headers)
    assert [n["title"] for n in response.json()] == ["New", "Old"]

    response = await client.get("/api/v1/notifications", headers=employee_headers, params={"unread_only": "true"})
    assert [n["title"] for n in response.json()] == ["New"]

    response = await client.get("/api/v1/notifications", headers=employee_headers, params={"limit": 1})
    assert len(response.json()) == 1

    response = await client.get("/api/v1/notifications/unread-count", headers=employee_headers)
    assert response.json() == {"count": 1}


async def test_mark_read_by_ids_and_all(client: AsyncClient, admin, employee, employee_headers, notify):
    first = await notify(employee, "First")
    second = await notify(employee, "Second")
    third = await notify(employee, "Third")
    others = await notify(admin, "Admin only")

    response = await client.patch(
        "/api/v1/notifications",
        headers=employee_headers,
        json={"is_read": True, "notification_id": first.id, "notification_ids": [second.id, others.id]},
    )
    assert response.json() == {"success": True, "updated": 2}
    assert (await client.get("/api/v1/notifications/unread-count", headers=employee_headers)).json() == {"count": 1}

    response = await client.patch("/api/v1/notifications", headers=employee_headers, json={"is_read": True})
    assert response.json()["updated"] == 3
    assert (await client.get("/api/v1/notifications/unread-count", headers=employee_headers)).json() == {"count": 0}

    response = await client.patch(
        "/api/v1/notifications", headers=employee_headers, json={"is_read": False, "notification_ids": [third.id]}
    )
    assert response.json()["updated"] == 1


async def test_delete_own_notification(client: AsyncClient, admin, employee, employee_headers, notify):
    mine = await notify(employee, "Mine")
    theirs = await notify(admin, "Theirs")

    assert (await client.delete(f"/api/v1/notifications/{theirs.id}", headers=employee_headers)).status_code == 404
    assert (await client.delete(f"/api/v1/notifications/{mine.id}", headers=employee_headers)).status_code == 200

    response = await client.delete(f"/api/v1/notifications/{mine.id}", headers=employee_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Notification not found"
