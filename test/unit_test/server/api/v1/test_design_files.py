import pytest
import pytest_asyncio
from httpx import AsyncClient

from interior_manager.core.database.entities.design_files import DesignFile

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def designer(project, employee, add_member):
    await add_member(project, employee, ["designs.view", "designs.upload", "designs.comment"])
    return employee


async def _upload(client, headers, project_id, file_name="kitchen-layout.pdf", **fields):
    response = await client.post(
        "/api/v1/design-files",
        headers=headers,
        json={
            "project_id": project_id,
            "file_name": file_name,
            "file_url": f"https://files.example.com/{file_name}",
            **fields,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_upload_versions_by_file_name(client: AsyncClient, project, admin, designer, employee_headers, push_client):
    first = await _upload(client, employee_headers, project.id)
    second = await _upload(client, employee_headers, project.id)
    other = await _upload(client, employee_headers, project.id, file_name="bedroom.pdf")

    assert (first["version_number"], first["parent_design_id"]) == (1, None)
    assert (second["version_number"], second["parent_design_id"]) == (2, first["id"])
    assert other["version_number"] == 1
    assert first["approval_status"] == "pending"

    assert push_client.recipients() == [admin.id] * 3
    assert push_client.sent[1]["message"] == (
        'Ravi Kumar uploaded "kitchen-layout.pdf" (v2) to project "Sharma Residence"'
    )

    response = await client.get(f"/api/v1/design-files/{first['id']}/versions", headers=employee_headers)
    data = response.json()
    assert data["total_versions"] == 2
    assert [v["version_number"] for v in data["versions"]] == [2, 1]


async def test_upload_requires_permission(client: AsyncClient, project, employee, employee_headers, add_member):
    await add_member(project, employee, ["designs.view"])
    response = await client.post(
        "/api/v1/design-files",
        headers=employee_headers,
        json={"project_id": project.id, "file_name": "a.pdf", "file_url": "https://files.example.com/a.pdf"},
    )
    assert response.status_code == 403


async def test_approval_keeps_single_current_approved(
    client: AsyncClient, project, designer, employee, admin_headers, employee_headers, push_client
):
    first = await _upload(client, employee_headers, project.id)
    second = await _upload(client, employee_headers, project.id)

    for design in (first, second):
        response = await client.patch(
            f"/api/v1/design-files/{design['id']}/approval", headers=admin_headers, json={"approval_status": "approved"}
        )
        assert response.status_code == 200
        assert response.json()["is_current_approved"] is True

    response = await client.get("/api/v1/design-files", headers=admin_headers, params={"project_id": project.id})
    current = {d["id"]: d["is_current_approved"] for d in response.json()}
    assert current == {first["id"]: False, second["id"]: True}

    approvals = [call for call in push_client.sent if call["title"] == "Design Approved"]
    assert [call["external_user_ids"] for call in approvals] == [[employee.id], [employee.id]]
    assert approvals[0]["data"]["route"] == f"/dashboard/projects/{project.id}?stage=design"


async def test_needs_changes_notifies_with_comments(
    client: AsyncClient, project, designer, admin_headers, employee_headers, push_client
):
    design = await _upload(client, employee_headers, project.id)
    response = await client.patch(
        f"/api/v1/design-files/{design['id']}/approval",
        headers=admin_headers,
        json={"approval_status": "needs_changes", "admin_comments": "Move the island"},
    )
    assert response.json()["approval_status"] == "needs_changes"
    assert push_client.sent[-1]["title"] == "Design Needs Changes"
    assert push_client.sent[-1]["message"] == 'Your design "kitchen-layout.pdf" needs changes: Move the island'


async def test_approval_admin_only(client: AsyncClient, project, designer, employee_headers):
    design = await _upload(client, employee_headers, project.id)
    response = await client.patch(
        f"/api/v1/design-files/{design['id']}/approval", headers=employee_headers, json={"approval_status": "approved"}
    )
    assert response.status_code == 403


async def test_bulk_approve_skips_frozen_and_unknown(
    client: AsyncClient, project, designer, employee, admin_headers, employee_headers, push_client
):
    first = await _upload(client, employee_headers, project.id)
    second = await _upload(client, employee_headers, project.id, file_name="bedroom.pdf")
    frozen = await _upload(client, employee_headers, project.id, file_name="living.pdf")
    await client.post(f"/api/v1/design-files/{frozen['id']}/freeze", headers=admin_headers)
    push_client.sent.clear()

    response = await client.post(
        "/api/v1/design-files/bulk-approve",
        headers=admin_headers,
        json={"design_ids": [first["id"], second["id"], frozen["id"], "missing"], "action": "approve"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Successfully approved 2 design(s)"
    assert data["updated_count"] == 2
    assert set(data["design_ids"]) == {first["id"], second["id"]}

    response = await client.get("/api/v1/design-files", headers=admin_headers, params={"project_id": project.id})
    designs = {d["id"]: d for d in response.json()}
    assert designs[frozen["id"]]["approval_status"] == "pending"
    assert {designs[i]["approval_status"] for i in (first["id"], second["id"])} == {"approved"}
    assert sum(d["is_current_approved"] for d in designs.values()) == 1

    assert push_client.recipients() == [employee.id, employee.id]
    assert {call["title"] for call in push_client.sent} == {"Design Approved"}


async def test_bulk_reject_notifies_with_comments(
    client: AsyncClient, project, designer, admin_headers, employee_headers, push_client
):
    design = await _upload(client, employee_headers, project.id)
    await client.patch(
        f"/api/v1/design-files/{design['id']}/approval", headers=admin_headers, json={"approval_status": "approved"}
    )

    response = await client.post(
        "/api/v1/design-files/bulk-approve",
        headers=admin_headers,
        json={"design_ids": [design["id"]], "action": "reject", "admin_comments": "Wrong scale"},
    )
    assert response.json()["message"] == "Successfully rejected 1 design(s)"

    response = await client.get("/api/v1/design-files", headers=admin_headers, params={"project_id": project.id})
    (stored,) = response.json()
    assert (stored["approval_status"], stored["is_current_approved"]) == ("rejected", False)
    assert stored["admin_comments"] == "Wrong scale"
    assert push_client.sent[-1]["message"] == 'Your design "kitchen-layout.pdf" needs changes: Wrong scale'


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"design_ids": [], "action": "approve"}, 422),
        ({"design_ids": ["x"], "action": "archive"}, 422),
    ],
)
async def test_bulk_approve_validates_body(client: AsyncClient, admin_headers, body, expected):
    response = await client.post("/api/v1/design-files/bulk-approve", headers=admin_headers, json=body)
    assert response.status_code == expected


async def test_bulk_approve_admin_only(client: AsyncClient, project, designer, employee_headers):
    design = await _upload(client, employee_headers, project.id)
    response = await client.post(
        "/api/v1/design-files/bulk-approve",
        headers=employee_headers,
        json={"design_ids": [design["id"]], "action": "approve"},
    )
    assert response.status_code == 403


async def test_frozen_design_is_locked(client: AsyncClient, project, admin_headers):
    design = await _upload(client, admin_headers, project.id)

    response = await client.post(f"/api/v1/design-files/{design['id']}/freeze", headers=admin_headers)
    assert response.json() == {
        "message": "Design frozen successfully",
        "design": {"id": design["id"], "file_name": "kitchen-layout.pdf"},
    }

    response = await client.patch(
        f"/api/v1/design-files/{design['id']}/approval", headers=admin_headers, json={"approval_status": "rejected"}
    )
    assert response.status_code == 409
    assert (await client.delete(f"/api/v1/design-files/{design['id']}", headers=admin_headers)).status_code == 409

    response = await client.delete(f"/api/v1/design-files/{design['id']}/freeze", headers=admin_headers)
    assert response.json()["message"] == "Design unfrozen successfully"
    assert (await client.delete(f"/api/v1/design-files/{design['id']}", headers=admin_headers)).status_code == 200


async def test_freeze_limited_to_admins_and_managers(client: AsyncClient, session, project, designer, employee_headers):
    design = await _upload(client, employee_headers, project.id)
    response = await client.post(f"/api/v1/design-files/{design['id']}/freeze", headers=employee_headers)
    assert response.status_code == 403
    assert (await session.get(DesignFile, design["id"])).is_frozen is False


async def test_comments_notify_uploader_and_creator_once(
    client: AsyncClient, project, admin, designer, employee, make_user, login, add_member, push_client
):
    design = await _upload(client, await login(employee), project.id)
    push_client.sent.clear()

    reviewer = await make_user("project_manager")
    await add_member(project, reviewer, ["designs.view"])
    response = await client.post(
        f"/api/v1/design-files/{design['id']}/comments", headers=await login(reviewer), json={"comment": "Looks good"}
    )
    assert response.status_code == 201
    assert response.json()["user_id"] == reviewer.id
    assert sorted(push_client.recipients()) == sorted([employee.id, admin.id])

    # The uploader commenting only notifies the project creator
    push_client.sent.clear()
    await client.post(
        f"/api/v1/design-files/{design['id']}/comments", headers=await login(employee), json={"comment": "Thanks"}
    )
    assert push_client.recipients() == [admin.id]

    response = await client.get("/api/v1/design-files", headers=await login(admin), params={"project_id": project.id})
    assert [c["comment"] for c in response.json()[0]["comments"]] == ["Looks good", "Thanks"]


async def test_delete_requires_permission(client: AsyncClient, project, designer, employee_headers, admin_headers):
    design = await _upload(client, admin_headers, project.id)
    response = await client.delete(f"/api/v1/design-files/{design['id']}", headers=employee_headers)
    assert response.status_code == 403


async def test_missing_design(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/design-files/missing/versions", headers=admin_headers)
    assert response.status_code == 404
