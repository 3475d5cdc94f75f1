import pytest
from httpx import AsyncClient

from interior_manager.core.database.entities.projects import Project

pytestmark = pytest.mark.asyncio


async def _invoice(client, headers, project_id, number="INV-001", total=100000):
    response = await client.post(
        "/api/v1/invoices",
        headers=headers,
        json={"project_id": project_id, "invoice_number": number, "total_amount": total},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _pay(client, headers, project_id, amount, invoice_id=None, method="upi", payment_date="2026-03-01"):
    response = await client.post(
        "/api/v1/payments",
        headers=headers,
        json={
            "project_id": project_id,
            "invoice_id": invoice_id,
            "amount": amount,
            "payment_date": payment_date,
            "payment_method": method,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _invoice_status(client, headers, project_id):
    response = await client.get("/api/v1/invoices", headers=headers, params={"project_id": project_id})
    (invoice,) = response.json()
    return invoice["status"], invoice["paid_amount"]


async def test_invoice_paid_once_covered(client: AsyncClient, project, admin_headers):
    invoice = await _invoice(client, admin_headers, project.id)
    assert invoice["status"] == "pending"

    await _pay(client, admin_headers, project.id, 40000, invoice["id"])
    assert await _invoice_status(client, admin_headers, project.id) == ("pending", 40000)

    await _pay(client, admin_headers, project.id, 60000, invoice["id"], method="cheque")
    assert await _invoice_status(client, admin_headers, project.id) == ("paid", 100000)


async def test_invoice_reverts_when_payment_reduced(client: AsyncClient, project, admin_headers):
    invoice = await _invoice(client, admin_headers, project.id, total=50000)
    payment = await _pay(client, admin_headers, project.id, 50000, invoice["id"])
    assert (await _invoice_status(client, admin_headers, project.id))[0] == "paid"

    response = await client.patch(f"/api/v1/payments/{payment['id']}", headers=admin_headers, json={"amount": 20000})
    assert response.status_code == 200
    assert await _invoice_status(client, admin_headers, project.id) == ("pending", 20000)

    await client.patch(f"/api/v1/payments/{payment['id']}", headers=admin_headers, json={"amount": 50000})
    assert (await _invoice_status(client, admin_headers, project.id))[0] == "paid"

    response = await client.delete(f"/api/v1/payments/{payment['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert await _invoice_status(client, admin_headers, project.id) == ("pending", 0)


@pytest.mark.parametrize("body", [{"amount": None}, {"payment_date": None}])
async def test_update_payment_rejects_null_for_required_fields(client: AsyncClient, project, admin_headers, body):
    invoice = await _invoice(client, admin_headers, project.id, total=50000)
    payment = await _pay(client, admin_headers, project.id, 50000, invoice["id"])

    response = await client.patch(f"/api/v1/payments/{payment['id']}", headers=admin_headers, json=body)
    assert response.status_code == 422
    assert await _invoice_status(client, admin_headers, project.id) == ("paid", 50000)


async def test_duplicate_invoice_number(client: AsyncClient, project, admin_headers):
    await _invoice(client, admin_headers, project.id)
    response = await client.post(
        "/api/v1/invoices",
        headers=admin_headers,
        json={"project_id": project.id, "invoice_number": "INV-001", "total_amount": 5},
    )
    assert response.status_code == 409


async def test_payment_invoice_must_match_project(client: AsyncClient, session, project, admin, admin_headers):
    other = Project(title="Other", created_by=admin.id)
    session.add(other)
    await session.commit()
    invoice = await _invoice(client, admin_headers, other.id)

    response = await client.post(
        "/api/v1/payments",
        headers=admin_headers,
        json={"project_id": project.id, "invoice_id": invoice["id"], "amount": 10, "payment_date": "2026-03-01"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invoice does not belong to this project"


async def test_list_payments_with_stats(client: AsyncClient, project, admin_headers):
    invoice = await _invoice(client, admin_headers, project.id)
    await _pay(client, admin_headers, project.id, 1000, invoice["id"], method="cash", payment_date="2026-01-10")
    await _pay(client, admin_headers, project.id, 2500.5, method="upi", payment_date="2026-02-10")

    response = await client.get("/api/v1/payments", headers=admin_headers, params={"project_id": project.id})
    data = response.json()
    assert [p["amount"] for p in data["payments"]] == [2500.5, 1000]
    assert data["stats"]["total"] == 2
    assert data["stats"]["totalAmount"] == 3500.5
    assert data["stats"]["byMethod"] == {"bank_transfer": 0, "cheque": 0, "cash": 1000, "upi": 2500.5}

    response = await client.get("/api/v1/payments", headers=admin_headers, params={"invoice_id": invoice["id"]})
    assert [p["amount"] for p in response.json()["payments"]] == [1000]


async def test_list_payments_requires_scope(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/payments", headers=admin_headers)
    assert response.status_code == 400


async def test_finance_writes_admin_only(client: AsyncClient, project, employee, employee_headers, add_member):
    await add_member(project, employee, ["*"])
    response = await client.post(
        "/api/v1/invoices",
        headers=employee_headers,
        json={"project_id": project.id, "invoice_number": "INV-9", "total_amount": 1},
    )
    assert response.status_code == 403

    response = await client.get("/api/v1/invoices", headers=employee_headers, params={"project_id": project.id})
    assert response.status_code == 200


async def test_finance_notifications_reach_project_creator(
    client: AsyncClient, session, admin_headers, make_user, push_client
):
    manager = await make_user("project_manager")
    project = Project(title="Iyer Apartment", created_by=manager.id)
    session.add(project)
    await session.commit()

    invoice = await _invoice(client, admin_headers, project.id, total=125000.5)
    await _pay(client, admin_headers, project.id, 25000, invoice["id"])

    assert push_client.recipients() == [manager.id, manager.id]
    assert push_client.sent[0]["message"] == (
        'A new invoice (INV-001) for ₹125,000.50 was created for project "Iyer Apartment"'
    )
    assert push_client.sent[1]["message"] == 'A payment of ₹25,000 has been recorded for project "Iyer Apartment"'
    assert push_client.sent[1]["data"]["route"] == f"/dashboard/projects/{project.id}?stage=orders"
