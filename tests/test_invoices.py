"""
Tests for invoice endpoints.
"""

from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient


RECIPIENT = {
    "client_name": "Walk-in Customer",
    "client_email": "walkin@example.com",
    "client_address": "3 Market Square",
    "client_phone": "+620000002",
}


def invoice_payload(**overrides) -> dict:
    payload = {
        **RECIPIENT,
        "issue_date": "2026-01-01",
        "due_date": "2026-01-31",
        "tax_rate": "10",
        "delivery_fee": "5.00",
        "items": [
            {"description": "Design work", "quantity": 2, "unit_price": "50.00"},
            {"description": "Hosting", "quantity": 1, "unit_price": "30.00"},
        ],
    }
    payload.update(overrides)
    return payload


async def create_invoice(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/invoices", json=invoice_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def money(value: str) -> Decimal:
    return Decimal(value)


@pytest.mark.asyncio
async def test_create_invoice_computes_totals(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)

    assert invoice["status"] == "DRAFT"
    assert invoice["invoice_number"] == f"INV-{date.today().year}-00001"
    assert money(invoice["subtotal"]) == Decimal("130.00")
    assert money(invoice["tax"]) == Decimal("13.00")
    assert money(invoice["total"]) == Decimal("148.00")
    assert [money(i["total"]) for i in invoice["items"]] == [Decimal("100.00"), Decimal("30.00")]
    assert invoice["recipient"]["name"] == "Walk-in Customer"


@pytest.mark.asyncio
async def test_generated_numbers_increase(auth_client: AsyncClient):
    first = await create_invoice(auth_client)
    second = await create_invoice(auth_client)

    assert first["invoice_number"].endswith("-00001")
    assert second["invoice_number"].endswith("-00002")


@pytest.mark.asyncio
async def test_duplicate_invoice_number(auth_client: AsyncClient):
    await create_invoice(auth_client, invoice_number="A-1")

    response = await auth_client.post("/api/v1/invoices", json=invoice_payload(invoice_number="A-1"))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_invoice_for_linked_client(auth_client: AsyncClient):
    client = (await auth_client.post(
        "/api/v1/clients",
        json={"name": "Acme", "email": "acme@example.com"},
    )).json()

    payload = invoice_payload(client_id=client["id"])
    for field in RECIPIENT:
        payload.pop(field)
    response = await auth_client.post("/api/v1/invoices", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["client_id"] == client["id"]
    assert data["client_name"] is None
    assert data["recipient"]["name"] == "Acme"
    assert data["client"]["email"] == "acme@example.com"


@pytest.mark.asyncio
async def test_create_invoice_needs_exactly_one_recipient(auth_client: AsyncClient):
    both = await auth_client.post("/api/v1/invoices", json=invoice_payload(client_id=1))
    assert both.status_code == 422

    partial = invoice_payload()
    partial.pop("client_phone")
    response = await auth_client.post("/api/v1/invoices", json=partial)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_invoice_with_unknown_client(auth_client: AsyncClient):
    payload = invoice_payload(client_id=9999)
    for field in RECIPIENT:
        payload.pop(field)

    response = await auth_client.post("/api/v1/invoices", json=payload)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_reconciles_items(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)
    design, hosting = invoice["items"]

    response = await auth_client.put(
        f"/api/v1/invoices/{invoice['id']}",
        json={
            "items": [
                {"id": design["id"], "description": "Design work", "quantity": 3, "unit_price": "50.00"},
                {"description": "Support", "quantity": 1, "unit_price": "20.00"},
            ],
        },
    )

    assert response.status_code == 200, response.text
    data = response.json()
    items = {i["description"]: i for i in data["items"]}
    assert set(items) == {"Design work", "Support"}
    assert items["Design work"]["id"] == design["id"]
    assert items["Support"]["id"] not in (design["id"], hosting["id"])
    assert money(data["subtotal"]) == Decimal("170.00")
    assert money(data["tax"]) == Decimal("17.00")
    assert money(data["total"]) == Decimal("192.00")


@pytest.mark.asyncio
async def test_update_with_unknown_item_changes_nothing(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)
    design = invoice["items"][0]

    response = await auth_client.put(
        f"/api/v1/invoices/{invoice['id']}",
        json={
            "notes": "should not be saved",
            "items": [
                {"id": design["id"], "description": "Changed", "quantity": 9, "unit_price": "1.00"},
                {"id": 987654, "description": "Ghost", "quantity": 1, "unit_price": "1.00"},
            ],
        },
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "INVOICE_ITEM_NOT_FOUND"
    assert response.json()["item_id"] == 987654

    stored = (await auth_client.get(f"/api/v1/invoices/{invoice['id']}")).json()
    assert stored["notes"] is None
    assert [i["description"] for i in stored["items"]] == ["Design work", "Hosting"]
    assert money(stored["total"]) == Decimal("148.00")


@pytest.mark.asyncio
async def test_update_without_items_recomputes_totals(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)

    response = await auth_client.put(
        f"/api/v1/invoices/{invoice['id']}",
        json={"tax_rate": "20", "delivery_fee": "0"},
    )

    data = response.json()
    assert len(data["items"]) == 2
    assert money(data["tax"]) == Decimal("26.00")
    assert money(data["total"]) == Decimal("156.00")


@pytest.mark.asyncio
async def test_update_with_empty_items_clears_invoice(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)

    response = await auth_client.put(f"/api/v1/invoices/{invoice['id']}", json={"items": []})

    data = response.json()
    assert data["items"] == []
    assert money(data["subtotal"]) == Decimal("0")
    assert money(data["total"]) == Decimal("5.00")


@pytest.mark.asyncio
async def test_status_change(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)

    response = await auth_client.patch(
        f"/api/v1/invoices/{invoice['id']}/status",
        json={"status": "PAID"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "PAID"

    # Permissive: back to DRAFT is allowed
    response = await auth_client.patch(
        f"/api/v1/invoices/{invoice['id']}/status",
        json={"status": "DRAFT"},
    )
    assert response.json()["status"] == "DRAFT"


@pytest.mark.asyncio
async def test_unknown_status_is_rejected(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)

    response = await auth_client.patch(
        f"/api/v1/invoices/{invoice['id']}/status",
        json={"status": "CANCELLED"},
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "INVALID_STATUS"
    stored = (await auth_client.get(f"/api/v1/invoices/{invoice['id']}")).json()
    assert stored["status"] == "DRAFT"


@pytest.mark.asyncio
async def test_status_change_on_missing_invoice(auth_client: AsyncClient):
    response = await auth_client.patch("/api/v1/invoices/9999/status", json={"status": "SENT"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_summary(auth_client: AsyncClient):
    no_fees = {"tax_rate": "0", "delivery_fee": "0"}
    paid = await create_invoice(
        auth_client,
        items=[{"description": "Paid work", "quantity": 1, "unit_price": "100.00"}],
        **no_fees,
    )
    await create_invoice(
        auth_client,
        items=[{"description": "Open work", "quantity": 1, "unit_price": "50.00"}],
        **no_fees,
    )
    deleted = await create_invoice(
        auth_client,
        items=[{"description": "Removed", "quantity": 1, "unit_price": "999.00"}],
        **no_fees,
    )
    await auth_client.patch(f"/api/v1/invoices/{paid['id']}/status", json={"status": "PAID"})
    await auth_client.delete(f"/api/v1/invoices/{deleted['id']}")

    response = await auth_client.get("/api/v1/invoices/summary")

    assert response.status_code == 200
    assert money(response.json()["paid_total"]) == Decimal("100.00")
    assert money(response.json()["revenue_total"]) == Decimal("150.00")


@pytest.mark.asyncio
async def test_summary_without_invoices(auth_client: AsyncClient):
    response = await auth_client.get("/api/v1/invoices/summary")

    assert money(response.json()["paid_total"]) == Decimal("0")
    assert money(response.json()["revenue_total"]) == Decimal("0")


@pytest.mark.asyncio
async def test_list_filters_and_search(auth_client: AsyncClient):
    client = (await auth_client.post(
        "/api/v1/clients",
        json={"name": "Globex Corporation", "email": "ap@globex.com"},
    )).json()
    linked = invoice_payload(client_id=client["id"])
    for field in RECIPIENT:
        linked.pop(field)
    linked_invoice = (await auth_client.post("/api/v1/invoices", json=linked)).json()
    inline_invoice = await create_invoice(auth_client, notes="rush order")
    await auth_client.patch(f"/api/v1/invoices/{inline_invoice['id']}/status", json={"status": "SENT"})

    by_client = (await auth_client.get("/api/v1/invoices", params={"search": "globex"})).json()
    assert [i["id"] for i in by_client["items"]] == [linked_invoice["id"]]

    by_notes = (await auth_client.get("/api/v1/invoices", params={"search": "RUSH"})).json()
    assert [i["id"] for i in by_notes["items"]] == [inline_invoice["id"]]

    sent = (await auth_client.get("/api/v1/invoices", params={"status": "SENT"})).json()
    assert sent["total"] == 1

    bad = await auth_client.get("/api/v1/invoices", params={"status": "LOST"})
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_deleted_invoice_is_hidden(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)

    assert (await auth_client.delete(f"/api/v1/invoices/{invoice['id']}")).status_code == 200
    assert (await auth_client.get(f"/api/v1/invoices/{invoice['id']}")).status_code == 404
    assert (await auth_client.get("/api/v1/invoices")).json()["total"] == 0


@pytest.mark.asyncio
async def test_download_pdf(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client, notes="Thanks <3 & goodbye")

    response = await auth_client.get(f"/api/v1/invoices/{invoice['id']}/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_public_pdf_preview(client: AsyncClient):
    response = await client.post(
        "/api/v1/public/invoices/generate-pdf",
        json={
            "invoice_number": "PREVIEW-1",
            "issue_date": "2026-02-01",
            "due_date": "2026-02-15",
            "sender": {
                "name": "Freelancer",
                "bank_name": "Bank",
                "bank_account_name": "Freelancer",
                "bank_account_number": "123",
            },
            "recipient": {"name": "Customer", "address": "Somewhere"},
            "items": [{"description": "Work", "quantity": 2, "unit_price": "10.00"}],
            "tax_rate": "11",
        },
    )

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
    assert 'filename="invoice_PREVIEW-1.pdf"' in response.headers["content-disposition"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field",
    ["invoice_number", "issue_date", "due_date", "tax_rate", "delivery_fee"],
)
async def test_update_rejects_null_for_required_field(auth_client: AsyncClient, field: str):
    invoice = await create_invoice(auth_client)

    response = await auth_client.put(f"/api/v1/invoices/{invoice['id']}", json={field: None})

    assert response.status_code == 422
    assert any(error["field"] == f"body -> {field}" for error in response.json()["errors"])
    stored = (await auth_client.get(f"/api/v1/invoices/{invoice['id']}")).json()
    if field in ("tax_rate", "delivery_fee"):
        assert money(stored[field]) == money(invoice[field])
    else:
        assert stored[field] == invoice[field]


@pytest.mark.asyncio
async def test_update_echoing_items_changes_nothing(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client)
    echoed = [
        {
            "id": item["id"],
            "description": item["description"],
            "quantity": item["quantity"],
            "unit_price": item["unit_price"],
        }
        for item in invoice["items"]
    ]

    response = await auth_client.put(f"/api/v1/invoices/{invoice['id']}", json={"items": echoed})

    assert response.status_code == 200, response.text
    data = response.json()
    assert [(i["id"], i["description"], i["quantity"]) for i in data["items"]] == [
        (i["id"], i["description"], i["quantity"]) for i in invoice["items"]
    ]
    assert [money(i["total"]) for i in data["items"]] == [money(i["total"]) for i in invoice["items"]]
    for key in ("subtotal", "tax", "total"):
        assert money(data[key]) == money(invoice[key])


@pytest.mark.asyncio
async def test_tax_rate_above_one_hundred_is_accepted(auth_client: AsyncClient):
    invoice = await create_invoice(auth_client, tax_rate="150")

    assert money(invoice["tax"]) == Decimal("195.00")
    assert money(invoice["total"]) == Decimal("330.00")
