# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
import re
from decimal import Decimal

import pytest

from billing.totals import balance, compute_totals, document_number, line_total, money
from conftest import bearer
from models.audit_log import AuditLog

ITEMS = [
    {"description": "Excavation", "quantity": "2", "unitPrice": "1000"},
    {"description": "Site survey", "quantity": "1", "unitPrice": "0.005"},
]


def test_money_rounds_half_up():
    assert money("0.005") == Decimal("0.01")
    assert money("2.675") == Decimal("2.68")
    assert line_total("3", "33.333") == Decimal("100.00")


def test_compute_totals():
    t = compute_totals(ITEMS, tax_rate="16", discount="100")
    assert t.subtotal == Decimal("2000.01")
    assert t.tax_amount == Decimal("320.00")
    assert t.discount == Decimal("100.00")
    assert t.total == Decimal("2220.01")
    assert balance(t.total, "220.01") == Decimal("2000.00")


def test_discount_larger_than_total():
    with pytest.raises(ValueError):
        compute_totals([{"quantity": 1, "unitPrice": 10}], tax_rate=0, discount=11)


def test_document_number_format():
    assert re.fullmatch(r"INV-\d{8}-[0-9A-F]{6}", document_number("INV"))
    assert document_number("QUO") != document_number("QUO")


def quotation_body(**overrides):
    body = {
        "clientName": "Nairobi Business Park Ltd",
        "clientEmail": "accounts@nbp.example.com",
        "projectTitle": "Perimeter wall",
        "items": [
            {"description": "Masonry", "quantity": 2, "unitPrice": "1000"},
        ],
        "discount": "100",
    }
    body.update(overrides)
    return body


def test_billing_requires_admin(client, make_user):
    assert client.get("/admin/billing/quotations").status_code == 401
    assert client.get("/admin/billing/quotations", headers=bearer(make_user())).status_code == 403


def test_quotation_to_paid_invoice(client, admin_headers, db):
    r = client.post("/admin/billing/quotations", headers=admin_headers, json=quotation_body())
    assert r.status_code == 201
    quote = r.json()["data"]
    assert quote["quotationNumber"].startswith("QUO-")
    assert Decimal(quote["subtotal"]) == Decimal("2000")
    assert Decimal(quote["taxAmount"]) == Decimal("320")
    assert Decimal(quote["total"]) == Decimal("2220")
    assert quote["status"] == "draft"

    r = client.put(f"/admin/billing/quotations/{quote['id']}/status", headers=admin_headers,
                   json={"status": "accepted"})
    assert r.status_code == 200
    r = client.put(f"/admin/billing/quotations/{quote['id']}/status", headers=admin_headers,
                   json={"status": "draft"})
    assert r.status_code == 400

    r = client.post("/admin/billing/invoices", headers=admin_headers, json={"quotationId": quote["id"]})
    assert r.status_code == 201
    invoice = r.json()["data"]
    assert invoice["clientName"] == "Nairobi Business Park Ltd"
    assert Decimal(invoice["total"]) == Decimal("2220")
    assert Decimal(invoice["balance"]) == Decimal("2220")

    url = f"/admin/billing/invoices/{invoice['id']}/payments"
    r = client.post(url, headers=admin_headers, json={"amount": "2000", "paymentMethod": "M-Pesa"})
    assert r.status_code == 200
    assert Decimal(r.json()["data"]["balance"]) == Decimal("220")
    assert r.json()["data"]["status"] == "draft"

    r = client.post(url, headers=admin_headers, json={"amount": "500"})
    assert r.status_code == 400
    assert r.json()["message"] == "Payment exceeds the outstanding balance"

    r = client.post(url, headers=admin_headers, json={"amount": "220"})
    data = r.json()["data"]
    assert data["status"] == "paid"
    assert Decimal(data["balance"]) == 0
    assert data["paidAt"] is not None
    assert data["paymentMethod"] == "M-Pesa"

    assert client.post(url, headers=admin_headers, json={"amount": "1"}).status_code == 400
    assert db.query(AuditLog).filter(AuditLog.resource_type == "invoices").count() == 3


def test_invoice_from_rejected_quotation(client, admin_headers):
    quote = client.post("/admin/billing/quotations", headers=admin_headers, json=quotation_body()).json()["data"]
    client.put(f"/admin/billing/quotations/{quote['id']}/status", headers=admin_headers,
               json={"status": "rejected"})
    r = client.post("/admin/billing/invoices", headers=admin_headers, json={"quotationId": quote["id"]})
    assert r.status_code == 400


def test_invoice_from_items(client, admin_headers):
    r = client.post("/admin/billing/invoices", headers=admin_headers, json={"clientName": "Walk-in"})
    assert r.status_code == 400

    r = client.post("/admin/billing/invoices", headers=admin_headers, json={
        "clientName": "Private Client",
        "clientEmail": "client@example.com",
        "items": [{"description": "Roofing", "quantity": 1, "unitPrice": "500"}],
        "taxRate": "0",
    })
    assert r.status_code == 201
    assert Decimal(r.json()["data"]["total"]) == Decimal("500")

    r = client.post("/admin/billing/invoices", headers=admin_headers, json={
        "clientName": "Private Client",
        "clientEmail": "client@example.com",
        "items": [{"description": "Roofing", "quantity": 1, "unitPrice": "500"}],
        "projectId": 9999,
    })
    assert r.status_code == 404


def test_discount_exceeding_total_rejected(client, admin_headers):
    r = client.post("/admin/billing/quotations", headers=admin_headers,
                    json=quotation_body(discount="999999"))
    assert r.status_code == 400
    assert r.json()["message"] == "Discount cannot exceed the total"


def test_client_phone_longer_than_column_rejected(client, admin_headers):
    r = client.post("/admin/billing/quotations", headers=admin_headers,
                    json=quotation_body(clientPhone="+254 700 000 000 000 0"))
    assert r.status_code == 400
    assert "clientPhone" in {e["field"] for e in r.json()["errors"]}
