# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Billing endpoints – quotations, invoices and payments.

Every endpoint is guarded by ``require_admin``.  Totals are never taken from
the client: they are recomputed from the line items on every write.
"""

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from billing import totals
from billing.schemas import (
    InvoiceCreateRequest,
    InvoiceRow,
    LineItem,
    PaymentRequest,
    QuotationCreateRequest,
    QuotationRow,
    QuotationStatusRequest,
)
from core.audit import audit
from core.errors import ApiError
from core.schemas import ok
from core.security import require_admin
from database import get_db, utcnow
from models.billing import Invoice, Quotation
from models.content import Project
from models.user import User

router = APIRouter(prefix="/admin/billing", tags=["billing"])


def _stored_items(items: list[LineItem]) -> list[dict]:
    """JSON-safe line items; amounts kept as strings so no precision is lost."""
    return [
        {
            "description": i.description,
            "quantity": str(i.quantity),
            "unitPrice": str(totals.money(i.unit_price)),
            "total": str(totals.line_total(i.quantity, i.unit_price)),
        }
        for i in items
    ]


def _compute(items: list[dict], tax_rate, discount) -> totals.Totals:
    try:
        return totals.compute_totals(items, tax_rate, discount)
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc))


# ---------------------------------------------------------------------------
# Quotations
# ---------------------------------------------------------------------------


@router.get("/quotations")
def list_quotations(
    status_filter: Optional[str] = Query(None, alias="status"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Quotation)
    if status_filter:
        q = q.filter(Quotation.status == status_filter)
    rows = q.order_by(Quotation.created_at.desc(), Quotation.id.desc()).all()
    return ok("Quotations retrieved", [QuotationRow.model_validate(r) for r in rows])


@router.post("/quotations", status_code=status.HTTP_201_CREATED)
def create_quotation(
    body: QuotationCreateRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    items = _stored_items(body.items)
    t = _compute(items, body.tax_rate, body.discount)
    quote = Quotation(
        quotation_number=totals.document_number("QUO"),
        client_name=body.client_name,
        client_email=body.client_email,
        client_phone=body.client_phone,
        project_title=body.project_title,
        project_description=body.project_description,
        items=items,
        subtotal=t.subtotal,
        tax_rate=body.tax_rate,
        tax_amount=t.tax_amount,
        discount=t.discount,
        total=t.total,
        valid_until=utcnow() + timedelta(days=body.valid_days),
        status="draft",
        notes=body.notes,
        created_by=admin.id,
    )
    db.add(quote)
    db.flush()
    audit(db, request, admin.id, "create_quotation", "quotations", quote.id,
          {"number": quote.quotation_number, "total": str(t.total)})
    db.commit()
    db.refresh(quote)
    return ok("Quotation created", QuotationRow.model_validate(quote))


@router.get("/quotations/{quotation_id}")
def get_quotation(
    quotation_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    quote = db.query(Quotation).filter(Quotation.id == quotation_id).first()
    if not quote:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Quotation not found")
    return ok("Quotation retrieved", QuotationRow.model_validate(quote))


@router.put("/quotations/{quotation_id}/status")
def update_quotation_status(
    quotation_id: int,
    body: QuotationStatusRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    quote = db.query(Quotation).filter(Quotation.id == quotation_id).first()
    if not quote:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Quotation not found")
    if quote.status in ("accepted", "rejected", "expired"):
        raise ApiError(status.HTTP_400_BAD_REQUEST, f"Quotation is already {quote.status}")

    previous = quote.status
    quote.status = body.status
    audit(db, request, admin.id, "update_quotation_status", "quotations", quote.id,
          {"previousStatus": previous, "newStatus": body.status})
    db.commit()
    return ok("Quotation updated", QuotationRow.model_validate(quote))


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------


@router.get("/invoices")
def list_invoices(
    status_filter: Optional[str] = Query(None, alias="status"),
    overdue_only: bool = Query(False),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Invoice)
    if status_filter:
        q = q.filter(Invoice.status == status_filter)
    if overdue_only:
        q = q.filter(Invoice.due_date < utcnow(), Invoice.status.notin_(("paid", "cancelled")))
    rows = q.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()
    return ok("Invoices retrieved", [InvoiceRow.model_validate(r) for r in rows])


@router.post("/invoices", status_code=status.HTTP_201_CREATED)
def create_invoice(
    body: InvoiceCreateRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Raise an invoice from explicit line items, or from an existing quotation
    (whose client, items, tax rate and discount are copied).
    """
    if body.project_id is not None and not db.query(Project).filter(Project.id == body.project_id).first():
        raise ApiError(status.HTTP_404_NOT_FOUND, "Project not found")

    if body.quotation_id is not None:
        quote = db.query(Quotation).filter(Quotation.id == body.quotation_id).first()
        if not quote:
            raise ApiError(status.HTTP_404_NOT_FOUND, "Quotation not found")
        if quote.status == "rejected":
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Cannot invoice a rejected quotation")
        client_name, client_email, client_phone = quote.client_name, quote.client_email, quote.client_phone
        items = list(quote.items)
        tax_rate, discount = quote.tax_rate, quote.discount
    else:
        if not (body.client_name and body.client_email and body.items):
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                "Client name, client email and at least one item are required",
            )
        client_name, client_email, client_phone = body.client_name, body.client_email, body.client_phone
        items = _stored_items(body.items)
        tax_rate, discount = body.tax_rate, body.discount

    t = _compute(items, tax_rate, discount)
    invoice = Invoice(
        invoice_number=totals.document_number("INV"),
        quotation_id=body.quotation_id,
        project_id=body.project_id,
        client_name=client_name,
        client_email=client_email,
        client_phone=client_phone,
        items=items,
        subtotal=t.subtotal,
        tax_rate=tax_rate,
        tax_amount=t.tax_amount,
        discount=t.discount,
        total=t.total,
        amount_paid=totals.money(0),
        balance=t.total,
        due_date=utcnow() + timedelta(days=body.due_days),
        status="draft",
        notes=body.notes,
        created_by=admin.id,
    )
    db.add(invoice)
    db.flush()
    audit(db, request, admin.id, "create_invoice", "invoices", invoice.id,
          {"number": invoice.invoice_number, "total": str(t.total), "quotationId": body.quotation_id})
    db.commit()
    db.refresh(invoice)
    return ok("Invoice created", InvoiceRow.model_validate(invoice))


@router.get("/invoices/{invoice_id}")
def get_invoice(
    invoice_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Invoice not found")
    return ok("Invoice retrieved", InvoiceRow.model_validate(invoice))


@router.post("/invoices/{invoice_id}/payments")
def record_payment(
    invoice_id: int,
    body: PaymentRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Apply a payment; the invoice becomes ``paid`` once the balance is zero."""
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Invoice not found")
    if invoice.status in ("paid", "cancelled"):
        raise ApiError(status.HTTP_400_BAD_REQUEST, f"Invoice is already {invoice.status}")

    amount = totals.money(body.amount)
    paid = totals.money(invoice.amount_paid) + amount
    remaining = totals.balance(invoice.total, paid)
    if remaining < 0:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Payment exceeds the outstanding balance")

    invoice.amount_paid = paid
    invoice.balance = remaining
    invoice.payment_method = body.payment_method or invoice.payment_method
    invoice.payment_reference = body.payment_reference or invoice.payment_reference
    if remaining == 0:
        invoice.status = "paid"
        invoice.paid_at = utcnow()
    audit(db, request, admin.id, "record_payment", "invoices", invoice.id,
          {"amount": str(amount), "balance": str(remaining)})
    db.commit()
    return ok("Payment recorded", InvoiceRow.model_validate(invoice))
