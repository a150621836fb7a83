# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the billing endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from billing.totals import DEFAULT_TAX_RATE
from core.schemas import ApiModel


# -- Requests --------------------------------------------------------------


class LineItem(ApiModel):
    description: str = Field(min_length=1, max_length=500)
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)


class QuotationCreateRequest(ApiModel):
    client_name: str = Field(min_length=2, max_length=200)
    client_email: EmailStr
    client_phone: Optional[str] = Field(None, max_length=20)
    project_title: str = Field(min_length=2, max_length=200)
    project_description: Optional[str] = None
    items: List[LineItem] = Field(min_length=1)
    tax_rate: Decimal = Field(DEFAULT_TAX_RATE, ge=0, le=100)
    discount: Decimal = Field(Decimal("0"), ge=0)
    valid_days: int = Field(30, ge=1, le=365)
    notes: Optional[str] = None


class QuotationStatusRequest(ApiModel):
    status: Literal["draft", "sent", "accepted", "rejected", "expired"]


class InvoiceCreateRequest(ApiModel):
    # Either quotation_id or client details + items
    quotation_id: Optional[int] = None
    project_id: Optional[int] = None
    client_name: Optional[str] = None
    client_email: Optional[EmailStr] = None
    client_phone: Optional[str] = Field(None, max_length=20)
    items: Optional[List[LineItem]] = None
    tax_rate: Decimal = Field(DEFAULT_TAX_RATE, ge=0, le=100)
    discount: Decimal = Field(Decimal("0"), ge=0)
    due_days: int = Field(30, ge=0, le=365)
    notes: Optional[str] = None


class PaymentRequest(ApiModel):
    amount: Decimal = Field(gt=0)
    payment_method: Optional[str] = Field(None, max_length=100)
    payment_reference: Optional[str] = Field(None, max_length=200)


# -- Responses -------------------------------------------------------------


class QuotationRow(ApiModel):
    id: int
    quotation_number: str
    client_name: str
    client_email: str
    client_phone: Optional[str] = None
    project_title: str
    items: list
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    discount: Decimal
    total: Decimal
    currency: str
    valid_until: datetime
    status: str
    notes: Optional[str] = None
    created_at: datetime


class InvoiceRow(ApiModel):
    id: int
    invoice_number: str
    quotation_id: Optional[int] = None
    project_id: Optional[int] = None
    client_name: str
    client_email: str
    items: list
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    discount: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    currency: str
    due_date: datetime
    status: str
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
