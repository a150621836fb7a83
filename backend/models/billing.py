# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Quotation / Invoice ORM models.

``items`` holds the JSON line items; subtotal, tax_amount, total (and for
invoices balance) are always computed server-side by billing/totals.py:

    total   = subtotal + tax_amount - discount
    balance = total - amount_paid
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, Numeric, String, Text
from sqlalchemy.sql import func

from database import Base


class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quotation_number = Column(String(50), unique=True, nullable=False)
    client_name = Column(String(200), nullable=False)
    client_email = Column(String(255), nullable=False)
    client_phone = Column(String(20), nullable=True)
    project_title = Column(String(200), nullable=False)
    project_description = Column(Text, nullable=True)
    items = Column(JSON, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, server_default="16.00")  # VAT
    tax_amount = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, server_default="0.00")
    total = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(10), nullable=False, server_default="KSH")
    valid_until = Column(DateTime, nullable=False)
    # draft, sent, accepted, rejected, expired
    status = Column(String(50), nullable=False, default="draft", server_default="draft")
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_number = Column(String(50), unique=True, nullable=False)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="SET NULL"), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    client_name = Column(String(200), nullable=False)
    client_email = Column(String(255), nullable=False)
    client_phone = Column(String(20), nullable=True)
    items = Column(JSON, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, server_default="16.00")
    tax_amount = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, server_default="0.00")
    total = Column(Numeric(12, 2), nullable=False)
    amount_paid = Column(Numeric(12, 2), nullable=False, default=0, server_default="0.00")
    balance = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(10), nullable=False, server_default="KSH")
    due_date = Column(DateTime, nullable=False)
    # draft, sent, paid, overdue, cancelled
    status = Column(String(50), nullable=False, default="draft", server_default="draft")
    payment_method = Column(String(100), nullable=True)
    payment_reference = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
