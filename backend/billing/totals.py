# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Quotation / invoice arithmetic.

All money is ``Decimal`` rounded half-up to cents; floats never enter the
calculation.

    subtotal   = sum(quantity * unit_price)
    tax_amount = subtotal * tax_rate / 100
    total      = subtotal + tax_amount - discount
    balance    = total - amount_paid
"""

import secrets
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from database import utcnow

CENTS = Decimal("0.01")
DEFAULT_TAX_RATE = Decimal("16.00")   # Kenyan VAT


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax_amount: Decimal
    discount: Decimal
    total: Decimal


def line_total(quantity, unit_price) -> Decimal:
    return money(Decimal(str(quantity)) * Decimal(str(unit_price)))


def compute_totals(items: Iterable[dict], tax_rate=DEFAULT_TAX_RATE, discount=0) -> Totals:
    """
    *items* are ``{"quantity": ..., "unitPrice": ...}`` mappings.  Raises
    ``ValueError`` when the discount exceeds the taxed subtotal.
    """
    subtotal = money(sum((line_total(i["quantity"], i["unitPrice"]) for i in items), Decimal("0")))
    tax_amount = money(subtotal * Decimal(str(tax_rate)) / 100)
    discount = money(discount)
    total = subtotal + tax_amount - discount
    if total < 0:
        raise ValueError("Discount cannot exceed the total")
    return Totals(subtotal, tax_amount, discount, total)


def balance(total, amount_paid) -> Decimal:
    return money(Decimal(str(total)) - Decimal(str(amount_paid)))


def document_number(prefix: str) -> str:
    """``QUO-20261019-4F9A1C`` style numbers; the random tail keeps them unique."""
    return f"{prefix}-{utcnow():%Y%m%d}-{secrets.token_hex(3).upper()}"
