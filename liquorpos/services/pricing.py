from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

TWOPLACES = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return money(Decimal(str(unit_price)) * quantity)


def calculate_totals(lines: Iterable, tax_rate) -> Totals:
    """Subtotal, tax and total for cart lines.

    Accepts any objects exposing ``quantity`` and either ``product.price``
    (cart lines) or ``price`` (sale items). Each line total and the tax are
    rounded half-up to cents; the total is their exact sum.
    """
    subtotal = Decimal("0.00")
    for line in lines:
        price = line.product.price if hasattr(line, "product") else line.price
        subtotal += line_total(price, line.quantity)
    tax = money(subtotal * Decimal(str(tax_rate)) / HUNDRED)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
