"""Sale finalization.

Turns an open cart into an immutable sale and reconciles stock:

1. reject an empty cart (nothing persisted)
2. re-read every line from the catalog; lines whose product is gone are
   dropped from the cart and the checkout is rejected
3. price the cart from the current catalog price and unit cost
4. persist the sale; a failure here stops before any stock is touched
5. append one activity log entry
6. decrement stock per line, floored at zero

Steps 4-6 are separate commits issued in order. A failure in step 5 or 6
leaves the sale and any earlier decrements applied and is reported as
``SaleIncompleteError`` carrying the recorded sale id.
"""

import logging
import secrets
import time
from datetime import datetime
from decimal import Decimal

from liquorpos.core.errors import EmptyCartError, NotFoundError, PosError, SaleIncompleteError
from liquorpos.models.sales import PaymentMethod, Sale, SaleItem
from liquorpos.models.store import LogSeverity
from liquorpos.schemas.sales import SaleOut
from liquorpos.services.cart import Cart
from liquorpos.services.pricing import calculate_totals, line_total
from liquorpos.services.stores import ActivityLogStore, CatalogStore, SalesStore

logger = logging.getLogger(__name__)


def generate_sale_id() -> str:
    return f"{time.time_ns() // 1_000_000}{secrets.randbelow(1000):03d}"


def _reload_lines(cart: Cart, catalog: CatalogStore) -> None:
    missing = []
    for line in cart.lines:
        current = catalog.get(line.product_id)
        if current is None:
            missing.append(line.product.name)
            cart.remove(line.product_id)
        else:
            cart.refresh(current)
    if missing:
        raise NotFoundError(f"No longer in the catalog: {', '.join(missing)}")


def finalize_sale(
    cart: Cart,
    cashier,
    payment_method: PaymentMethod,
    tax_rate: Decimal,
    *,
    catalog: CatalogStore,
    sales: SalesStore,
    audit: ActivityLogStore,
    sold_at: datetime | None = None,
    id_factory=generate_sale_id,
) -> SaleOut:
    if cart.is_empty:
        raise EmptyCartError()

    _reload_lines(cart, catalog)
    lines = cart.lines
    totals = calculate_totals(lines, tax_rate)

    sale = Sale(
        id=id_factory(),
        sold_at=sold_at or datetime.utcnow(),
        cashier_id=cashier.id,
        cashier_name=cashier.name,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        payment_method=payment_method,
        items=[
            SaleItem(
                position=position,
                product_id=line.product.id,
                name=line.product.name,
                quantity=line.quantity,
                price=line.product.price,
                cost_price=line.product.cost_price,
                total=line_total(line.product.price, line.quantity),
            )
            for position, line in enumerate(lines)
        ],
    )
    recorded = sales.append(sale)
    logger.info("Sale %s recorded: total=%s cashier=%s", recorded.id, recorded.total, cashier.name)

    step = "activity log entry"
    try:
        audit.append(
            user_id=cashier.id,
            user_name=cashier.name,
            action="Sale Completed",
            details=f"Processed sale #{recorded.id} for K{recorded.total:,.2f} by {cashier.name}",
            severity=LogSeverity.SUCCESS,
        )
        for line in lines:
            step = f"stock decrement for product {line.product_id}"
            catalog.decrement_stock(line.product_id, line.quantity)
    except PosError as exc:
        logger.error("Sale %s incomplete: %s failed", recorded.id, step)
        raise SaleIncompleteError(recorded.id, step) from exc

    return recorded

