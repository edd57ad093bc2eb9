from datetime import date

from liquorpos.core.errors import ProductValidationError
from liquorpos.schemas.catalog import ProductIn, ProductOut


def validate_product(payload: ProductIn, today: date, existing: ProductOut | None = None) -> None:
    """Edit-time rules for catalog entries. Raises with a per-field message map."""
    errors: dict[str, str] = {}
    if payload.low_stock_threshold < 0:
        errors["low_stock_threshold"] = "Threshold cannot be negative"
    if payload.stock < 0:
        errors["stock"] = "Stock cannot be negative"
    if payload.cost_price < 0:
        errors["cost_price"] = "Cost price cannot be negative"
    if payload.price < 0:
        errors["price"] = "Selling price cannot be negative"
    elif payload.price <= payload.cost_price:
        errors["price"] = "Price must be greater than Cost Price"

    unchanged_expiry = existing is not None and existing.expiry_date == payload.expiry_date
    if payload.expiry_date is not None and not unchanged_expiry and payload.expiry_date <= today:
        errors["expiry_date"] = "Expiry date must be in the future"

    if errors:
        raise ProductValidationError(errors)


def search_products(products: list[ProductOut], query: str | None = None, category: str | None = None) -> list[ProductOut]:
    needle = (query or "").strip().lower()
    result = []
    for product in products:
        if needle and needle not in product.name.lower() and needle not in product.barcode:
            continue
        if category and category != "All" and product.category.value != category:
            continue
        result.append(product)
    return result
