from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from liquorpos.api.deps import get_activity_log, get_catalog, get_suppliers, require_permission
from liquorpos.core.config import settings
from liquorpos.models.store import LogSeverity
from liquorpos.models.user import User
from liquorpos.schemas.catalog import (
    ExpiringItemOut,
    LowStockItemOut,
    ProductIn,
    ProductOut,
    SupplierCreate,
    SupplierOut,
)
from liquorpos.services.inventory import search_products, validate_product
from liquorpos.services.reporting import expiring_soon, low_stock
from liquorpos.services.stores import ActivityLogStore, CatalogStore, SupplierStore

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/products", response_model=list[ProductOut])
def list_products(
    q: str | None = Query(default=None, description="Name or barcode fragment"),
    category: str | None = None,
    _: User = Depends(require_permission("inventory:view")),
    catalog: CatalogStore = Depends(get_catalog),
):
    return search_products(catalog.all(), q, category)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    _: User = Depends(require_permission("inventory:view")),
    catalog: CatalogStore = Depends(get_catalog),
):
    product = catalog.get(product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductIn,
    current_user: User = Depends(require_permission("inventory:manage")),
    catalog: CatalogStore = Depends(get_catalog),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    validate_product(payload, today=datetime.utcnow().date())
    product = catalog.save(payload)
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="Product Added",
        details=f"Added {product.name} ({product.stock} in stock)",
    )
    return product


@router.put("/products/{product_id}", response_model=ProductOut)
def replace_product(
    product_id: int,
    payload: ProductIn,
    current_user: User = Depends(require_permission("inventory:manage")),
    catalog: CatalogStore = Depends(get_catalog),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    existing = catalog.get(product_id)
    if not existing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    validate_product(payload, today=datetime.utcnow().date(), existing=existing)
    product = catalog.save(payload, product_id=product_id)
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="Product Updated",
        details=f"Updated {product.name}",
    )
    return product


@router.delete("/products/{product_id}", response_model=ProductOut)
def delete_product(
    product_id: int,
    current_user: User = Depends(require_permission("inventory:manage")),
    catalog: CatalogStore = Depends(get_catalog),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    product = catalog.delete(product_id)
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="Product Deleted",
        details=f"Deleted {product.name}",
        severity=LogSeverity.DANGER,
    )
    return product


@router.get("/alerts/low-stock", response_model=list[LowStockItemOut])
def low_stock_alerts(
    _: User = Depends(require_permission("inventory:view")),
    catalog: CatalogStore = Depends(get_catalog),
):
    return low_stock(catalog.all())


@router.get("/alerts/expiring", response_model=list[ExpiringItemOut])
def expiring_alerts(
    within_days: int | None = Query(default=None, ge=0, le=3650),
    _: User = Depends(require_permission("inventory:view")),
    catalog: CatalogStore = Depends(get_catalog),
):
    window = settings.expiry_warning_days if within_days is None else within_days
    return expiring_soon(catalog.all(), today=datetime.utcnow().date(), within_days=window)


@router.get("/suppliers", response_model=list[SupplierOut])
def list_suppliers(
    _: User = Depends(require_permission("inventory:view")),
    suppliers: SupplierStore = Depends(get_suppliers),
):
    return suppliers.all()


@router.post("/suppliers", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: SupplierCreate,
    _: User = Depends(require_permission("inventory:manage")),
    suppliers: SupplierStore = Depends(get_suppliers),
):
    return suppliers.append(payload)
