from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from liquorpos.api.deps import get_sales, get_settings_store, require_permission
from liquorpos.core.config import settings
from liquorpos.models.user import User
from liquorpos.schemas.sales import SaleOut
from liquorpos.services.export import render_receipt
from liquorpos.services.stores import SalesStore, SettingsStore

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("", response_model=list[SaleOut])
def list_sales(
    limit: int | None = Query(default=None, ge=1, le=5000),
    _: User = Depends(require_permission("pos:sell")),
    sales: SalesStore = Depends(get_sales),
):
    return sales.recent(limit or settings.recent_limit)


@router.get("/{sale_id}", response_model=SaleOut)
def get_sale(
    sale_id: str,
    _: User = Depends(require_permission("pos:sell")),
    sales: SalesStore = Depends(get_sales),
):
    sale = sales.get(sale_id)
    if not sale:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return sale


@router.get("/{sale_id}/receipt")
def sale_receipt(
    sale_id: str,
    _: User = Depends(require_permission("pos:sell")),
    sales: SalesStore = Depends(get_sales),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    sale = sales.get(sale_id)
    if not sale:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return Response(content=render_receipt(sale, store_settings.get()), media_type="text/plain")
