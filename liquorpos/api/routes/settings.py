from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from liquorpos.api.deps import (
    get_activity_log,
    get_catalog,
    get_current_user,
    get_sales,
    get_settings_store,
    require_permission,
)
from liquorpos.core.config import settings
from liquorpos.models.user import User
from liquorpos.schemas.store import ActivityLogOut, StoreSettingsOut, StoreSettingsUpdate
from liquorpos.services.export import records_to_csv
from liquorpos.services.stores import ActivityLogStore, CatalogStore, SalesStore, SettingsStore

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=StoreSettingsOut)
def get_store_settings(
    _: User = Depends(get_current_user),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    return store_settings.get()


@router.put("", response_model=StoreSettingsOut)
def replace_store_settings(
    payload: StoreSettingsUpdate,
    current_user: User = Depends(require_permission("settings:manage")),
    store_settings: SettingsStore = Depends(get_settings_store),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    previous = store_settings.get()
    updated = store_settings.replace(payload)
    details = "Store details updated"
    if previous.tax_rate != updated.tax_rate:
        details = f"Tax rate changed from {previous.tax_rate}% to {updated.tax_rate}%"
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="Settings Updated",
        details=details,
    )
    return updated


@router.get("/activity-logs", response_model=list[ActivityLogOut])
def list_activity_logs(
    limit: int = Query(default=50, ge=1, le=1000),
    _: User = Depends(require_permission("logs:view")),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    return audit.recent(limit)


@router.get("/export/{kind}")
def export_data(
    kind: Literal["sales", "inventory"],
    _: User = Depends(require_permission("data:export")),
    sales: SalesStore = Depends(get_sales),
    catalog: CatalogStore = Depends(get_catalog),
):
    if kind == "sales":
        records = [sale.model_dump() for sale in sales.recent(settings.recent_limit)]
        filename = f"sales_report_{datetime.utcnow().date().isoformat()}.csv"
    else:
        records = [product.model_dump() for product in catalog.all()]
        filename = f"inventory_export_{datetime.utcnow().date().isoformat()}.csv"
    if not records:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No data to export")
    return Response(
        content=records_to_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
