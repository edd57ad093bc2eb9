from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from liquorpos.models.store import LogSeverity


class StoreSettingsOut(BaseModel):
    shop_name: str
    address_line1: str
    address_line2: str
    phone: str
    tin_number: str
    tax_rate: Decimal
    receipt_footer: str

    model_config = {"from_attributes": True}


class StoreSettingsUpdate(BaseModel):
    shop_name: str = Field(min_length=2, max_length=160)
    address_line1: str = Field(default="", max_length=255)
    address_line2: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=64)
    tin_number: str = Field(default="", max_length=64)
    tax_rate: Decimal = Field(ge=0, le=100)
    receipt_footer: str = Field(default="", max_length=255)


class ActivityLogOut(BaseModel):
    id: int
    user_id: int | None
    user_name: str
    action: str
    details: str | None
    severity: LogSeverity
    created_at: datetime

    model_config = {"from_attributes": True}
