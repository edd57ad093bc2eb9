from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from liquorpos.models.catalog import ProductCategory


class ProductIn(BaseModel):
    name: str = Field(min_length=2, max_length=160)
    category: ProductCategory
    price: Decimal
    cost_price: Decimal
    stock: int = 0
    barcode: str = Field(min_length=1, max_length=64)
    low_stock_threshold: int = 5
    expiry_date: date | None = None
    supplier_id: int | None = None
    image: str | None = Field(default=None, max_length=512)

    @field_validator("name", "barcode")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    @field_validator("expiry_date", mode="before")
    @classmethod
    def empty_expiry_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ProductOut(BaseModel):
    id: int
    name: str
    category: ProductCategory
    price: Decimal
    cost_price: Decimal
    stock: int
    barcode: str
    low_stock_threshold: int
    expiry_date: date | None = None
    supplier_id: int | None = None
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class LowStockItemOut(BaseModel):
    product_id: int
    name: str
    category: ProductCategory
    stock: int
    low_stock_threshold: int
    out_of_stock: bool


class ExpiringItemOut(BaseModel):
    product_id: int
    name: str
    expiry_date: date
    days_left: int
    expired: bool


class SupplierCreate(BaseModel):
    name: str = Field(min_length=2, max_length=160)
    contact_person: str | None = Field(default=None, max_length=120)
    phone: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=320)


class SupplierOut(BaseModel):
    id: int
    name: str
    contact_person: str | None
    phone: str | None
    email: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
