from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from liquorpos.models.sales import PaymentMethod


class SaleItemOut(BaseModel):
    product_id: int
    name: str
    quantity: int
    price: Decimal
    cost_price: Decimal | None
    total: Decimal

    model_config = {"from_attributes": True}


class SaleOut(BaseModel):
    id: str
    sold_at: datetime
    cashier_id: int | None
    cashier_name: str
    items: list[SaleItemOut]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: PaymentMethod

    model_config = {"from_attributes": True}


class TotalsOut(BaseModel):
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class CartLineOut(BaseModel):
    product_id: int
    name: str
    price: Decimal
    quantity: int
    stock: int
    line_total: Decimal


class CartOut(BaseModel):
    lines: list[CartLineOut]
    tax_rate: Decimal
    totals: TotalsOut


class CartAddRequest(BaseModel):
    product_id: int


class CartQuantityRequest(BaseModel):
    delta: int = Field(description="Signed change to apply, clamped to [1, stock]")


class CheckoutRequest(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CASH


class ExpenseCreate(BaseModel):
    category: str = Field(default="Utilities", min_length=2, max_length=120)
    description: str = Field(default="", max_length=255)
    amount: Decimal
    incurred_at: datetime | None = None

    @field_validator("incurred_at")
    @classmethod
    def store_as_naive_utc(cls, value: datetime | None) -> datetime | None:
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)


class ExpenseOut(BaseModel):
    id: int
    recorded_by_user_id: int | None
    recorded_by: str
    category: str
    description: str
    amount: Decimal
    incurred_at: datetime

    model_config = {"from_attributes": True}
