from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

PeriodPreset = Literal["this_month", "last_month", "last_30_days", "all_time"]


class DailyPointOut(BaseModel):
    day: date
    revenue: Decimal
    expenses: Decimal
    net: Decimal


class CategoryTotalOut(BaseModel):
    category: str
    amount: Decimal


class ProfitAndLossOut(BaseModel):
    period: str
    period_from: datetime
    period_to: datetime
    revenue: Decimal
    cogs: Decimal
    gross_profit: Decimal
    gross_margin: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    net_margin: Decimal
    sales_count: int
    expenses_by_category: list[CategoryTotalOut]
    daily: list[DailyPointOut]


class DashboardDayOut(BaseModel):
    day: date
    label: str
    total: Decimal


class DashboardOut(BaseModel):
    total_revenue: Decimal
    total_transactions: int
    low_stock_count: int
    out_of_stock_count: int
    last_7_days: list[DashboardDayOut]
