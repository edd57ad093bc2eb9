import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable

from liquorpos.core.errors import ValidationError
from liquorpos.schemas.catalog import ExpiringItemOut, LowStockItemOut, ProductOut
from liquorpos.schemas.reports import (
    CategoryTotalOut,
    DailyPointOut,
    DashboardDayOut,
    DashboardOut,
    ProfitAndLossOut,
)
from liquorpos.schemas.sales import ExpenseOut, SaleOut
from liquorpos.services.pricing import HUNDRED, money

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, value: datetime) -> bool:
        return self.start <= value <= self.end


def day_start(value: date) -> datetime:
    return datetime.combine(value, time.min)


def day_end(value: date) -> datetime:
    return datetime.combine(value, time.max)


def resolve_period(preset: str, now: datetime) -> DateRange:
    today = now.date()
    if preset == "this_month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return DateRange(day_start(today.replace(day=1)), day_end(today.replace(day=last_day)))
    if preset == "last_month":
        last_of_previous = today.replace(day=1) - timedelta(days=1)
        return DateRange(day_start(last_of_previous.replace(day=1)), day_end(last_of_previous))
    if preset == "last_30_days":
        return DateRange(day_start(today - timedelta(days=30)), day_end(today))
    if preset == "all_time":
        return DateRange(datetime.min, day_end(today))
    raise ValidationError(f"Unknown period: {preset}")


def custom_range(date_from: date, date_to: date) -> DateRange:
    if date_from > date_to:
        raise ValidationError("date_from must not be after date_to")
    return DateRange(day_start(date_from), day_end(date_to))


def margin(part: Decimal, revenue: Decimal) -> Decimal:
    if revenue == 0:
        return ZERO
    return money(part / revenue * HUNDRED)


def cost_of_goods(sales: Iterable[SaleOut], products: Iterable[ProductOut]) -> Decimal:
    """Captured unit costs win; the current cost price only fills gaps."""
    current_cost = {product.id: product.cost_price for product in products}
    cogs = ZERO
    for sale in sales:
        for item in sale.items:
            unit_cost = item.cost_price if item.cost_price is not None else current_cost.get(item.product_id, ZERO)
            cogs += unit_cost * item.quantity
    return money(cogs)


def daily_breakdown(sales: Iterable[SaleOut], expenses: Iterable[ExpenseOut]) -> list[DailyPointOut]:
    revenue: dict[date, Decimal] = defaultdict(lambda: ZERO)
    spent: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for sale in sales:
        revenue[sale.sold_at.date()] += sale.total
    for expense in expenses:
        spent[expense.incurred_at.date()] += expense.amount
    days = sorted(set(revenue) | set(spent))
    return [
        DailyPointOut(
            day=day,
            revenue=money(revenue[day]),
            expenses=money(spent[day]),
            net=money(revenue[day] - spent[day]),
        )
        for day in days
    ]


def build_profit_and_loss(
    sales: Iterable[SaleOut],
    expenses: Iterable[ExpenseOut],
    products: Iterable[ProductOut],
    date_range: DateRange,
    period: str = "custom",
) -> ProfitAndLossOut:
    in_range_sales = [sale for sale in sales if date_range.contains(sale.sold_at)]
    in_range_expenses = [expense for expense in expenses if date_range.contains(expense.incurred_at)]

    revenue = money(sum((sale.total for sale in in_range_sales), ZERO))
    cogs = cost_of_goods(in_range_sales, products)
    gross_profit = revenue - cogs
    total_expenses = money(sum((expense.amount for expense in in_range_expenses), ZERO))
    net_profit = gross_profit - total_expenses

    by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in in_range_expenses:
        by_category[expense.category] += expense.amount

    return ProfitAndLossOut(
        period=period,
        period_from=date_range.start,
        period_to=date_range.end,
        revenue=revenue,
        cogs=cogs,
        gross_profit=gross_profit,
        gross_margin=margin(gross_profit, revenue),
        total_expenses=total_expenses,
        net_profit=net_profit,
        net_margin=margin(net_profit, revenue),
        sales_count=len(in_range_sales),
        expenses_by_category=[
            CategoryTotalOut(category=category, amount=money(amount))
            for category, amount in sorted(by_category.items())
        ],
        daily=daily_breakdown(in_range_sales, in_range_expenses),
    )


def low_stock(products: Iterable[ProductOut]) -> list[LowStockItemOut]:
    flagged = [product for product in products if product.stock <= product.low_stock_threshold]
    flagged.sort(key=lambda product: (product.stock, product.name))
    return [
        LowStockItemOut(
            product_id=product.id,
            name=product.name,
            category=product.category,
            stock=product.stock,
            low_stock_threshold=product.low_stock_threshold,
            out_of_stock=product.stock == 0,
        )
        for product in flagged
    ]


def expiring_soon(products: Iterable[ProductOut], today: date, within_days: int) -> list[ExpiringItemOut]:
    horizon = today + timedelta(days=within_days)
    items = [
        ExpiringItemOut(
            product_id=product.id,
            name=product.name,
            expiry_date=product.expiry_date,
            days_left=(product.expiry_date - today).days,
            expired=product.expiry_date <= today,
        )
        for product in products
        if product.expiry_date is not None and product.expiry_date <= horizon
    ]
    items.sort(key=lambda item: item.expiry_date)
    return items


def dashboard_summary(sales: Iterable[SaleOut], products: Iterable[ProductOut], today: date) -> DashboardOut:
    sales = list(sales)
    products = list(products)
    week = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    per_day: dict[date, Decimal] = {day: ZERO for day in week}
    for sale in sales:
        day = sale.sold_at.date()
        if day in per_day:
            per_day[day] += sale.total
    return DashboardOut(
        total_revenue=money(sum((sale.total for sale in sales), ZERO)),
        total_transactions=len(sales),
        low_stock_count=sum(1 for product in products if product.stock <= product.low_stock_threshold),
        out_of_stock_count=sum(1 for product in products if product.stock == 0),
        last_7_days=[DashboardDayOut(day=day, label=day.strftime("%a"), total=money(per_day[day])) for day in week],
    )
