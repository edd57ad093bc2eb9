from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, status

from liquorpos.api.deps import get_activity_log, get_catalog, get_expenses, get_sales, require_permission
from liquorpos.core.config import settings
from liquorpos.core.errors import ExpenseValidationError, ValidationError
from liquorpos.models.sales import Expense
from liquorpos.models.user import User
from liquorpos.schemas.reports import DashboardOut, PeriodPreset, ProfitAndLossOut
from liquorpos.schemas.sales import ExpenseCreate, ExpenseOut
from liquorpos.services.reporting import build_profit_and_loss, custom_range, dashboard_summary, resolve_period
from liquorpos.services.stores import ActivityLogStore, CatalogStore, ExpenseStore, SalesStore

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/profit-and-loss", response_model=ProfitAndLossOut)
def profit_and_loss(
    period: PeriodPreset = "this_month",
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    _: User = Depends(require_permission("reports:view")),
    sales: SalesStore = Depends(get_sales),
    expenses: ExpenseStore = Depends(get_expenses),
    catalog: CatalogStore = Depends(get_catalog),
):
    if (date_from is None) != (date_to is None):
        raise ValidationError("date_from and date_to must be given together")
    if date_from is not None:
        date_range = custom_range(date_from, date_to)
        label = "custom"
    else:
        date_range = resolve_period(period, datetime.utcnow())
        label = period
    return build_profit_and_loss(
        sales.between(date_range.start, date_range.end),
        expenses.between(date_range.start, date_range.end),
        catalog.all(),
        date_range,
        period=label,
    )


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    _: User = Depends(require_permission("reports:view")),
    sales: SalesStore = Depends(get_sales),
    catalog: CatalogStore = Depends(get_catalog),
):
    return dashboard_summary(sales.recent(settings.recent_limit), catalog.all(), today=datetime.utcnow().date())


@router.get("/expenses", response_model=list[ExpenseOut])
def list_expenses(
    limit: int | None = Query(default=None, ge=1, le=5000),
    _: User = Depends(require_permission("reports:view")),
    expenses: ExpenseStore = Depends(get_expenses),
):
    return expenses.recent(limit or settings.recent_limit)


@router.post("/expenses", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    current_user: User = Depends(require_permission("expenses:manage")),
    expenses: ExpenseStore = Depends(get_expenses),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    description = payload.description.strip()
    if not description or payload.amount <= 0:
        raise ExpenseValidationError("Expense needs a description and a positive amount")

    expense = expenses.append(
        Expense(
            recorded_by_user_id=current_user.id,
            recorded_by=current_user.name,
            category=payload.category.strip(),
            description=description,
            amount=payload.amount,
            incurred_at=payload.incurred_at or datetime.utcnow(),
        )
    )
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="Expense Recorded",
        details=f"{expense.category}: K{expense.amount:,.2f} ({expense.description})",
    )
    return expense
