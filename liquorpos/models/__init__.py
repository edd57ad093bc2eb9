from liquorpos.models.catalog import Product, ProductCategory, Supplier
from liquorpos.models.sales import Expense, PaymentMethod, Sale, SaleItem
from liquorpos.models.store import ActivityLog, LogSeverity, StoreSettings
from liquorpos.models.user import User, UserRole

__all__ = [
    "ActivityLog",
    "Expense",
    "LogSeverity",
    "PaymentMethod",
    "Product",
    "ProductCategory",
    "Sale",
    "SaleItem",
    "StoreSettings",
    "Supplier",
    "User",
    "UserRole",
]
