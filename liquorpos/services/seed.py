import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from liquorpos.core.config import settings
from liquorpos.core.security import hash_password
from liquorpos.models.catalog import Product, ProductCategory
from liquorpos.models.store import SETTINGS_ROW_ID, StoreSettings
from liquorpos.models.user import User, UserRole
from liquorpos.schemas.catalog import ProductOut
from liquorpos.schemas.store import StoreSettingsOut

logger = logging.getLogger(__name__)

SEED_PRODUCTS: list[dict] = [
    {"name": "Jack Daniels 750ml", "category": ProductCategory.SPIRITS, "price": "45000", "cost_price": "35000", "stock": 24, "barcode": "1001", "low_stock_threshold": 5},
    {"name": "Smirnoff Vodka 750ml", "category": ProductCategory.SPIRITS, "price": "18000", "cost_price": "12000", "stock": 12, "barcode": "1002", "low_stock_threshold": 5},
    {"name": "Carlsberg Green", "category": ProductCategory.BEER, "price": "1500", "cost_price": "1000", "stock": 150, "barcode": "1003", "low_stock_threshold": 48},
    {"name": "Castel Beer", "category": ProductCategory.BEER, "price": "1400", "cost_price": "950", "stock": 200, "barcode": "1004", "low_stock_threshold": 48},
    {"name": "Red Sweet Wine", "category": ProductCategory.WINES, "price": "8500", "cost_price": "6000", "stock": 30, "barcode": "1005", "low_stock_threshold": 6},
    {"name": "Coca Cola 300ml", "category": ProductCategory.SOFT_DRINKS, "price": "600", "cost_price": "400", "stock": 100, "barcode": "1006", "low_stock_threshold": 24},
    {"name": "Marlboro Gold", "category": ProductCategory.CIGARETTES, "price": "5000", "cost_price": "3500", "stock": 50, "barcode": "1007", "low_stock_threshold": 10},
]

SEED_USERS: list[dict] = [
    {"username": "admin", "name": "Admin User", "role": UserRole.ADMIN},
    {"username": "manager", "name": "Jane Manager", "role": UserRole.MANAGER},
    {"username": "cashier", "name": "John Cashier", "role": UserRole.CASHIER},
]
SEED_PASSWORD = "password"


def default_settings() -> StoreSettingsOut:
    return StoreSettingsOut(
        shop_name="Kante Liquor",
        address_line1="Plot 123, Area 10",
        address_line2="Lilongwe, Malawi",
        phone="+265 999 123 456",
        tin_number="12345678",
        tax_rate=settings.default_tax_rate,
        receipt_footer="No Returns on Alcohol",
    )


def seed_catalog_snapshot() -> list[ProductOut]:
    return [
        ProductOut(
            id=index,
            name=row["name"],
            category=row["category"],
            price=Decimal(row["price"]),
            cost_price=Decimal(row["cost_price"]),
            stock=row["stock"],
            barcode=row["barcode"],
            low_stock_threshold=row["low_stock_threshold"],
        )
        for index, row in enumerate(SEED_PRODUCTS, start=1)
    ]


def seed_database(db: Session) -> None:
    if not db.scalar(select(func.count(Product.id))):
        for row in SEED_PRODUCTS:
            db.add(
                Product(
                    name=row["name"],
                    category=row["category"],
                    price=Decimal(row["price"]),
                    cost_price=Decimal(row["cost_price"]),
                    stock=row["stock"],
                    barcode=row["barcode"],
                    low_stock_threshold=row["low_stock_threshold"],
                )
            )
        logger.info("Seeded %d catalog products", len(SEED_PRODUCTS))

    if not db.scalar(select(func.count(User.id))):
        password_hash = hash_password(SEED_PASSWORD)
        for row in SEED_USERS:
            db.add(User(username=row["username"], name=row["name"], role=row["role"], password_hash=password_hash))
        logger.info("Seeded %d default users", len(SEED_USERS))

    if db.get(StoreSettings, SETTINGS_ROW_ID) is None:
        db.add(StoreSettings(id=SETTINGS_ROW_ID, **default_settings().model_dump()))

    db.commit()
