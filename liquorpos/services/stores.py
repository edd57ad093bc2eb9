"""Store collaborators over the SQLAlchemy session.

Every write is attempted once and committed on its own. Reads that fail
degrade to a cached or seeded value; writes that fail raise
``PersistenceError`` after rolling the session back.
"""

import logging
from datetime import datetime

from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from liquorpos.core.errors import ConflictError, DuplicateSaleError, NotFoundError, PersistenceError
from liquorpos.models.catalog import Product, Supplier
from liquorpos.models.sales import Expense, Sale
from liquorpos.models.store import SETTINGS_ROW_ID, ActivityLog, LogSeverity, StoreSettings
from liquorpos.schemas.catalog import ProductIn, ProductOut, SupplierCreate, SupplierOut
from liquorpos.schemas.sales import ExpenseOut, SaleOut
from liquorpos.schemas.store import ActivityLogOut, StoreSettingsOut, StoreSettingsUpdate
from liquorpos.services.cache import StoreCache
from liquorpos.services.seed import default_settings, seed_catalog_snapshot

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Write failed: %s", what)
        raise PersistenceError(f"Could not save {what}") from exc


class CatalogStore:
    def __init__(self, db: Session, cache: StoreCache) -> None:
        self.db = db
        self.cache = cache

    def all(self) -> list[ProductOut]:
        cached = self.cache.products
        if cached is not None:
            return cached
        try:
            rows = self.db.scalars(select(Product).order_by(Product.name.asc())).all()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Catalog read failed, serving seed catalog", exc_info=True)
            return seed_catalog_snapshot()
        products = [ProductOut.model_validate(row) for row in rows]
        self.cache.put_products(products)
        return products

    def get(self, product_id: int) -> ProductOut | None:
        product = self.db.get(Product, product_id)
        if product is None:
            return None
        self.db.refresh(product)
        return ProductOut.model_validate(product)

    def save(self, payload: ProductIn, product_id: int | None = None) -> ProductOut:
        if product_id is None:
            product = Product(**payload.model_dump())
            self.db.add(product)
        else:
            product = self.db.get(Product, product_id)
            if product is None:
                raise NotFoundError("Product not found")
            for field, value in payload.model_dump().items():
                setattr(product, field, value)
        try:
            _commit(self.db, "product")
        except IntegrityError as exc:
            raise ConflictError("Barcode already exists in catalog") from exc
        finally:
            self.cache.invalidate_products()
        self.db.refresh(product)
        return ProductOut.model_validate(product)

    def delete(self, product_id: int) -> ProductOut:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        result = ProductOut.model_validate(product)
        self.db.delete(product)
        try:
            _commit(self.db, "product deletion")
        finally:
            self.cache.invalidate_products()
        return result

    def decrement_stock(self, product_id: int, quantity: int) -> None:
        statement = (
            update(Product)
            .where(Product.id == product_id)
            .values(
                stock=case((Product.stock > quantity, Product.stock - quantity), else_=0),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.db.execute(statement)
            _commit(self.db, f"stock decrement for product {product_id}")
        except IntegrityError as exc:
            raise PersistenceError(f"Stock decrement rejected for product {product_id}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Stock decrement failed for product %s", product_id)
            raise PersistenceError(f"Could not decrement stock for product {product_id}") from exc
        finally:
            self.cache.invalidate_products()
        if result.rowcount == 0:
            logger.warning("Stock decrement skipped, product %s no longer exists", product_id)


class SalesStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def append(self, sale: Sale) -> SaleOut:
        if self.db.get(Sale, sale.id) is not None:
            raise DuplicateSaleError(sale.id)
        self.db.add(sale)
        try:
            _commit(self.db, f"sale {sale.id}")
        except IntegrityError as exc:
            raise DuplicateSaleError(sale.id) from exc
        self.db.refresh(sale)
        return SaleOut.model_validate(sale)

    def get(self, sale_id: str) -> SaleOut | None:
        sale = self.db.get(Sale, sale_id)
        return SaleOut.model_validate(sale) if sale else None

    def recent(self, limit: int) -> list[SaleOut]:
        return self._read(select(Sale).order_by(Sale.sold_at.desc()).limit(limit))

    def between(self, start: datetime, end: datetime) -> list[SaleOut]:
        return self._read(
            select(Sale).where(Sale.sold_at >= start, Sale.sold_at <= end).order_by(Sale.sold_at.desc())
        )

    def _read(self, query) -> list[SaleOut]:
        try:
            return [SaleOut.model_validate(row) for row in self.db.scalars(query).all()]
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Sales read failed, serving empty history", exc_info=True)
            return []


class ExpenseStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def append(self, expense: Expense) -> ExpenseOut:
        self.db.add(expense)
        _commit(self.db, "expense")
        self.db.refresh(expense)
        return ExpenseOut.model_validate(expense)

    def recent(self, limit: int) -> list[ExpenseOut]:
        return self._read(select(Expense).order_by(Expense.incurred_at.desc()).limit(limit))

    def between(self, start: datetime, end: datetime) -> list[ExpenseOut]:
        return self._read(
            select(Expense)
            .where(Expense.incurred_at >= start, Expense.incurred_at <= end)
            .order_by(Expense.incurred_at.desc())
        )

    def _read(self, query) -> list[ExpenseOut]:
        try:
            return [ExpenseOut.model_validate(row) for row in self.db.scalars(query).all()]
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Expense read failed, serving empty list", exc_info=True)
            return []


class SettingsStore:
    def __init__(self, db: Session, cache: StoreCache) -> None:
        self.db = db
        self.cache = cache

    def get(self) -> StoreSettingsOut:
        cached = self.cache.settings
        if cached is not None:
            return cached
        try:
            row = self.db.get(StoreSettings, SETTINGS_ROW_ID)
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Settings read failed, serving defaults", exc_info=True)
            return default_settings()
        if row is None:
            return default_settings()
        value = StoreSettingsOut.model_validate(row)
        self.cache.put_settings(value)
        return value

    def replace(self, payload: StoreSettingsUpdate) -> StoreSettingsOut:
        row = self.db.get(StoreSettings, SETTINGS_ROW_ID)
        if row is None:
            row = StoreSettings(id=SETTINGS_ROW_ID, **payload.model_dump())
            self.db.add(row)
        else:
            for field, value in payload.model_dump().items():
                setattr(row, field, value)
        try:
            _commit(self.db, "store settings")
        finally:
            self.cache.invalidate_settings()
        self.db.refresh(row)
        return StoreSettingsOut.model_validate(row)


class ActivityLogStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def append(
        self,
        *,
        user_id: int | None,
        user_name: str,
        action: str,
        details: str | None = None,
        severity: LogSeverity = LogSeverity.INFO,
    ) -> ActivityLogOut:
        entry = ActivityLog(user_id=user_id, user_name=user_name, action=action, details=details, severity=severity)
        self.db.add(entry)
        _commit(self.db, "activity log entry")
        self.db.refresh(entry)
        return ActivityLogOut.model_validate(entry)

    def recent(self, limit: int) -> list[ActivityLogOut]:
        try:
            rows = self.db.scalars(
                select(ActivityLog).order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit)
            ).all()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Activity log read failed", exc_info=True)
            return []
        return [ActivityLogOut.model_validate(row) for row in rows]


class SupplierStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def all(self) -> list[SupplierOut]:
        return [SupplierOut.model_validate(row) for row in self.db.scalars(select(Supplier).order_by(Supplier.name))]

    def append(self, payload: SupplierCreate) -> SupplierOut:
        supplier = Supplier(
            name=payload.name.strip(),
            contact_person=payload.contact_person,
            phone=payload.phone,
            email=payload.email,
        )
        self.db.add(supplier)
        try:
            _commit(self.db, "supplier")
        except IntegrityError as exc:
            raise ConflictError("Supplier name already exists") from exc
        self.db.refresh(supplier)
        return SupplierOut.model_validate(supplier)
