from datetime import datetime
from decimal import Decimal

import pytest

from liquorpos.core.errors import (
    DuplicateSaleError,
    EmptyCartError,
    NotFoundError,
    PersistenceError,
    SaleIncompleteError,
)
from liquorpos.models.catalog import Product
from liquorpos.models.sales import PaymentMethod, Sale
from liquorpos.models.store import ActivityLog
from liquorpos.services.cart import Cart
from liquorpos.services.checkout import finalize_sale, generate_sale_id

TAX = Decimal("16.5")


def _stock(db_session, product_id: int) -> int:
    product = db_session.get(Product, product_id)
    db_session.refresh(product)
    return product.stock


def _cart(catalog, *quantities: tuple[int, int]) -> Cart:
    cart = Cart()
    for product_id, quantity in quantities:
        product = catalog.get(product_id)
        for _ in range(quantity):
            cart.add(product)
    return cart


def test_empty_cart_persists_nothing(db_session, catalog, sales, audit, cashier):
    with pytest.raises(EmptyCartError):
        finalize_sale(Cart(), cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert db_session.query(Sale).count() == 0
    assert db_session.query(ActivityLog).count() == 0


def test_sale_records_items_and_decrements_stock(db_session, catalog, sales, audit, cashier, make_product):
    whisky = make_product(price=Decimal("45000"), cost_price=Decimal("35000"), stock=24)
    beer = make_product(price=Decimal("1500"), cost_price=Decimal("1000"), stock=150)
    cart = _cart(catalog, (whisky.id, 1), (beer.id, 4))

    sale = finalize_sale(
        cart, cashier, PaymentMethod.AIRTEL_MONEY, TAX, catalog=catalog, sales=sales, audit=audit
    )

    assert sale.subtotal == Decimal("51000.00")
    assert sale.tax == Decimal("8415.00")
    assert sale.total == Decimal("59415.00")
    assert sale.cashier_name == cashier.name
    assert sale.payment_method == PaymentMethod.AIRTEL_MONEY
    assert [(item.product_id, item.quantity) for item in sale.items] == [(whisky.id, 1), (beer.id, 4)]
    assert sale.items[1].cost_price == Decimal("1000.00")
    assert sale.items[1].total == Decimal("6000.00")

    assert _stock(db_session, whisky.id) == 23
    assert _stock(db_session, beer.id) == 146

    entry = db_session.query(ActivityLog).one()
    assert entry.action == "Sale Completed"
    assert sale.id in entry.details
    # cart clearing belongs to the caller
    assert not cart.is_empty


def test_stock_floors_at_zero(db_session, catalog, sales, audit, cashier, make_product):
    product = make_product(stock=3)
    cart = _cart(catalog, (product.id, 3))
    db_session.query(Product).filter_by(id=product.id).update({"stock": 1})
    db_session.commit()

    finalize_sale(cart, cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert _stock(db_session, product.id) == 0


def test_duplicate_sale_id_leaves_stock_untouched(db_session, catalog, sales, audit, cashier, make_product):
    product = make_product(stock=10)
    finalize_sale(
        _cart(catalog, (product.id, 2)),
        cashier,
        PaymentMethod.CASH,
        TAX,
        catalog=catalog,
        sales=sales,
        audit=audit,
        id_factory=lambda: "1700000000000001",
    )
    assert _stock(db_session, product.id) == 8

    with pytest.raises(DuplicateSaleError) as excinfo:
        finalize_sale(
            _cart(catalog, (product.id, 3)),
            cashier,
            PaymentMethod.CASH,
            TAX,
            catalog=catalog,
            sales=sales,
            audit=audit,
            id_factory=lambda: "1700000000000001",
        )

    assert excinfo.value.sale_id == "1700000000000001"
    assert _stock(db_session, product.id) == 8
    assert db_session.query(Sale).count() == 1
    assert db_session.query(ActivityLog).count() == 1


def test_failed_decrement_keeps_earlier_decrements(
    db_session, catalog, sales, audit, cashier, make_product, monkeypatch
):
    first = make_product(stock=10)
    second = make_product(stock=10)
    cart = _cart(catalog, (first.id, 2), (second.id, 2))
    real_decrement = catalog.decrement_stock

    def failing_decrement(product_id: int, quantity: int) -> None:
        if product_id == second.id:
            raise PersistenceError("stock store unavailable")
        real_decrement(product_id, quantity)

    monkeypatch.setattr(catalog, "decrement_stock", failing_decrement)

    with pytest.raises(SaleIncompleteError) as excinfo:
        finalize_sale(cart, cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert db_session.query(Sale).one().id == excinfo.value.sale_id
    assert isinstance(excinfo.value.__cause__, PersistenceError)
    assert _stock(db_session, first.id) == 8
    assert _stock(db_session, second.id) == 10


def test_failed_sale_write_touches_no_stock_or_log(
    db_session, catalog, sales, audit, cashier, make_product, monkeypatch
):
    product = make_product(stock=10)
    cart = _cart(catalog, (product.id, 3))

    def failing_append(sale: Sale):
        raise PersistenceError("sales store unavailable")

    monkeypatch.setattr(sales, "append", failing_append)

    with pytest.raises(PersistenceError) as excinfo:
        finalize_sale(cart, cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert not isinstance(excinfo.value, SaleIncompleteError)
    assert _stock(db_session, product.id) == 10
    assert db_session.query(Sale).count() == 0
    assert db_session.query(ActivityLog).count() == 0
    assert cart.quantity_of(product.id) == 3


def test_failed_log_write_reports_recorded_sale(
    db_session, catalog, sales, audit, cashier, make_product, monkeypatch
):
    product = make_product(stock=10)
    cart = _cart(catalog, (product.id, 2))

    def failing_log(**_kwargs):
        raise PersistenceError("log store unavailable")

    monkeypatch.setattr(audit, "append", failing_log)

    with pytest.raises(SaleIncompleteError) as excinfo:
        finalize_sale(cart, cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert excinfo.value.step == "activity log entry"
    assert db_session.query(Sale).one().id == excinfo.value.sale_id
    assert _stock(db_session, product.id) == 10


def test_sale_uses_catalog_price_at_checkout(db_session, catalog, sales, audit, cashier, make_product):
    product = make_product(price=Decimal("45000"), cost_price=Decimal("35000"), stock=24)
    cart = _cart(catalog, (product.id, 1))
    db_session.query(Product).filter_by(id=product.id).update(
        {"price": Decimal("50000"), "cost_price": Decimal("40000")}
    )
    db_session.commit()

    sale = finalize_sale(cart, cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert sale.items[0].price == Decimal("50000.00")
    assert sale.items[0].cost_price == Decimal("40000.00")
    assert sale.subtotal == Decimal("50000.00")
    assert sale.total == Decimal("58250.00")


def test_deleted_product_is_dropped_and_sale_rejected(
    db_session, catalog, sales, audit, cashier, make_product
):
    kept = make_product(stock=10)
    gone = make_product(name="Discontinued Gin", stock=10)
    gone_id = gone.id
    cart = _cart(catalog, (kept.id, 1), (gone_id, 2))
    catalog.delete(gone_id)

    with pytest.raises(NotFoundError, match="Discontinued Gin"):
        finalize_sale(cart, cashier, PaymentMethod.CASH, TAX, catalog=catalog, sales=sales, audit=audit)

    assert gone_id not in cart
    assert cart.quantity_of(kept.id) == 1
    assert db_session.query(Sale).count() == 0
    assert db_session.query(ActivityLog).count() == 0
    assert _stock(db_session, kept.id) == 10



def test_recorded_sale_reads_back_unchanged(catalog, sales, audit, cashier, make_product):
    product = make_product(price=Decimal("1234.56"), cost_price=Decimal("1000.01"), stock=5)
    sold_at = datetime(2026, 10, 1, 14, 30)

    sale = finalize_sale(
        _cart(catalog, (product.id, 3)),
        cashier,
        PaymentMethod.TNM_MPAMBA,
        TAX,
        catalog=catalog,
        sales=sales,
        audit=audit,
        sold_at=sold_at,
    )
    stored = sales.get(sale.id)

    assert stored == sale
    assert stored.subtotal == Decimal("3703.68")
    assert stored.tax == Decimal("611.11")
    assert stored.total == Decimal("4314.79")
    assert stored.sold_at == sold_at


def test_generated_sale_ids_are_numeric_and_distinct():
    ids = {generate_sale_id() for _ in range(50)}
    assert all(value.isdigit() for value in ids)
    assert len(ids) > 1
