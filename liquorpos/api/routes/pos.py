from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status

from liquorpos.api.deps import (
    get_activity_log,
    get_carts,
    get_catalog,
    get_sales,
    get_settings_store,
    require_permission,
)
from liquorpos.core.errors import SaleIncompleteError
from liquorpos.models.user import User
from liquorpos.schemas.sales import (
    CartAddRequest,
    CartLineOut,
    CartOut,
    CartQuantityRequest,
    CheckoutRequest,
    SaleOut,
    TotalsOut,
)
from liquorpos.services.cart import Cart, CartRegistry
from liquorpos.services.checkout import finalize_sale
from liquorpos.services.pricing import calculate_totals, line_total
from liquorpos.services.stores import ActivityLogStore, CatalogStore, SalesStore, SettingsStore

router = APIRouter(prefix="/pos", tags=["Point of Sale"])


def _cart_out(cart: Cart, tax_rate: Decimal) -> CartOut:
    totals = calculate_totals(cart.lines, tax_rate)
    return CartOut(
        lines=[
            CartLineOut(
                product_id=line.product.id,
                name=line.product.name,
                price=line.product.price,
                quantity=line.quantity,
                stock=line.product.stock,
                line_total=line_total(line.product.price, line.quantity),
            )
            for line in cart.lines
        ],
        tax_rate=tax_rate,
        totals=TotalsOut(subtotal=totals.subtotal, tax=totals.tax, total=totals.total),
    )


@router.get("/cart", response_model=CartOut)
def get_cart(
    current_user: User = Depends(require_permission("pos:sell")),
    carts: CartRegistry = Depends(get_carts),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    return _cart_out(carts.for_user(current_user.id), store_settings.get().tax_rate)


@router.post("/cart/items", response_model=CartOut)
def add_to_cart(
    payload: CartAddRequest,
    current_user: User = Depends(require_permission("pos:sell")),
    carts: CartRegistry = Depends(get_carts),
    catalog: CatalogStore = Depends(get_catalog),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    product = catalog.get(payload.product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    cart = carts.for_user(current_user.id)
    cart.add(product)
    return _cart_out(cart, store_settings.get().tax_rate)


@router.patch("/cart/items/{product_id}", response_model=CartOut)
def change_quantity(
    product_id: int,
    payload: CartQuantityRequest,
    current_user: User = Depends(require_permission("pos:sell")),
    carts: CartRegistry = Depends(get_carts),
    catalog: CatalogStore = Depends(get_catalog),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    cart = carts.for_user(current_user.id)
    if product_id not in cart:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product is not in the cart")
    product = catalog.get(product_id)
    if product is None:
        cart.remove(product_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product no longer exists")
    cart.refresh(product)
    cart.set_quantity(product_id, payload.delta)
    return _cart_out(cart, store_settings.get().tax_rate)


@router.delete("/cart/items/{product_id}", response_model=CartOut)
def remove_from_cart(
    product_id: int,
    current_user: User = Depends(require_permission("pos:sell")),
    carts: CartRegistry = Depends(get_carts),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    cart = carts.for_user(current_user.id)
    cart.remove(product_id)
    return _cart_out(cart, store_settings.get().tax_rate)


@router.delete("/cart", response_model=CartOut)
def clear_cart(
    current_user: User = Depends(require_permission("pos:sell")),
    carts: CartRegistry = Depends(get_carts),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    cart = carts.for_user(current_user.id)
    cart.clear()
    return _cart_out(cart, store_settings.get().tax_rate)


@router.post("/checkout", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def checkout(
    payload: CheckoutRequest,
    current_user: User = Depends(require_permission("pos:sell")),
    carts: CartRegistry = Depends(get_carts),
    catalog: CatalogStore = Depends(get_catalog),
    sales: SalesStore = Depends(get_sales),
    audit: ActivityLogStore = Depends(get_activity_log),
    store_settings: SettingsStore = Depends(get_settings_store),
):
    cart = carts.for_user(current_user.id)
    try:
        sale = finalize_sale(
            cart,
            current_user,
            payload.payment_method,
            store_settings.get().tax_rate,
            catalog=catalog,
            sales=sales,
            audit=audit,
        )
    except SaleIncompleteError:
        cart.clear()
        raise
    cart.clear()
    return sale
