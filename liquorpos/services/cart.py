import threading
from dataclasses import dataclass

from liquorpos.schemas.catalog import ProductOut


@dataclass
class CartLine:
    product: ProductOut
    quantity: int

    @property
    def product_id(self) -> int:
        return self.product.id


class Cart:
    """Selected products for one open order.

    Quantities stay within ``1 <= quantity <= product.stock``. Requests that
    would break the bounds are ignored (``add``) or clamped
    (``set_quantity``), never raised.
    """

    def __init__(self) -> None:
        self._lines: dict[int, CartLine] = {}

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: int) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def add(self, product: ProductOut) -> None:
        if product.stock <= 0:
            return
        line = self._lines.get(product.id)
        if line is None:
            self._lines[product.id] = CartLine(product=product, quantity=1)
            return
        line.product = product
        if line.quantity + 1 > product.stock:
            return
        line.quantity += 1

    def refresh(self, product: ProductOut) -> None:
        line = self._lines.get(product.id)
        if line is not None:
            line.product = product

    def set_quantity(self, product_id: int, delta: int) -> None:
        line = self._lines.get(product_id)
        if line is None:
            return
        # the lower bound wins when stock has dropped to zero under an open line
        line.quantity = max(1, min(line.quantity + delta, line.product.stock))

    def remove(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()


class CartRegistry:
    """Process-local carts keyed by user id. Lost on restart."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._carts: dict[int, Cart] = {}

    def for_user(self, user_id: int) -> Cart:
        with self._lock:
            cart = self._carts.get(user_id)
            if cart is None:
                cart = self._carts[user_id] = Cart()
            return cart

    def discard(self, user_id: int) -> None:
        with self._lock:
            self._carts.pop(user_id, None)
