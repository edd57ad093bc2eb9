import threading

from liquorpos.schemas.catalog import ProductOut
from liquorpos.schemas.store import StoreSettingsOut


class StoreCache:
    """In-memory snapshots of the catalog and the settings record.

    One instance is created per application and handed to the stores. Any
    write through a store invalidates the snapshot it affects; reads fill it
    again on the next miss.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._products: list[ProductOut] | None = None
        self._settings: StoreSettingsOut | None = None

    @property
    def products(self) -> list[ProductOut] | None:
        with self._lock:
            return list(self._products) if self._products is not None else None

    def put_products(self, products: list[ProductOut]) -> None:
        with self._lock:
            self._products = list(products)

    def invalidate_products(self) -> None:
        with self._lock:
            self._products = None

    @property
    def settings(self) -> StoreSettingsOut | None:
        with self._lock:
            return self._settings

    def put_settings(self, value: StoreSettingsOut) -> None:
        with self._lock:
            self._settings = value

    def invalidate_settings(self) -> None:
        with self._lock:
            self._settings = None
