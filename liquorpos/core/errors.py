"""Domain error taxonomy.

Services raise these; the route modules translate them into HTTP responses.
"""


class PosError(Exception):
    pass


class ValidationError(PosError):
    """Rejected input. Raised before any persistence attempt."""


class EmptyCartError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Cart is empty")


class ProductValidationError(ValidationError):
    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


class ExpenseValidationError(ValidationError):
    pass


class NotFoundError(PosError):
    pass


class PersistenceError(PosError):
    """The store rejected or failed a write."""


class ConflictError(PersistenceError):
    """A uniqueness constraint rejected the write."""


class DuplicateSaleError(ConflictError):
    def __init__(self, sale_id: str) -> None:
        self.sale_id = sale_id
        super().__init__(f"Sale id collision: {sale_id}")


class SaleIncompleteError(PersistenceError):
    """The sale was recorded but a later checkout step failed."""

    def __init__(self, sale_id: str, step: str) -> None:
        self.sale_id = sale_id
        self.step = step
        super().__init__(f"Sale {sale_id} was recorded but {step} failed")


class AuthenticationError(PosError):
    pass


class InvalidCredentialsError(AuthenticationError):
    pass


class RateLimitedError(AuthenticationError):
    pass


class IdentityBackendError(AuthenticationError):
    pass
