from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from liquorpos.core.errors import (
    ConflictError,
    IdentityBackendError,
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    PosError,
    ProductValidationError,
    RateLimitedError,
    SaleIncompleteError,
    ValidationError,
)

# Most specific first; the first isinstance match wins.
STATUS_BY_ERROR: list[tuple[type[PosError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (IdentityBackendError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: PosError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_pos_error(_: Request, exc: PosError) -> JSONResponse:
    code = status_for(exc)
    body: dict = {"detail": str(exc)}
    if isinstance(exc, ProductValidationError):
        body["errors"] = exc.errors
    if isinstance(exc, SaleIncompleteError):
        body["sale_id"] = exc.sale_id
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PosError, _handle_pos_error)
