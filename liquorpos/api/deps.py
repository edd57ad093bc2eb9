from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from liquorpos.core.permissions import has_permission
from liquorpos.core.security import decode_access_token
from liquorpos.db.database import get_db
from liquorpos.models.user import User
from liquorpos.services.cache import StoreCache
from liquorpos.services.cart import CartRegistry
from liquorpos.services.stores import (
    ActivityLogStore,
    CatalogStore,
    ExpenseStore,
    SalesStore,
    SettingsStore,
    SupplierStore,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    raw_token = (token or "").strip()
    if not raw_token:
        raw_token = (request.cookies.get("access_token") or "").strip()
    if not raw_token:
        raise credentials_exception

    try:
        user_id = decode_access_token(raw_token)
    except JWTError as exc:
        raise credentials_exception from exc

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise credentials_exception
    return user


def require_permission(permission: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {permission}",
            )
        return current_user

    return checker


def get_cache(request: Request) -> StoreCache:
    return request.app.state.cache


def get_carts(request: Request) -> CartRegistry:
    return request.app.state.carts


def get_catalog(db: Session = Depends(get_db), cache: StoreCache = Depends(get_cache)) -> CatalogStore:
    return CatalogStore(db, cache)


def get_settings_store(db: Session = Depends(get_db), cache: StoreCache = Depends(get_cache)) -> SettingsStore:
    return SettingsStore(db, cache)


def get_sales(db: Session = Depends(get_db)) -> SalesStore:
    return SalesStore(db)


def get_expenses(db: Session = Depends(get_db)) -> ExpenseStore:
    return ExpenseStore(db)


def get_activity_log(db: Session = Depends(get_db)) -> ActivityLogStore:
    return ActivityLogStore(db)


def get_suppliers(db: Session = Depends(get_db)) -> SupplierStore:
    return SupplierStore(db)
