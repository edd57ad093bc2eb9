from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from liquorpos.api.deps import get_activity_log, get_current_user, require_permission
from liquorpos.core.security import access_token_ttl, create_access_token, hash_password
from liquorpos.db.database import get_db
from liquorpos.models.store import LogSeverity
from liquorpos.models.user import User
from liquorpos.schemas.auth import LoginRequest, TokenResponse
from liquorpos.schemas.user import UserCreate, UserOut
from liquorpos.services.identity import authenticate
from liquorpos.services.stores import ActivityLogStore

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_client_ip(request: Request) -> str | None:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def _issue_token(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, user.role.value, user.name),
        expires_in=int(access_token_ttl().total_seconds()),
        user=UserOut.model_validate(user),
    )


def _login(db: Session, audit: ActivityLogStore, username: str, password: str, request: Request) -> TokenResponse:
    user = authenticate(db, username, password, client_key=get_client_ip(request) or "unknown")
    audit.append(
        user_id=user.id,
        user_name=user.name,
        action="Login",
        details=f"{user.username} signed in",
    )
    return _issue_token(user)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    return _login(db, audit, payload.username, payload.password, request)


@router.post("/token", response_model=TokenResponse)
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    return _login(db, audit, form_data.username, form_data.password, request)


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/users", response_model=list[UserOut])
def list_users(
    _: User = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
):
    return list(db.scalars(select(User).order_by(User.created_at.asc(), User.id.asc())).all())


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    current_user: User = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    user = User(
        username=payload.username.strip().lower(),
        name=payload.name.strip(),
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists") from exc
    db.refresh(user)
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="User Added",
        details=f"Added {user.name} as {user.role.value}",
    )
    return user


@router.delete("/users/{user_id}", response_model=UserOut)
def delete_user(
    user_id: int,
    current_user: User = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
    audit: ActivityLogStore = Depends(get_activity_log),
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot remove your own account")
    result = UserOut.model_validate(user)
    db.delete(user)
    db.commit()
    audit.append(
        user_id=current_user.id,
        user_name=current_user.name,
        action="User Removed",
        details=f"Removed {result.name}",
        severity=LogSeverity.WARNING,
    )
    return result
