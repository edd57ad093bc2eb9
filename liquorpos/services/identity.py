import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from liquorpos.core.config import settings
from liquorpos.core.errors import IdentityBackendError, InvalidCredentialsError, RateLimitedError
from liquorpos.core.security import verify_password
from liquorpos.models.user import User

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    def __init__(self, window_seconds: int | None = None, max_attempts: int | None = None) -> None:
        self.window_seconds = window_seconds or settings.login_rate_limit_window_seconds
        self.max_attempts = max_attempts or settings.login_rate_limit_max_attempts
        self._attempts: dict[str, list[datetime]] = defaultdict(list)

    def check(self, key: str) -> bool:
        now = datetime.now(timezone.utc)
        window_start = now - timedelta(seconds=self.window_seconds)
        self._attempts[key] = [dt for dt in self._attempts[key] if dt >= window_start]
        return len(self._attempts[key]) >= self.max_attempts

    def hit(self, key: str) -> None:
        self._attempts[key].append(datetime.now(timezone.utc))

    def clear(self, key: str) -> None:
        self._attempts.pop(key, None)

    def reset(self) -> None:
        self._attempts.clear()


login_rate_limiter = SlidingWindowLimiter()


def authenticate(
    db: Session,
    username: str,
    password: str,
    client_key: str,
    limiter: SlidingWindowLimiter = login_rate_limiter,
) -> User:
    """Resolve a credential pair to an active user.

    Raises ``RateLimitedError`` when the client exceeded the attempt window,
    ``InvalidCredentialsError`` for an unknown user or wrong password, and
    ``IdentityBackendError`` when the backend itself is unusable.
    """
    if not settings.secret_key:
        raise IdentityBackendError("Token signing key is not configured")

    rate_key = f"{client_key}:{username.lower()}"
    if limiter.check(rate_key):
        raise RateLimitedError("Too many login attempts, try again later")

    try:
        user = db.scalar(select(User).where(func.lower(User.username) == username.lower()))
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("User lookup failed")
        raise IdentityBackendError("Identity store unavailable") from exc

    if user is None or not user.is_active:
        limiter.hit(rate_key)
        raise InvalidCredentialsError("Incorrect credentials")

    try:
        valid = verify_password(password, user.password_hash)
    except ValueError as exc:
        logger.error("Unreadable password hash for user %s", user.id)
        raise IdentityBackendError("Stored credential is unreadable") from exc

    if not valid:
        limiter.hit(rate_key)
        raise InvalidCredentialsError("Incorrect credentials")

    limiter.clear(rate_key)
    return user
