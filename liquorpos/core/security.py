from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from liquorpos.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def access_token_ttl() -> timedelta:
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(user_id: int, role: str, name: str) -> str:
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "name": name,
        "type": ACCESS_TOKEN_TYPE,
        "iss": settings.issuer,
        "iat": issued_at,
        "exp": issued_at + access_token_ttl(),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> int:
    """Return the user id of a valid access token. Raises ``JWTError`` otherwise."""
    claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm], issuer=settings.issuer)
    subject = str(claims.get("sub", ""))
    if claims.get("type") != ACCESS_TOKEN_TYPE or not subject.isdigit():
        raise JWTError("Not an access token")
    return int(subject)
