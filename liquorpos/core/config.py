import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name)
    try:
        return Decimal(raw) if raw is not None else Decimal(default)
    except InvalidOperation:
        return Decimal(default)


@dataclass(frozen=True)
class Settings:
    app_name: str
    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    login_rate_limit_window_seconds: int
    login_rate_limit_max_attempts: int
    issuer: str
    cors_origins: tuple[str, ...]
    database_url: str
    default_tax_rate: Decimal
    recent_limit: int
    expiry_warning_days: int
    seed_on_startup: bool
    log_level: str


settings = Settings(
    app_name=os.getenv("APP_NAME", "Kante Liquor POS API"),
    secret_key=os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_32_CHAR_MIN_SECRET_KEY"),
    algorithm=os.getenv("ALGORITHM", "HS256"),
    access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 480, min_value=1),
    login_rate_limit_window_seconds=_env_int("LOGIN_RATE_LIMIT_WINDOW_SECONDS", 60, min_value=1),
    login_rate_limit_max_attempts=_env_int("LOGIN_RATE_LIMIT_MAX_ATTEMPTS", 10, min_value=1),
    issuer=os.getenv("TOKEN_ISSUER", "liquorpos-api"),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./liquorpos.db"),
    default_tax_rate=_env_decimal("DEFAULT_TAX_RATE", "16.5"),
    recent_limit=_env_int("RECENT_LIMIT", 500, min_value=1),
    expiry_warning_days=_env_int("EXPIRY_WARNING_DAYS", 30, min_value=0),
    seed_on_startup=_env_bool("SEED_ON_STARTUP", True),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
)
