import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV.lower() == "production"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./school_portal.db")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# "opaque" keeps the legacy base64 userId:issuedAt token; "signed" wraps the same
# claims in an HS256 JWT keyed by TOKEN_SECRET.
TOKEN_FORMAT = os.getenv("TOKEN_FORMAT", "opaque").strip().lower()
TOKEN_SECRET = os.getenv("TOKEN_SECRET", "change-me")
TOKEN_ALGORITHM = "HS256"
TOKEN_MAX_AGE_HOURS = int(os.getenv("TOKEN_MAX_AGE_HOURS", "24"))

AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "token")
ROLE_COOKIE_NAME = os.getenv("ROLE_COOKIE_NAME", "userRole")
COOKIE_SECURE = _get_bool(os.getenv("COOKIE_SECURE"), default=IS_PRODUCTION)

ENTRY_PATH = os.getenv("ENTRY_PATH", "/")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:3000"])

def validate_runtime_config() -> None:
    if TOKEN_FORMAT not in {"opaque", "signed"}:
        raise RuntimeError(f"Unsupported TOKEN_FORMAT: {TOKEN_FORMAT!r}")
    if IS_PRODUCTION and TOKEN_FORMAT == "signed" and TOKEN_SECRET == "change-me":
        raise RuntimeError("TOKEN_SECRET must be set in production.")
