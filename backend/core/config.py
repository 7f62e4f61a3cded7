import os

from dotenv import load_dotenv


load_dotenv()


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None or not value.strip():
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bookshop.db")

JWT_SECRET_KEY = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(24 * 60)))
JWT_LEEWAY_SECONDS = 60

# "token" resolves the caller from the bearer token, "email" trusts the email
# field sent in the request body.
AUTH_MODE = os.getenv("AUTH_MODE", "token").strip().lower()

STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "usd")

FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "")

UPLOADS_DIR = os.getenv("UPLOADS_DIR", "uploads")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["*"])


def validate_runtime_config() -> None:
    if AUTH_MODE not in {"token", "email"}:
        raise RuntimeError("AUTH_MODE must be 'token' or 'email'.")
    if APP_ENV.lower() == "production" and not JWT_SECRET_KEY.strip():
        raise RuntimeError("JWT_SECRET must be set in production.")
