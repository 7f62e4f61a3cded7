from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config


class MissingSecretError(RuntimeError):
    pass


def _secret() -> str:
    secret = config.JWT_SECRET_KEY
    if not secret or not secret.strip():
        raise MissingSecretError("JWT secret is not configured.")
    return secret


def is_configured() -> bool:
    return bool(config.JWT_SECRET_KEY and config.JWT_SECRET_KEY.strip())


def create_access_token(email: str, role: str | None = None, expires_minutes: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {"sub": email, "email": email, "iat": now, "exp": expire}
    if role:
        # Informational only; authorization always reads the stored role.
        payload["role"] = role
    return jwt.encode(payload, _secret(), algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        _secret(),
        algorithms=[config.JWT_ALGORITHM],
        leeway=config.JWT_LEEWAY_SECONDS,
        options={"require": ["exp"]},
    )


def get_email_from_token(token: str | None) -> str | None:
    if not token or not token.strip():
        return None
    try:
        payload = decode_access_token(token.strip())
    except (jwt.PyJWTError, MissingSecretError):
        return None

    email = payload.get("email") or payload.get("sub")
    if not isinstance(email, str) or not email.strip():
        return None
    return email
