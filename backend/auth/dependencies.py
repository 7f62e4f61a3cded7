import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.core import config
from backend.models.user import ADMIN_ROLE, User

security = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials


def get_current_email(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    email = jwt_handler.get_email_from_token(_bearer_token(credentials))
    if email is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return email


def resolve_caller_email(
    credentials: HTTPAuthorizationCredentials | None,
    body_email: str | None,
) -> str | None:
    """Identify the caller according to AUTH_MODE.

    In "token" mode only the bearer token counts. In "email" mode the email
    field supplied by the client is trusted as-is, which lets any caller
    impersonate any user; it exists for compatibility with older clients.
    """
    if config.AUTH_MODE == "email":
        if body_email is None or not body_email.strip():
            return None
        return body_email.strip()
    return jwt_handler.get_email_from_token(_bearer_token(credentials))


def require_admin(
    db: Session,
    credentials: HTTPAuthorizationCredentials | None,
    body_email: str | None = None,
) -> User:
    email = resolve_caller_email(credentials, body_email)
    if email is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = db.query(User).filter(User.email == email).first()
    if user is None or user.role != ADMIN_ROLE:
        logger.info("Rejected catalog change for non-admin caller")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user
