"""Registration and login.

Both operations report their outcome through :class:`ServiceResult` instead of
raising, so the HTTP layer only has to map a status onto a response code.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth import jwt_handler, passwords
from backend.models.user import USER_ROLE, User

logger = logging.getLogger(__name__)

SUCCESS = "Success"
CONFLICT = "Conflict"
ERROR = "Error"


@dataclass
class ServiceResult:
    status: str
    message: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    initials: str | None = None,
    role: str | None = None,
) -> ServiceResult:
    try:
        user = User(
            name=name,
            email=email,
            password=passwords.hash_password(password),
            initials=initials or "",
            role=role if role and role.strip() else USER_ROLE,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # The unique index on users.email is the only uniqueness check.
        db.rollback()
        logger.warning("Registration rejected for duplicate email")
        return ServiceResult(CONFLICT, "User already exists")
    except Exception:
        db.rollback()
        logger.exception("User registration failed")
        return ServiceResult(ERROR, "User creation failed! Please check user details and try again.")

    return ServiceResult(SUCCESS, "User created successfully!", user)


def login_user(db: Session, *, email: str, password: str) -> ServiceResult:
    try:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            logger.info("Login failed: unknown email")
            return ServiceResult(ERROR, "User not found")

        if not passwords.verify_password(password, user.password):
            logger.info("Login failed: wrong password for user %s", user.id)
            return ServiceResult(ERROR, "Wrong password")

        if not jwt_handler.is_configured():
            logger.error("Login attempted but JWT_SECRET is not configured")
            return ServiceResult(ERROR, "JWT secret is not configured.")

        token = jwt_handler.create_access_token(user.email, role=user.role)
    except Exception:
        logger.exception("Unexpected login failure")
        return ServiceResult(ERROR, "Login failed! Please check user details and try again.")

    return ServiceResult(
        SUCCESS,
        "Login successful!",
        {
            "token": token,
            "userId": user.id,
            "name": user.name,
            "email": user.email,
            "initials": user.initials or "",
            "role": user.role,
        },
    )
