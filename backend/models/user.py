"""User model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base

ADMIN_ROLE = "Admin"
USER_ROLE = "User"
ROLES = (ADMIN_ROLE, USER_ROLE)


class User(Base):
    """Represents a registered shop user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    initials = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default=USER_ROLE)  # Admin/User
