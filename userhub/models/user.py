"""ORM model for user accounts (auth and RBAC)."""

import enum
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, func

from userhub.models.base import Base


class UserRole(str, enum.Enum):
    """Closed set of account roles."""

    user = "user"
    admin = "admin"
    superadmin = "superadmin"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    id is an opaque UUID string assigned at creation. email is unique at the
    storage level, which also closes the check-then-write race on email changes.
    password_hash always holds a bcrypt hash, never the plain password.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.user.value)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )
