"""User Store: persistence contract for user records and its SQLAlchemy implementation."""

import logging
import math
import uuid
from typing import Any, Protocol

from sqlalchemy import asc, desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userhub.core.errors import Conflict
from userhub.models.user import User, UserRole
from userhub.schemas.user import UserQuery

logger = logging.getLogger(__name__)

# Wire names of sortable/filterable timestamp columns -> ORM attributes.
_DATE_COLUMNS = {
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
}

# Columns a caller may change through update().
_UPDATABLE_FIELDS = frozenset({"email", "password_hash", "role"})


class UserStore(Protocol):
    """Persistence operations the account flows depend on. Any backend may implement it."""

    def find_by_id(self, user_id: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def exists_by_email(self, email: str) -> bool: ...

    def has_role(self, role: UserRole) -> bool: ...

    def create(self, email: str, password_hash: str, role: UserRole = UserRole.user) -> User: ...

    def update(self, user_id: str, **fields: Any) -> User | None: ...

    def delete(self, user_id: str) -> bool: ...

    def search(self, query: UserQuery) -> tuple[list[User], int]: ...


class SqlUserStore:
    """UserStore backed by a SQLAlchemy session (PostgreSQL or SQLite)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def exists_by_email(self, email: str) -> bool:
        return self.db.query(User.id).filter(User.email == email).first() is not None

    def has_role(self, role: UserRole) -> bool:
        return self.db.query(User.id).filter(User.role == role.value).first() is not None

    def create(self, email: str, password_hash: str, role: UserRole = UserRole.user) -> User:
        """Insert a user with a fresh UUID. Raises Conflict if the email is taken."""
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=password_hash,
            role=role.value,
        )
        self.db.add(user)
        self._commit(email)
        self.db.refresh(user)
        return user

    def update(self, user_id: str, **fields: Any) -> User | None:
        """
        Set the given columns on one user and commit.

        Returns the updated user, or None if no user has that id. Raises Conflict
        when a new email collides with the unique index.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")
        user = self.find_by_id(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            if isinstance(value, UserRole):
                value = value.value
            setattr(user, key, value)
        self._commit(fields.get("email", user.email))
        self.db.refresh(user)
        return user

    def delete(self, user_id: str) -> bool:
        deleted = (
            self.db.query(User)
            .filter(User.id == user_id)
            .delete()
        )
        self.db.commit()
        return deleted > 0

    def search(self, query: UserQuery) -> tuple[list[User], int]:
        """Return one page of users matching the filters, plus the total match count."""
        q = self.db.query(User)
        if query.email:
            q = q.filter(func.lower(User.email).contains(query.email.lower()))
        if query.role is not None:
            q = q.filter(User.role == query.role.value)
        if query.date and (query.from_date or query.to_date):
            column = _DATE_COLUMNS[query.date]
            if query.from_date:
                q = q.filter(column >= query.from_date)
            if query.to_date:
                q = q.filter(column <= query.to_date)

        total = q.count()
        order_column = _DATE_COLUMNS[query.order_by]
        direction = asc if query.order == "asc" else desc
        users = (
            q.order_by(direction(order_column), User.id)
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
            .all()
        )
        return users, total

    def _commit(self, email: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Unique constraint rejected email %s", email)
            raise Conflict(f"User {email} already exists") from e


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
