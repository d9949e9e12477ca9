"""Request/response schemas for user records and user management."""

import re
from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, EmailStr, Field
from pydantic_core import PydanticCustomError

from userhub.core.security import PASSWORD_ERROR_MESSAGE, PASSWORD_REGEX
from userhub.models.user import UserRole
from userhub.schemas.common import CamelModel

_PASSWORD_RE = re.compile(PASSWORD_REGEX)


def _check_password_policy(value: str) -> str:
    # Lookaheads are not supported by pydantic's pattern constraint, so match here.
    if not _PASSWORD_RE.match(value):
        raise PydanticCustomError("password_policy", PASSWORD_ERROR_MESSAGE)
    return value


Password = Annotated[str, AfterValidator(_check_password_policy)]

UserOrderBy = Literal["createdAt", "updatedAt"]


class UserPublic(CamelModel):
    """User as exposed over the API (no password hash)."""

    id: str
    email: str
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateUserRequest(CamelModel):
    """Admin edit of a user. Only a superadmin editing someone else may change role."""

    email: EmailStr | None = None
    password: Password | None = None
    role: UserRole | None = None


class UserQuery(CamelModel):
    """Filters, ordering and pagination for the user list."""

    email: str | None = Field(default=None, description="Case-insensitive substring")
    role: UserRole | None = None
    date: UserOrderBy | None = Field(
        default=None, description="Timestamp column that fromDate/toDate apply to"
    )
    from_date: datetime | None = None
    to_date: datetime | None = None
    order: Literal["asc", "desc"] = "desc"
    order_by: UserOrderBy = "createdAt"
    limit: int = Field(default=10, ge=1, le=100)
    page: int = Field(default=1, ge=1)


class ContactUsRequest(CamelModel):
    """Contact form submitted by a visitor."""

    email: EmailStr
    subject: str = Field(..., min_length=6, max_length=52)
    message: str = Field(..., min_length=6, max_length=2048)
