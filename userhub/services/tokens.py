"""
Pending account actions carried inside signed confirmation tokens.

A pending action is never persisted: the token is the only record that a flow
is in flight. Each action kind is a frozen dataclass tagged by its KIND, and a
token is only ever parsed back into the kind the confirming endpoint expects.
"""

from dataclasses import asdict, dataclass, fields
from datetime import timedelta
from typing import TYPE_CHECKING, ClassVar, TypeVar, Union

from userhub.core.errors import InvalidOrExpiredToken
from userhub.core.security import issue_token, verify_token

if TYPE_CHECKING:
    from userhub.core.config import Settings

KIND_CLAIM = "kind"


@dataclass(frozen=True)
class Registration:
    """Sign-up awaiting email confirmation. Carries the hash, never the plain password."""

    KIND: ClassVar[str] = "registration"

    email: str
    password_hash: str


@dataclass(frozen=True)
class PasswordReset:
    KIND: ClassVar[str] = "password_reset"

    user_id: str


@dataclass(frozen=True)
class EmailChange:
    KIND: ClassVar[str] = "email_change"

    user_id: str
    new_email: str


@dataclass(frozen=True)
class AccountDeletion:
    KIND: ClassVar[str] = "account_deletion"

    user_id: str


PendingAction = Union[Registration, PasswordReset, EmailChange, AccountDeletion]

A = TypeVar("A", Registration, PasswordReset, EmailChange, AccountDeletion)


def registration_ttl(settings: "Settings") -> timedelta:
    return timedelta(minutes=settings.REGISTRATION_EXPIRE_MINUTES)


def confirmation_ttl(settings: "Settings") -> timedelta:
    return timedelta(minutes=settings.CONFIRMATION_EXPIRE_MINUTES)


def issue_pending_action(action: PendingAction, ttl: timedelta, settings: "Settings") -> str:
    """Sign a pending action into a token valid for ttl."""
    claims = {KIND_CLAIM: action.KIND, **asdict(action)}
    return issue_token(claims, ttl, settings)


def verify_pending_action(token: str, action_type: type[A], settings: "Settings") -> A:
    """
    Verify token and rebuild the pending action it carries.

    Raises InvalidOrExpiredToken on a bad or expired token, on a token issued
    for a different action kind, or when a field is missing or not a string.
    """
    claims = verify_token(token, settings)
    if claims.get(KIND_CLAIM) != action_type.KIND:
        raise InvalidOrExpiredToken()
    values: dict[str, str] = {}
    for field in fields(action_type):
        value = claims.get(field.name)
        if not isinstance(value, str) or not value:
            raise InvalidOrExpiredToken()
        values[field.name] = value
    return action_type(**values)
