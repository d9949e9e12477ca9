"""Shared route dependencies: store, mailer, services, bearer auth, role gates and rate limits."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from userhub.core.config import Settings, get_settings
from userhub.core.database import get_db
from userhub.core.errors import Forbidden, InvalidOrExpiredToken, TooManyRequests, Unauthorized
from userhub.core.rate_limit import client_ip, limiter
from userhub.core.security import decode_access_token, fingerprint_matches
from userhub.models.user import User, UserRole
from userhub.repositories.users import SqlUserStore, UserStore
from userhub.services.confirmation import AccountService
from userhub.services.mailer import Mailer
from userhub.services.users import UserService

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return SqlUserStore(db)


def get_mailer(settings: SettingsDep) -> Mailer:
    return Mailer(settings)


def get_account_service(
    store: Annotated[UserStore, Depends(get_store)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
    settings: SettingsDep,
) -> AccountService:
    return AccountService(store, mailer, settings)


def get_user_service(store: Annotated[UserStore, Depends(get_store)]) -> UserService:
    return UserService(store)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Annotated[UserStore, Depends(get_store)],
    settings: SettingsDep,
) -> User:
    """
    Dependency: require a valid Bearer access token and return the live user.

    The token must still match the stored user: same email, and the password
    hash fragment embedded at login must equal the current hash's fragment, so
    changing the password or the email revokes every token issued before.
    Raises 401 otherwise.
    """
    if credentials is None:
        raise Unauthorized()
    try:
        payload = decode_access_token(credentials.credentials, settings)
    except InvalidOrExpiredToken as e:
        raise Unauthorized() from e

    email = payload.get("email")
    fragment = payload.get("hash")
    if not email or not fragment:
        raise Unauthorized()

    user = store.find_by_email(email)
    if user is None or user.email != email:
        raise Unauthorized()
    if not fingerprint_matches(user.password_hash, fragment):
        logger.info("Rejected stale access token for user %s", user.id)
        raise Unauthorized()
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable[[User], User]:
    """Dependency factory: allow only users whose role is in roles. Raises 403 otherwise."""
    allowed = {r.value for r in roles}

    def _require(current_user: CurrentUserDep) -> User:
        if current_user.role not in allowed:
            raise Forbidden()
        return current_user

    return _require


def rate_limit(
    name: str,
    limit: int | None = None,
    window_sec: int | None = None,
) -> Callable[[Request, Settings], None]:
    """
    Dependency factory: at most limit requests per window_sec per client IP on one route.

    Falls back to RATE_LIMIT_MAX_REQUESTS per RATE_LIMIT_WINDOW_SEC. Raises 429 when exceeded.
    """

    def _limit(request: Request, settings: SettingsDep) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        max_requests = limit or settings.RATE_LIMIT_MAX_REQUESTS
        window = window_sec or settings.RATE_LIMIT_WINDOW_SEC
        ip = client_ip(request)
        allowed, retry_after = limiter.hit(f"{name}:{ip}", max_requests, window)
        if not allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"route": name, "client_ip": ip, "retry_after": retry_after},
            )
            raise TooManyRequests()

    return _limit
