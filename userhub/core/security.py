"""Password hashing and signed token issuance/verification."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from userhub.core.errors import InvalidCredentials, InvalidOrExpiredToken

if TYPE_CHECKING:
    from userhub.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Password policy: 6-32 chars with at least one letter and one digit.
PASSWORD_REGEX = r"^(?=(.*[a-zA-Z]))(?=(.*\d)).{6,32}$"
PASSWORD_ERROR_MESSAGE = (
    "Password must be at least 6 characters long but no more then 32, "
    "and contain at least one letter and one number."
)

# Number of trailing password-hash characters embedded in access tokens.
HASH_FRAGMENT_LEN = 10

ACCESS_TOKEN_KIND = "access"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; the password policy keeps us well below it.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def check_password(plain_password: str, hashed: str | None) -> None:
    """Raise InvalidCredentials unless plain_password matches hashed."""
    if not verify_password(plain_password, hashed):
        raise InvalidCredentials()


def password_fingerprint(password_hash: str | None) -> str:
    """Trailing slice of a password hash; changes whenever the password does."""
    return (password_hash or "")[-HASH_FRAGMENT_LEN:]


def fingerprint_matches(current_hash: str | None, token_fragment: str | None) -> bool:
    """
    True when a token's embedded fragment still matches the live password hash.

    Pure function: no store access. An empty fragment or hash never matches.
    """
    current = password_fingerprint(current_hash)
    fragment = (token_fragment or "")[-HASH_FRAGMENT_LEN:]
    if not current or not fragment:
        return False
    return current == fragment


def issue_token(claims: dict[str, Any], ttl: timedelta, settings: "Settings") -> str:
    """Sign claims into a JWT that expires ttl from now."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        **claims,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str, settings: "Settings") -> dict[str, Any]:
    """
    Decode and validate a JWT; return its claims.
    Raises InvalidOrExpiredToken on bad signature, malformed token or elapsed expiry.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError as e:
        raise InvalidOrExpiredToken() from e


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    password_hash: str,
    settings: "Settings",
) -> str:
    """Create a session access token embedding a fragment of the current password hash."""
    claims = {
        "kind": ACCESS_TOKEN_KIND,
        "sub": str(user_id),
        "email": email,
        "role": role,
        "hash": password_fingerprint(password_hash),
    }
    return issue_token(
        claims, timedelta(minutes=settings.JWT_EXPIRE_MINUTES), settings
    )


def decode_access_token(token: str, settings: "Settings") -> dict[str, Any]:
    """Verify an access token; raises InvalidOrExpiredToken for anything else."""
    payload = verify_token(token, settings)
    if payload.get("kind") != ACCESS_TOKEN_KIND:
        raise InvalidOrExpiredToken()
    return payload
