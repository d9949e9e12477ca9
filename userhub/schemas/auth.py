"""Request/response schemas for auth endpoints."""

from typing import Annotated

from pydantic import EmailStr, Field

from userhub.schemas.common import CamelModel
from userhub.schemas.user import Password, UserPublic

# Existing passwords are checked against the stored hash, not the sign-up policy.
CurrentPassword = Annotated[str, Field(min_length=1, max_length=128)]


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: EmailStr
    password: CurrentPassword


class LoginResponse(CamelModel):
    """Access token plus the public view of the logged-in user."""

    access_token: str = Field(..., description="JWT access token")
    user: UserPublic


class SignUpRequest(CamelModel):
    email: EmailStr
    password: Password


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    new_password: Password
    repeat_password: Password


class ChangeEmailRequest(CamelModel):
    new_email: EmailStr
    password: CurrentPassword


class ChangePasswordRequest(CamelModel):
    old_password: CurrentPassword
    new_password: Password


class DeleteProfileRequest(CamelModel):
    """Target of a deletion request; defaults to the caller when omitted."""

    id: str | None = Field(default=None, min_length=1, max_length=64)
