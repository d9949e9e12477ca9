"""Pydantic request/response schemas."""

from userhub.schemas.auth import (
    ChangeEmailRequest,
    ChangePasswordRequest,
    DeleteProfileRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    SignUpRequest,
)
from userhub.schemas.common import (
    DataResponse,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
)
from userhub.schemas.health import HealthResponse
from userhub.schemas.user import (
    ContactUsRequest,
    UpdateUserRequest,
    UserPublic,
    UserQuery,
)

__all__ = [
    "ChangeEmailRequest",
    "ChangePasswordRequest",
    "ContactUsRequest",
    "DataResponse",
    "DeleteProfileRequest",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PaginatedResponse",
    "ResetPasswordRequest",
    "SignUpRequest",
    "UpdateUserRequest",
    "UserPublic",
    "UserQuery",
]
