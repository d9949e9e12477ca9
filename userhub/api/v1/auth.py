"""Auth endpoints: login, and the initiate/confirm pairs of every account flow."""

from typing import Annotated

from fastapi import APIRouter, Depends

from userhub.api.deps import CurrentUserDep, get_account_service, rate_limit
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
from userhub.schemas.common import DataResponse, MessageResponse
from userhub.schemas.user import UserPublic
from userhub.services.confirmation import AccountService

router = APIRouter()

AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]

ONE_MINUTE = 60


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit("auth.login"))],
)
def login(body: LoginRequest, service: AccountServiceDep) -> LoginResponse:
    """
    Authenticate with email and password; returns an access token and the user.
    Include the token in the Authorization header as: Bearer <accessToken>
    """
    return service.login(body.email, body.password)


@router.post(
    "/sign-up",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.sign-up", limit=2, window_sec=ONE_MINUTE))],
)
def sign_up(body: SignUpRequest, service: AccountServiceDep) -> MessageResponse:
    """Start registration: email a confirmation link valid for one day."""
    return service.initiate_registration(body.email, body.password)


@router.post(
    "/sign-up/{token}",
    response_model=DataResponse[UserPublic],
    dependencies=[Depends(rate_limit("auth.sign-up.confirm"))],
)
def confirm_sign_up(token: str, service: AccountServiceDep) -> DataResponse[UserPublic]:
    """Create the account carried by a registration token."""
    return service.confirm_registration(token)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.forgot-password", limit=1, window_sec=ONE_MINUTE))],
)
def forgot_password(body: ForgotPasswordRequest, service: AccountServiceDep) -> MessageResponse:
    return service.forgot_password(body.email)


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.reset-password"))],
)
def reset_password(
    token: str,
    body: ResetPasswordRequest,
    service: AccountServiceDep,
) -> MessageResponse:
    return service.reset_password(token, body.new_password, body.repeat_password)


@router.post(
    "/change-email",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.change-email", limit=1, window_sec=ONE_MINUTE))],
)
def change_email(
    body: ChangeEmailRequest,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    """Send a confirmation link to the new address; requires the current password."""
    return service.initiate_email_change(current_user.id, body.new_email, body.password)


@router.post(
    "/change-email/{token}",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.change-email.confirm"))],
)
def confirm_change_email(
    token: str,
    _user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    return service.confirm_email_change(token)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.change-password"))],
)
def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    """Change the password directly; every access token issued before stops working."""
    return service.change_password(current_user.id, body.old_password, body.new_password)


@router.post(
    "/delete-profile",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.delete-profile", limit=1, window_sec=ONE_MINUTE))],
)
def delete_profile(
    body: DeleteProfileRequest,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    """
    Email a deletion link to the target account.

    Users may target themselves; a superadmin may target any other account.
    """
    return service.initiate_deletion(current_user, body.id or current_user.id)


@router.post(
    "/delete-profile/{token}",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth.delete-profile.confirm"))],
)
def confirm_delete_profile(
    token: str,
    _user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    return service.confirm_deletion(token)
