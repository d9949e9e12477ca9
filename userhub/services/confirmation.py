"""
Account flows: login plus the token-gated confirmation flows.

Registration, password reset, email change and account deletion share one
shape. Phase 1 validates the request, signs the pending action into a token
and emails a link carrying it. Phase 2 verifies the token and applies the
mutation. Nothing is persisted between the phases, so any state the mutation
depends on (email still free, user still present) is re-checked in phase 2.
"""

import logging
from typing import TYPE_CHECKING

from userhub.core.errors import BadRequest, Conflict, Forbidden, NotFound
from userhub.core.security import check_password, create_access_token, hash_password
from userhub.models.user import User, UserRole
from userhub.repositories.users import UserStore
from userhub.schemas.auth import LoginResponse
from userhub.schemas.common import DataResponse, MessageResponse
from userhub.schemas.user import UserPublic
from userhub.services.mailer import Mailer
from userhub.services.tokens import (
    AccountDeletion,
    EmailChange,
    PasswordReset,
    Registration,
    confirmation_ttl,
    issue_pending_action,
    registration_ttl,
    verify_pending_action,
)
from userhub.services.users import UserService, authorize_deletion

if TYPE_CHECKING:
    from userhub.core.config import Settings

logger = logging.getLogger(__name__)


class AccountService:
    """Login and the initiate/confirm pairs behind the /auth endpoints."""

    def __init__(self, store: UserStore, mailer: Mailer, settings: "Settings") -> None:
        self.store = store
        self.mailer = mailer
        self.settings = settings
        self.users = UserService(store)

    def login(self, email: str, password: str) -> LoginResponse:
        """Raises NotFound for an unknown email and InvalidCredentials for a wrong password."""
        user = self.users.get_user_by_email(email)
        check_password(password, user.password_hash)
        token = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role,
            password_hash=user.password_hash,
            settings=self.settings,
        )
        logger.info("User logged in successfully: %s", user.email)
        return LoginResponse(access_token=token, user=UserPublic.model_validate(user))

    # Registration

    def initiate_registration(self, email: str, password: str) -> MessageResponse:
        logger.info("Initiating user registration for email: %s", email)
        if self.store.exists_by_email(email):
            logger.warning("User %s already exists", email)
            raise Conflict(f"User {email} already exists")

        action = Registration(email=email, password_hash=hash_password(password))
        token = issue_pending_action(action, registration_ttl(self.settings), self.settings)
        self.mailer.send_registration_link(email, token)

        logger.info("Confirmation link sent to %s", email)
        return MessageResponse(message=f"Confirmation link sent to your email {email}")

    def confirm_registration(self, token: str) -> DataResponse[UserPublic]:
        action = verify_pending_action(token, Registration, self.settings)
        if self.store.exists_by_email(action.email):
            logger.warning("User %s already exists", action.email)
            raise Conflict(f"User {action.email} already exists")

        user = self.store.create(
            email=action.email,
            password_hash=action.password_hash,
            role=UserRole.user,
        )
        logger.info("User registered successfully: %s", user.email)
        return DataResponse[UserPublic](
            message=f"User {user.email} registered successfully",
            data=UserPublic.model_validate(user),
        )

    # Password reset

    def forgot_password(self, email: str) -> MessageResponse:
        user = self.users.get_user_by_email(email)
        token = issue_pending_action(
            PasswordReset(user_id=user.id), confirmation_ttl(self.settings), self.settings
        )
        self.mailer.send_reset_password_link(user.email, token)

        logger.info("Password reset email sent to: %s", user.email)
        return MessageResponse(message=f"Password reset email sent on {user.email}")

    def reset_password(self, token: str, new_password: str, repeat_password: str) -> MessageResponse:
        if new_password != repeat_password:
            logger.warning("Password mismatch during reset")
            raise BadRequest("Password and repeat password does not match")

        action = verify_pending_action(token, PasswordReset, self.settings)
        user = self.users.get_user(action.user_id)
        self.store.update(user.id, password_hash=hash_password(new_password))

        logger.info("Password successfully reset for user ID: %s", user.id)
        return MessageResponse(message="Password has been successfully changed")

    # Email change

    def initiate_email_change(self, user_id: str, new_email: str, password: str) -> MessageResponse:
        user = self.users.get_user(user_id)
        if user.email == new_email:
            raise Conflict("New email must be different from current")
        if self.store.exists_by_email(new_email):
            raise Conflict(f"User {new_email} already exists")
        check_password(password, user.password_hash)

        token = issue_pending_action(
            EmailChange(user_id=user.id, new_email=new_email),
            confirmation_ttl(self.settings),
            self.settings,
        )
        self.mailer.send_change_email_link(new_email, token)

        logger.info("Email change link for user %s sent to %s", user.id, new_email)
        return MessageResponse(message=f"Confirmation link sent on {new_email}")

    def confirm_email_change(self, token: str) -> MessageResponse:
        action = verify_pending_action(token, EmailChange, self.settings)
        user = self.users.get_user(action.user_id)
        self.users.change_email(user, action.new_email)
        return MessageResponse(message="Email changed successfully")

    # Password change (no confirmation link)

    def change_password(self, user_id: str, old_password: str, new_password: str) -> MessageResponse:
        """Replace the hash, which also invalidates every access token issued before."""
        user = self.users.get_user(user_id)
        if old_password == new_password:
            raise Conflict("New password can not be the same as previous")
        check_password(old_password, user.password_hash)

        self.store.update(user.id, password_hash=hash_password(new_password))
        logger.info("Password changed for user ID: %s", user.id)
        return MessageResponse(message="Password changed successfully")

    # Account deletion

    def initiate_deletion(self, author: User, target_id: str) -> MessageResponse:
        target = self.users.get_user(target_id)
        authorize_deletion(author, target)

        token = issue_pending_action(
            AccountDeletion(user_id=target.id), confirmation_ttl(self.settings), self.settings
        )
        self.mailer.send_delete_profile_link(target.email, token)

        logger.info("Deletion link for user %s requested by %s", target.id, author.id)
        return MessageResponse(message=f"Confirmation link sent on {target.email}")

    def confirm_deletion(self, token: str) -> MessageResponse:
        action = verify_pending_action(token, AccountDeletion, self.settings)
        user = self.users.get_user(action.user_id)
        if user.role == UserRole.superadmin.value:
            raise Forbidden()
        email = user.email
        if not self.store.delete(user.id):
            raise NotFound(f"User with id {action.user_id} not found")

        logger.info("User %s deleted successfully", email)
        return MessageResponse(
            message=f"All user data {email} has been deleted successfully"
        )
