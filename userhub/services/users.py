"""User management: lookups, admin edits, deletion rules and superadmin seeding."""

import logging
from typing import TYPE_CHECKING

from userhub.core.errors import Conflict, Forbidden, NotFound
from userhub.core.security import hash_password
from userhub.models.user import User, UserRole
from userhub.repositories.users import UserStore, total_pages
from userhub.schemas.common import DataResponse, MessageResponse, PaginatedResponse
from userhub.schemas.user import UpdateUserRequest, UserPublic, UserQuery

if TYPE_CHECKING:
    from userhub.core.config import Settings

logger = logging.getLogger(__name__)


def authorize_deletion(author: User, target: User) -> None:
    """
    Raise Forbidden unless author may delete target.

    A user may delete themselves; a superadmin may delete any account that
    is not a superadmin. Superadmin accounts, including the author's own,
    can never be deleted.
    """
    if target.role == UserRole.superadmin.value:
        raise Forbidden()
    is_superadmin = author.role == UserRole.superadmin.value
    if not is_superadmin and author.id != target.id:
        raise Forbidden()


class UserService:
    """Operations behind the /users endpoints."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    def get_user(self, user_id: str) -> User:
        user = self.store.find_by_id(user_id)
        if user is None:
            logger.warning("User with ID %s not found", user_id)
            raise NotFound(f"User with id {user_id} not found")
        return user

    def get_user_by_email(self, email: str) -> User:
        user = self.store.find_by_email(email)
        if user is None:
            logger.warning("User with email %s not found", email)
            raise NotFound(f"User with email {email} does not exists")
        return user

    def list_users(self, query: UserQuery) -> PaginatedResponse[UserPublic]:
        users, total = self.store.search(query)
        return PaginatedResponse[UserPublic](
            total=total,
            total_pages=total_pages(total, query.limit),
            limit_per_page=query.limit,
            current_page=query.page,
            data=[UserPublic.model_validate(u) for u in users],
        )

    def change_email(self, user: User, new_email: str) -> User:
        """Apply an email change after re-checking it is different and still free."""
        if user.email == new_email:
            raise Conflict("New email must be different from current")
        if self.store.exists_by_email(new_email):
            raise Conflict(f"User {new_email} already exists")
        updated = self.store.update(user.id, email=new_email)
        if updated is None:
            raise NotFound(f"User with id {user.id} not found")
        logger.info("User %s changed email to %s", user.id, new_email)
        return updated

    def update_user(
        self,
        user_id: str,
        body: UpdateUserRequest,
        requester: User,
    ) -> DataResponse[UserPublic]:
        """
        Admin edit of a user.

        An email in the body is applied on its own and returned immediately.
        Otherwise role is honoured only for a superadmin editing someone else,
        and a new password is hashed before storage.
        Only a superadmin may edit a superadmin account.
        """
        target = self.get_user(user_id)
        if (
            target.role == UserRole.superadmin.value
            and requester.role != UserRole.superadmin.value
        ):
            logger.warning("User %s attempted to edit superadmin %s", requester.id, target.id)
            raise Forbidden()
        message = f"User {target.email} updated successfully"

        if body.email:
            updated = self.change_email(target, body.email)
            return DataResponse[UserPublic](
                message=message, data=UserPublic.model_validate(updated)
            )

        changes: dict[str, object] = {}
        may_change_role = (
            requester.role == UserRole.superadmin.value and requester.id != target.id
        )
        if body.role is not None and may_change_role:
            changes["role"] = body.role
        if body.password is not None:
            changes["password_hash"] = hash_password(body.password)

        updated = self.store.update(target.id, **changes) if changes else target
        if updated is None:
            raise NotFound(f"User with id {user_id} not found")
        logger.info(
            "User updated",
            extra={"user_id": target.id, "by": requester.id, "fields": sorted(changes)},
        )
        return DataResponse[UserPublic](message=message, data=UserPublic.model_validate(updated))

    def delete_user(self, requester: User, user_id: str) -> MessageResponse:
        """Delete a user immediately, under the same author/target rules as self-service deletion."""
        target = self.get_user(user_id)
        authorize_deletion(requester, target)
        email = target.email
        logger.info("Deleting user with ID: %s", target.id)
        if not self.store.delete(target.id):
            raise NotFound(f"User with id {user_id} not found")
        logger.info("User %s deleted successfully", email)
        return MessageResponse(
            message=f"All user data {email} has been deleted successfully"
        )


def ensure_superadmin(store: UserStore, settings: "Settings") -> User | None:
    """
    Create the configured superadmin if no superadmin exists yet.

    Returns the created user, or None when seeding is not configured or not needed.
    Idempotent: safe to run on every startup.
    """
    if not settings.SUPERADMIN_EMAIL or settings.SUPERADMIN_PASSWORD is None:
        return None
    if store.has_role(UserRole.superadmin):
        logger.info("Superadmin already exists; skipping seed.")
        return None
    if store.exists_by_email(settings.SUPERADMIN_EMAIL):
        logger.warning(
            "Cannot seed superadmin: %s is already registered with another role",
            settings.SUPERADMIN_EMAIL,
        )
        return None
    user = store.create(
        email=settings.SUPERADMIN_EMAIL,
        password_hash=hash_password(settings.SUPERADMIN_PASSWORD.get_secret_value()),
        role=UserRole.superadmin,
    )
    logger.info("Superadmin %s created", user.email)
    return user
