"""User endpoints: own profile, plus role-gated listing, lookup, edit and delete."""

from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query

from userhub.api.deps import CurrentUserDep, get_user_service, rate_limit, require_roles
from userhub.models.user import User, UserRole
from userhub.schemas.common import DataResponse, MessageResponse, PaginatedResponse
from userhub.schemas.user import UpdateUserRequest, UserOrderBy, UserPublic, UserQuery
from userhub.services.users import UserService

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AdminDep = Annotated[User, Depends(require_roles(UserRole.admin, UserRole.superadmin))]
SuperadminDep = Annotated[User, Depends(require_roles(UserRole.superadmin))]


@router.get(
    "",
    response_model=PaginatedResponse[UserPublic],
    dependencies=[Depends(rate_limit("users.list"))],
)
def list_users(
    _admin: AdminDep,
    service: UserServiceDep,
    email: Annotated[str | None, Query(description="Filter by email (case-insensitive)")] = None,
    role: Annotated[UserRole | None, Query(description="Filter by user role")] = None,
    date: Annotated[
        UserOrderBy | None, Query(description="Date field fromDate/toDate apply to")
    ] = None,
    from_date: Annotated[datetime | None, Query(alias="fromDate")] = None,
    to_date: Annotated[datetime | None, Query(alias="toDate")] = None,
    order: Annotated[Literal["asc", "desc"], Query()] = "desc",
    order_by: Annotated[UserOrderBy, Query(alias="orderBy")] = "createdAt",
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    page: Annotated[int, Query(ge=1)] = 1,
) -> PaginatedResponse[UserPublic]:
    """List users with filters and pagination (admin and superadmin only)."""
    query = UserQuery(
        email=email,
        role=role,
        date=date,
        from_date=from_date,
        to_date=to_date,
        order=order,
        order_by=order_by,
        limit=limit,
        page=page,
    )
    return service.list_users(query)


@router.get("/profile", response_model=UserPublic)
def get_profile(current_user: CurrentUserDep) -> UserPublic:
    """Profile of the authenticated user."""
    return UserPublic.model_validate(current_user)


@router.get(
    "/{user_id}",
    response_model=UserPublic,
    dependencies=[Depends(rate_limit("users.get"))],
)
def get_user(user_id: str, _admin: AdminDep, service: UserServiceDep) -> UserPublic:
    return UserPublic.model_validate(service.get_user(user_id))


@router.patch(
    "/{user_id}",
    response_model=DataResponse[UserPublic],
    dependencies=[Depends(rate_limit("users.update"))],
)
def update_user(
    user_id: str,
    body: UpdateUserRequest,
    admin: AdminDep,
    service: UserServiceDep,
) -> DataResponse[UserPublic]:
    """Edit a user. Role changes are applied only for a superadmin editing someone else."""
    return service.update_user(user_id, body, admin)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("users.delete"))],
)
def delete_user(user_id: str, superadmin: SuperadminDep, service: UserServiceDep) -> MessageResponse:
    """Delete a user immediately (superadmin only; never the caller's own account)."""
    return service.delete_user(superadmin, user_id)
