"""User API routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status

from src.api.deps import AdminRequired, UserServiceDep
from src.api.validation import validate_user_create, validate_user_update
from src.schemas.common import Envelope
from src.schemas.user import UserEnvelope, UserListEnvelope

router = APIRouter(prefix="/users", tags=["users"])

UserPayload = Annotated[Any, Body(description="User fields as JSON")]


@router.post(
    "/addUser",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[AdminRequired],
    summary="Create user",
    responses={
        400: {"description": "Validation error"},
        403: {"description": "Access Denied"},
        409: {"description": "Email already in use"},
        503: {"description": "Database unavailable"},
    },
)
async def create_user(payload: UserPayload, service: UserServiceDep) -> UserEnvelope:
    """Create a new user.

    Requires ``x-user-role: admin``.

    Args:
        payload: Raw JSON body.
        service: User service.

    Returns:
        UserEnvelope: The created user with its assigned id.
    """
    data = validate_user_create(payload)
    user = await service.create_user(data)
    return UserEnvelope(
        status_code=status.HTTP_201_CREATED,
        message="User created successfully",
        data=user,
    )


@router.get(
    "/findAllUsers",
    response_model=UserListEnvelope,
    summary="Find users",
    description="Lists all users, or those whose name, email or profile name contains `search`.",
    responses={503: {"description": "Database unavailable"}},
)
async def find_users(
    service: UserServiceDep,
    search: Annotated[str | None, Query(description="Optional search text")] = None,
) -> UserListEnvelope:
    """List users with an optional case-insensitive search."""
    users = await service.find_users(search)
    return UserListEnvelope(
        status_code=status.HTTP_200_OK,
        message="Users retrieved successfully",
        data=users,
    )


@router.get(
    "/findUserById/{user_id}",
    response_model=UserEnvelope,
    summary="Get user by ID",
    responses={
        400: {"description": "Invalid ID format"},
        404: {"description": "User not found"},
        503: {"description": "Database unavailable"},
    },
)
async def get_user(user_id: str, service: UserServiceDep) -> UserEnvelope:
    """Get a single user by id."""
    user = await service.get_user(user_id)
    return UserEnvelope(
        status_code=status.HTTP_200_OK,
        message="User retrieved successfully",
        data=user,
    )


@router.put(
    "/updateUser/{user_id}",
    response_model=UserEnvelope,
    dependencies=[AdminRequired],
    summary="Update user by ID",
    responses={
        400: {"description": "Invalid ID format or validation error"},
        403: {"description": "Access Denied"},
        404: {"description": "User not found"},
        409: {"description": "Email already in use"},
        503: {"description": "Database unavailable"},
    },
)
async def update_user(user_id: str, payload: UserPayload, service: UserServiceDep) -> UserEnvelope:
    """Partially update a user.

    Requires ``x-user-role: admin``. Only the fields present in the body
    are changed.

    Args:
        user_id: The user's id.
        payload: Raw JSON body.
        service: User service.

    Returns:
        UserEnvelope: The updated user.
    """
    data = validate_user_update(payload)
    user = await service.update_user(user_id, data)
    return UserEnvelope(
        status_code=status.HTTP_200_OK,
        message="User updated successfully",
        data=user,
    )


@router.delete(
    "/deleteUser/{user_id}",
    response_model=Envelope,
    dependencies=[AdminRequired],
    summary="Delete user by ID",
    responses={
        400: {"description": "Invalid ID format"},
        403: {"description": "Access Denied"},
        404: {"description": "User not found"},
        503: {"description": "Database unavailable"},
    },
)
async def delete_user(user_id: str, service: UserServiceDep) -> Envelope:
    """Delete a user. Requires ``x-user-role: admin``."""
    await service.delete_user(user_id)
    return Envelope(status_code=status.HTTP_200_OK, message="User deleted successfully")
