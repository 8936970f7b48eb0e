"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header

from src.api.middleware.auth import ROLE_HEADER, is_admin_role
from src.api.middleware.error_handler import AuthorizationError
from src.services.user_service import UserService


async def require_admin(
    x_user_role: Annotated[str | None, Header(alias=ROLE_HEADER, description="User role (must be admin)")] = None,
) -> None:
    """Reject the request unless the x-user-role header is ``admin``.

    Args:
        x_user_role: The x-user-role header value.

    Raises:
        AuthorizationError: 403 if the role is missing or not admin.
    """
    if not is_admin_role(x_user_role):
        raise AuthorizationError("Access Denied")


def get_user_service() -> UserService:
    """Build a UserService bound to the shared Supabase client."""
    return UserService()


# Type aliases for cleaner dependency injection
AdminRequired = Depends(require_admin)
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
