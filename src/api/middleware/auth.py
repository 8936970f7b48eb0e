"""Header-based role check for write endpoints."""

ROLE_HEADER = "x-user-role"
ADMIN_ROLE = "admin"


def is_admin_role(role: str | None) -> bool:
    """Check whether a role header value grants write access.

    Only the exact literal ``admin`` is accepted; there is no token
    parsing and no session state.

    Args:
        role: Value of the ``x-user-role`` header, or None when absent.

    Returns:
        bool: True if the request may proceed.
    """
    return role == ADMIN_ROLE
