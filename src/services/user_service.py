"""User persistence service.

All reads and writes go straight to the users table; there is no local
caching. Business errors (bad id, missing user, duplicate email) pass through
unchanged, while any other store failure is logged and surfaced as
``ServiceUnavailableError``.
"""

import logging
import re
from typing import Any, NoReturn

from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client

from src.api.middleware.error_handler import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
)
from src.core.config import get_settings
from src.core.supabase import get_supabase_client
from src.models.user import UserChanges, UserRecord
from src.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

SEARCH_FIELDS = ("name", "email", "profile->>profileName")

# Only the canonical 8-4-4-4-12 spelling is accepted as a user id
UUID_PATTERN = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

_PASSTHROUGH_ERRORS = (BadRequestError, NotFoundError, ConflictError, ServiceUnavailableError)


def _ilike_contains(term: str) -> str:
    """Build a quoted PostgREST ilike value matching ``term`` anywhere.

    LIKE wildcards (``%``, ``_``), backslashes and quotes are escaped. PostgREST
    rewrites every ``*`` in an ilike value to ``%`` before any escaping applies,
    so a ``*`` in the term still matches any run of characters.
    """
    like = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    quoted = like.replace("\\", "\\\\").replace('"', '\\"')
    return f'"*{quoted}*"'


def build_search_filter(term: str) -> str:
    """Build the ``or`` filter for a case-insensitive contains search.

    Args:
        term: Raw search text from the client.

    Returns:
        str: PostgREST logical filter over name, email and profile name.
    """
    value = _ilike_contains(term)
    return ",".join(f"{field}.ilike.{value}" for field in SEARCH_FIELDS)


def _raise_service_error(error: Exception, message: str) -> NoReturn:
    """Re-raise business errors and translate everything else.

    Args:
        error: The exception caught by a service operation.
        message: Description of the failed operation, for the log.

    Raises:
        APIError: The original business error, ConflictError for a unique
            violation, or ServiceUnavailableError for any other failure.
    """
    if isinstance(error, _PASSTHROUGH_ERRORS):
        raise error

    if isinstance(error, PostgrestAPIError) and error.code == UNIQUE_VIOLATION:
        logger.info("Unique constraint rejected write: %s", error.message)
        raise ConflictError("User conflicts with an existing email or profile code") from error

    logger.error("Database error: %s", message, exc_info=error)
    raise ServiceUnavailableError() from error


def _validate_id(user_id: str) -> str:
    if not isinstance(user_id, str) or not UUID_PATTERN.fullmatch(user_id):
        raise BadRequestError(f"Invalid ID format: {user_id}")
    return user_id


class UserService:
    """Service for managing user records."""

    def __init__(self, client: Client | None = None, table: str | None = None) -> None:
        """Initialize user service.

        Args:
            client: Store handle; defaults to the shared Supabase client.
            table: Users table name; defaults to the configured one.
        """
        self.client = client if client is not None else get_supabase_client()
        self.table = table or get_settings().users_table

    def _users(self) -> Any:
        return self.client.table(self.table)

    def _email_in_use(self, email: str, exclude_id: str | None = None) -> bool:
        query = self._users().select("id").eq("email", email)
        if exclude_id is not None:
            query = query.neq("id", exclude_id)
        response = query.limit(1).execute()
        return bool(response.data)

    async def create_user(self, data: UserCreate) -> UserRecord:
        """Create a new user after checking the email is free.

        Args:
            data: Validated user creation data.

        Returns:
            UserRecord: The stored user, including its assigned id.

        Raises:
            ConflictError: If the email is already in use.
            ServiceUnavailableError: On any other store failure.
        """
        try:
            if self._email_in_use(data.email):
                raise ConflictError(f"Email {data.email} is already in use")

            response = self._users().insert(data.to_document()).execute()
            user = response.data[0]
            logger.info("Created user %s", user["id"])
            return user
        except Exception as e:
            _raise_service_error(e, "Error creating user")

    async def find_users(self, search: str | None = None) -> list[UserRecord]:
        """List users, optionally filtered by a search term.

        Args:
            search: Case-insensitive text matched against name, email
                and profile name. Empty or missing returns every user.

        Returns:
            list[UserRecord]: Matching users in store order.
        """
        try:
            query = self._users().select("*")
            if search:
                query = query.or_(build_search_filter(search))
            response = query.execute()
            return response.data or []
        except Exception as e:
            _raise_service_error(e, "Error retrieving users")

    async def get_user(self, user_id: str) -> UserRecord:
        """Get a user by id.

        Args:
            user_id: The user's UUID as a string.

        Returns:
            UserRecord: The stored user.

        Raises:
            BadRequestError: If the id is not a UUID.
            NotFoundError: If no user has this id.
        """
        try:
            _validate_id(user_id)
            response = self._users().select("*").eq("id", user_id).execute()
            if not response.data:
                raise NotFoundError(f"User with ID {user_id} not found")
            return response.data[0]
        except Exception as e:
            _raise_service_error(e, "Error retrieving user")

    async def update_user(self, user_id: str, data: UserUpdate) -> UserRecord:
        """Apply a partial update to an existing user.

        Args:
            user_id: The user's UUID as a string.
            data: Validated fields to change.

        Returns:
            UserRecord: The updated user.

        Raises:
            BadRequestError: If the id is not a UUID.
            NotFoundError: If no user has this id.
            ConflictError: If the new email belongs to another user.
        """
        try:
            current = await self.get_user(user_id)

            changes: UserChanges = data.to_changes()
            if not changes:
                return current

            email = changes.get("email")
            if email is not None and self._email_in_use(email, exclude_id=user_id):
                raise ConflictError(f"Email {email} is already in use")

            response = self._users().update(changes).eq("id", user_id).execute()
            if not response.data:
                raise NotFoundError(f"User with ID {user_id} not found")

            logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(changes)))
            return response.data[0]
        except Exception as e:
            _raise_service_error(e, "Error updating user")

    async def delete_user(self, user_id: str) -> None:
        """Delete an existing user.

        Args:
            user_id: The user's UUID as a string.

        Raises:
            BadRequestError: If the id is not a UUID.
            NotFoundError: If no user has this id.
        """
        try:
            await self.get_user(user_id)
            self._users().delete().eq("id", user_id).execute()
            logger.info("Deleted user %s", user_id)
        except Exception as e:
            _raise_service_error(e, "Error deleting user")
