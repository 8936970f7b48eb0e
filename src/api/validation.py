"""Explicit payload validation for user write endpoints.

Route handlers receive the raw JSON body and call these functions before
touching the service, so validation runs after the role check and never
reaches the store with bad input.
"""

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.api.middleware.error_handler import ValidationError, error_details
from src.schemas.user import UserCreate, UserUpdate


def _validate(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Validation error",
            details=error_details(e.errors()),
        ) from e


def validate_user_create(payload: Any) -> UserCreate:
    """Validate a create payload.

    Args:
        payload: Decoded JSON request body.

    Returns:
        UserCreate: The typed, validated payload.

    Raises:
        ValidationError: If a field is missing, mistyped, unknown, or the
            email is malformed.
    """
    return _validate(UserCreate, payload)


def validate_user_update(payload: Any) -> UserUpdate:
    """Validate a partial update payload.

    Args:
        payload: Decoded JSON request body.

    Returns:
        UserUpdate: The typed, validated payload with only the sent fields set.

    Raises:
        ValidationError: If a present field breaks the create rules, is
            null, or is unknown.
    """
    return _validate(UserUpdate, payload)
