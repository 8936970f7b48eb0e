"""User Pydantic schemas for API request/response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictFloat, StrictInt, StrictStr, model_validator

from src.schemas.common import Envelope


class ProfileSchema(BaseModel):
    """Profile embedded in a user create/update payload."""

    model_config = ConfigDict(extra="forbid")

    code: StrictStr = Field(..., description="Unique profile code", examples=["P-002"])
    profile_name: StrictStr = Field(..., alias="profileName", description="Profile name", examples=["basic"])


class UserCreate(BaseModel):
    """Schema for creating a new user.

    No type coercion and no unknown fields.
    """

    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(..., min_length=1, description="Full name", examples=["Juan Pérez"])
    email: EmailStr = Field(..., description="Email address, unique across users", examples=["rodri22@example.com"])
    age: StrictInt | StrictFloat = Field(..., description="Age of the user", examples=[25])
    profile: ProfileSchema = Field(..., description="User profile")

    def to_document(self) -> dict[str, Any]:
        """Return the record to persist, keyed by stored field names."""
        return self.model_dump(by_alias=True)


class UserUpdate(BaseModel):
    """Schema for partially updating a user.

    Every field is optional; fields that are present follow the create rules.
    """

    model_config = ConfigDict(extra="forbid")

    name: StrictStr | None = Field(default=None, min_length=1, description="Full name")
    email: EmailStr | None = Field(default=None, description="Email address, unique across users")
    age: StrictInt | StrictFloat | None = Field(default=None, description="Age of the user")
    profile: ProfileSchema | None = Field(default=None, description="Replacement profile")

    @model_validator(mode="before")
    @classmethod
    def reject_null_fields(cls, data: Any) -> Any:
        """Treat an explicit null as invalid rather than as 'unset'."""
        if isinstance(data, dict):
            nulls = sorted(key for key, value in data.items() if value is None)
            if nulls:
                raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return data

    def to_changes(self) -> dict[str, Any]:
        """Return only the fields the client sent, keyed by stored field names."""
        return self.model_dump(exclude_unset=True, by_alias=True)


class ProfileResponse(BaseModel):
    """Profile as stored on a user record."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    code: str = Field(description="Unique profile code")
    profile_name: str = Field(alias="profileName", description="Profile name")


class UserResponse(BaseModel):
    """Schema for user API responses."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(description="Store-assigned user identifier")
    name: str = Field(description="Full name")
    email: str = Field(description="Email address")
    age: int | float | None = Field(default=None, description="Age of the user")
    profile: ProfileResponse = Field(description="User profile")


class UserEnvelope(Envelope):
    """Envelope carrying a single user."""

    data: UserResponse


class UserListEnvelope(Envelope):
    """Envelope carrying a list of users."""

    data: list[UserResponse]
