"""User model type definitions for database operations."""

from typing import TypedDict


class ProfileDocument(TypedDict):
    """Profile sub-document stored in the users.profile jsonb column."""

    code: str
    profileName: str


class UserRecord(TypedDict):
    """Users table row representation.

    Maps directly to the database schema; ``id`` is a UUID string
    generated by the database on insert.
    """

    id: str
    name: str
    email: str
    age: int | float | None
    profile: ProfileDocument


class UserChanges(TypedDict, total=False):
    """Fields that can be updated on a user.

    All fields are optional for partial updates.
    """

    name: str
    email: str
    age: int | float
    profile: ProfileDocument
