"""
User Pydantic schemas.

``UserPublic`` is the public-safe projection returned by almost every read
path; ``UserRecord`` carries the password hash and is only returned by
writes and by the credential lookup.
"""

from typing import Optional

from pydantic import ConfigDict, EmailStr, Field, field_validator

from chirper.schemas.base import BaseSchema, IdentifierMixin, TimestampMixin


class UserPublic(BaseSchema, IdentifierMixin, TimestampMixin):
    """User without password."""

    name: str = Field(..., description="Display name", json_schema_extra={"example": "Alice"})
    email: str = Field(..., description="Email address", json_schema_extra={"example": "alice@example.com"})
    image_name: Optional[str] = Field(
        default=None,
        description="Profile image reference",
        json_schema_extra={"example": "/image/users/default_user.jpg"}
    )


class UserRecord(UserPublic):
    """Full user record including the password hash."""

    password: str = Field(..., repr=False, description="Password hash")


class UserCreate(BaseSchema):
    """Input for creating a user. The password is stored as given."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255, repr=False)


class UserProfileUpdate(BaseSchema):
    """
    Partial profile update.

    Omitted fields are left unchanged. ``image_name`` may be set to None to
    clear it; ``name`` and ``email`` may not.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    image_name: Optional[str] = Field(default=None, max_length=255)

    @field_validator('name', 'email')
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v

    def changes(self) -> dict:
        """Return only the fields the caller actually provided."""
        return self.model_dump(exclude_unset=True)
