"""
Base Pydantic schemas for records returned by the repositories.

Records are built from ORM instances (``from_attributes``) and serialize
with camelCase keys (``userId``, ``createdAt``) when dumped by alias.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema class with common configuration.

    All record and input schemas inherit from this class.
    """

    model_config = ConfigDict(
        # Build records straight from ORM instances
        from_attributes=True,
        # Accept both snake_case names and camelCase aliases
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra='forbid',
    )


class IdentifierMixin(BaseModel):
    """Mixin for records with an integer primary key."""

    id: int = Field(..., ge=1, description="Unique identifier of the record")


class TimestampMixin(BaseModel):
    """
    Mixin for records that include timestamp fields.

    Provides created_at and updated_at fields, normalized to UTC.
    """

    created_at: datetime = Field(
        ...,
        description="Timestamp when the record was created",
        json_schema_extra={"example": "2024-01-15T10:30:00Z"}
    )
    updated_at: datetime = Field(
        ...,
        description="Timestamp when the record was last updated",
        json_schema_extra={"example": "2024-01-15T10:30:00Z"}
    )

    @field_validator('created_at', 'updated_at')
    @classmethod
    def validate_timestamps(cls, v: datetime) -> datetime:
        """Validate timestamp fields."""
        return ensure_utc(v)


def ensure_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive timestamps.

    SQLite hands timestamps back without zone information; every stored
    timestamp is written in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
