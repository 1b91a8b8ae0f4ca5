"""Base model classes for vector-docstore."""

from datetime import datetime, UTC

from pydantic import BaseModel, ConfigDict, Field


class DocStoreBaseModel(BaseModel):
    """Base model with common configuration for all vector-docstore models."""

    model_config = ConfigDict(
        # Keep enum objects in memory, serialize values only when needed
        use_enum_values=False,
        # Allow population by field name or alias
        populate_by_name=True,
        # Validate assignment after model creation
        validate_assignment=True,
        extra='forbid',
    )


class TimestampedModel(DocStoreBaseModel):
    """Base model for entities with a creation timestamp."""

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the entity was created"
    )
