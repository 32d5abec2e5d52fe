"""
CoreModel - Base model for all stored userkit entities.

All stored entities inherit from CoreModel, which provides:
- Identity (id - UUID generated by userkit at creation, never by the caller)
- Temporal tracking (created_at, updated_at, managed by the database)
- External casing: serialised field names are camelCase, internal names snake_case

Rows returned by asyncpg use snake_case column names; populate_by_name lets the
same model accept both.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CoreModel(BaseModel):
    """
    Base model for stored entities.

    Note: identity generation is the job of the entity's repository,
    not of CoreModel.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: UUID = Field(..., description="Unique identifier generated at creation time")
    created_at: Optional[datetime] = Field(
        default=None, description="Creation timestamp (database managed)"
    )
    updated_at: Optional[datetime] = Field(
        default=None, description="Last update timestamp (database managed)"
    )

    def to_public_dict(self) -> dict:
        """Serialise for crossing the process boundary (camelCase, JSON types)."""
        return self.model_dump(mode="json", by_alias=True)
