from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, field_serializer
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity with a store-assigned integer id and audit timestamps."""

    id: int = PydanticField(description="Unique identifier assigned by the store")

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)

    @field_serializer("created_at", "updated_at", when_used="json")
    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class EntityTable(SQLModel, table=False):
    """Base table with autoincrement id, audit timestamps and a soft-delete marker."""

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
    # Rows with a value here are logically deleted and must be filtered out of reads.
    deleted_at: datetime | None = Field(default=None, index=True)
