"""Shared base classes for entities and their tables."""

from ._base import TIMESTAMP_FORMAT, Entity, EntityTable, utcnow

__all__ = ["Entity", "EntityTable", "TIMESTAMP_FORMAT", "utcnow"]
