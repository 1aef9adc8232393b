"""Pydantic models for the notes index."""

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, field_serializer, field_validator


class IndexEntry(BaseModel):
    """Lightweight projection of a note used for queries.

    Attributes:
        tags: Normalized tags of the note
        created_at: Creation time in unix seconds
    """

    tags: set[str] = Field(default_factory=set)
    created_at: int = 0

    @field_validator("tags", mode="before")
    @classmethod
    def accept_object_tags(cls, v: Any) -> Any:
        """Accept tag sets written as ``{"tag": {}}`` objects."""
        if v is None:
            return set()
        if isinstance(v, dict):
            return set(v)
        return v

    @field_serializer("tags")
    def serialize_tags(self, tags: set[str]) -> list[str]:
        """Write tags as a sorted list for stable index files."""
        return sorted(tags)


NoteIndex = dict[str, IndexEntry]

INDEX_ADAPTER: TypeAdapter[NoteIndex] = TypeAdapter(NoteIndex)
