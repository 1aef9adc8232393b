"""Pydantic models for note queries.

A query is evaluated against index entries only, so every predicate
here must be answerable from a note's name, tags and creation time.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class NoteQuery(BaseModel):
    """Filtering options for searching a note store.

    Attributes:
        name_like: Regular expression searched anywhere in the note name
        include_tags: Tags that must all be present
        exclude_tags: Tags that must all be absent
        created_after: Lower creation bound (inclusive), unset for no bound
        created_before: Upper creation bound (inclusive), unset for "now"
    """

    name_like: str = Field(default="", description="Regex matched against note names")
    include_tags: list[str] = Field(default_factory=list, description="Required tags")
    exclude_tags: list[str] = Field(default_factory=list, description="Forbidden tags")
    created_after: datetime | None = Field(default=None, description="Created at or after")
    created_before: datetime | None = Field(default=None, description="Created at or before")
