"""Pydantic models for note store summaries."""

from pydantic import BaseModel, Field


class StoreStats(BaseModel):
    """Statistics of a note store.

    Attributes:
        profile: Profile name the store was opened with
        directory: Directory holding the notes and the index
        count: Number of indexed notes
    """

    profile: str
    directory: str
    count: int = Field(default=0, ge=0)
