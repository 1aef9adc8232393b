"""Pydantic models for note documents."""

from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class NoteDocument(BaseModel):
    """A markdown note with its front-matter metadata.

    The note name is the unique key within a store. Timestamps are
    ``None`` until the note is validated for the first time.

    Attributes:
        name: Identifier matching ``^[A-Za-z][A-Za-z0-9\\-_/:]+$``
        tags: Bare ``key`` or ``key:value`` labels, one per key once validated
        content: Markdown body after the front-matter
        created_at: When the note was first saved
        updated_at: When the note was last saved

    Example file:
        ---
        name: meeting-notes
        tags:
        - work
        - status:open
        created_at: 2025-11-25 10:30:00+00:00
        updated_at: 2025-11-25 14:45:00+00:00
        ---

        # Meeting notes
    """

    name: str = ""
    tags: list[str] = Field(default_factory=list)
    content: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> Any:
        """Accept scalar YAML names such as numbers."""
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> Any:
        """Accept a missing tag list, a single tag, or scalar tags."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            return [str(t) if isinstance(t, (int, float)) else t for t in v]
        return v

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Any:
        """Treat bare YAML dates as midnight and naive times as UTC."""
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day, tzinfo=UTC)
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    def to_frontmatter_dict(self) -> dict:
        """Convert metadata to a dictionary suitable for YAML front-matter.

        Returns:
            Dictionary without ``content``; empty tags and unset
            timestamps are left out
        """
        data: dict = {"name": self.name}
        if self.tags:
            data["tags"] = list(self.tags)
        if self.created_at is not None:
            data["created_at"] = self.created_at
        if self.updated_at is not None:
            data["updated_at"] = self.updated_at
        return data


class NoteWrite(BaseModel):
    """Request body for creating or replacing a note over HTTP."""

    name: str = ""
    tags: list[str] = Field(default_factory=list)
    content: str = ""
    created_at: datetime | None = None


class ErrorDetail(BaseModel):
    """Error information returned by the HTTP API."""

    message: str
    type: str = "invalid_request_error"
    code: str | None = None


class ErrorResponse(BaseModel):
    """Error envelope returned by the HTTP API."""

    error: ErrorDetail
