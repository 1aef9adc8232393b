"""Note documents: model, markdown codec and HTTP routes."""

from connote.notes.markdown import normalize_tags, parse_note, to_markdown, validate_note
from connote.notes.models import NoteDocument

__all__ = ["NoteDocument", "normalize_tags", "parse_note", "to_markdown", "validate_note"]
