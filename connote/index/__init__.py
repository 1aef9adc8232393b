"""Persistent notes index."""

from connote.index.models import IndexEntry, NoteIndex
from connote.index.storage import INDEX_FILENAME, entry_for, load_index, persist_index, rebuild_index

__all__ = [
    "INDEX_FILENAME",
    "IndexEntry",
    "NoteIndex",
    "entry_for",
    "load_index",
    "persist_index",
    "rebuild_index",
]
