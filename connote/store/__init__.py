"""Note store tying note files and the index together."""

from connote.store.models import StoreStats
from connote.store.note_store import NoteStore

__all__ = ["NoteStore", "StoreStats"]
