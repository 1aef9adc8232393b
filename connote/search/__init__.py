"""Note queries: predicate evaluation and time specifications."""

from connote.search.dates import created_range, day_note_name, expand_note_name, parse_time_spec
from connote.search.engine import is_match, run_query
from connote.search.models import NoteQuery

__all__ = [
    "NoteQuery",
    "created_range",
    "day_note_name",
    "expand_note_name",
    "is_match",
    "parse_time_spec",
    "run_query",
]
