"""Predicate evaluation of note queries against the index."""

import re
import time
from datetime import datetime

from connote.dependencies import InvalidQueryError
from connote.index.models import IndexEntry, NoteIndex
from connote.search.models import NoteQuery


def compile_name_pattern(name_like: str) -> re.Pattern[str] | None:
    """Compile the name filter of a query.

    Args:
        name_like: Regular expression, blank for no filter

    Returns:
        Compiled pattern, or None when no filter is set

    Raises:
        InvalidQueryError: If the expression does not compile
    """
    name_like = name_like.strip()
    if not name_like:
        return None
    try:
        return re.compile(name_like)
    except re.error as e:
        raise InvalidQueryError(f"invalid search regex '{name_like}': {e}") from e


def _seconds(value: datetime | None, default: int) -> int:
    return int(value.timestamp()) if value is not None else default


def is_match(
    query: NoteQuery,
    name: str,
    entry: IndexEntry,
    now: int,
    name_re: re.Pattern[str] | None = None,
) -> bool:
    """Check whether one index entry satisfies a query.

    Args:
        query: Query to evaluate
        name: Note name the entry is keyed by
        entry: Index entry of the note
        now: Current unix time, used when the query has no upper bound
        name_re: Pre-compiled name pattern of the query

    Returns:
        True if the entry passes every predicate
    """
    if name_re is not None and not name_re.search(name):
        return False

    for tag in query.include_tags:
        if tag not in entry.tags:
            return False

    for tag in query.exclude_tags:
        if tag in entry.tags:
            return False

    after = _seconds(query.created_after, 0)
    before = _seconds(query.created_before, now)
    return after <= entry.created_at <= before


def run_query(
    query: NoteQuery, index: NoteIndex, now: int | None = None
) -> list[tuple[str, IndexEntry]]:
    """Evaluate a query over the whole index.

    Args:
        query: Query to evaluate
        index: Mapping of note name to IndexEntry
        now: Unix time to use as the default upper bound; defaults to
            the time of the call

    Returns:
        Matching (name, entry) pairs, most recently created first

    Raises:
        InvalidQueryError: If the name pattern does not compile
    """
    name_re = compile_name_pattern(query.name_like)
    if now is None:
        now = int(time.time())

    matches = [
        (name, entry)
        for name, entry in index.items()
        if is_match(query, name, entry, now, name_re=name_re)
    ]
    matches.sort(key=lambda item: (-item[1].created_at, item[0]))
    return matches
