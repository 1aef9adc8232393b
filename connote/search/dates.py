"""Human-friendly time specifications for queries and day notes."""

from datetime import UTC, datetime, timedelta

from connote.search.models import NoteQuery

_TODAY = {"today", "now", "0"}
_YESTERDAY = {"yesterday", "yday", "-1"}
_TOMORROW = {"tomorrow", "tom", "1", "+1"}


def parse_time_spec(spec: str, now: datetime | None = None) -> datetime:
    """Convert a time specification into a datetime.

    Args:
        spec: 'today', 'yesterday', 'tomorrow' (or their short forms), an
            integer day offset such as '-3', or a date as DD-MM-YYYY
            (DD/MM/YYYY also accepted)
        now: Reference time, defaults to the current UTC time

    Returns:
        The resolved time; dates resolve to midnight UTC

    Raises:
        ValueError: If the specification is not recognised

    Examples:
        >>> parse_time_spec("14-02-2022")
        datetime.datetime(2022, 2, 14, 0, 0, tzinfo=datetime.timezone.utc)
    """
    spec = spec.strip()
    now = now or datetime.now(UTC)

    if spec in _TODAY:
        return now
    if spec in _YESTERDAY:
        return now - timedelta(days=1)
    if spec in _TOMORROW:
        return now + timedelta(days=1)

    try:
        return now + timedelta(days=int(spec))
    except ValueError:
        pass

    try:
        return datetime.strptime(spec.replace("/", "-"), "%d-%m-%Y").replace(tzinfo=UTC)
    except ValueError:
        raise ValueError(f"unknown time-string: {spec}") from None


def created_range(
    after: str, before: str = "", now: datetime | None = None
) -> tuple[datetime | None, datetime | None]:
    """Turn 'after'/'before' specifications into creation bounds.

    When both specifications are equal the whole day is selected.
    Otherwise each non-blank specification becomes a bound; a blank
    'before' stays open so the query engine resolves it to "now" when
    the query runs.

    Args:
        after: Time specification of the lower bound, blank for none
        before: Time specification of the upper bound
        now: Reference time, defaults to the current UTC time

    Returns:
        Tuple of (created_after, created_before), None for an open bound

    Raises:
        ValueError: If either specification is not recognised
    """
    after, before = after.strip(), before.strip()
    now = now or datetime.now(UTC)
    start = parse_time_spec(after, now=now) if after else None
    end = parse_time_spec(before, now=now) if before else None
    if start is not None and after == before:
        day_start = start.replace(hour=0, minute=0, second=0, microsecond=0)
        return day_start, day_start + timedelta(hours=23, minutes=59, seconds=59)
    return start, end


def apply_range(query: NoteQuery, after: str, before: str = "") -> NoteQuery:
    """Return a copy of the query restricted to the given time range."""
    start, end = created_range(after, before)
    return query.model_copy(update={"created_after": start, "created_before": end})


def day_note_name(when: datetime) -> str:
    """Build the name of the day note for a date.

    Examples:
        >>> day_note_name(datetime(2026, 10, 18))
        'day:18-Oct-2026'
    """
    return f"day:{when.day}-{when.strftime('%b')}-{when.year}"


def expand_note_name(name: str, now: datetime | None = None) -> str:
    """Expand '@<spec>' shorthands into day note names.

    Names without the '@' prefix, or whose spec is not recognised, are
    returned unchanged.

    Examples:
        >>> expand_note_name("@14-02-2022")
        'day:14-Feb-2022'
        >>> expand_note_name("meeting")
        'meeting'
    """
    name = name.strip()
    if not name.startswith("@"):
        return name
    try:
        return day_note_name(parse_time_spec(name[1:], now=now))
    except ValueError:
        return name
