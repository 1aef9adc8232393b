"""Tests for search feature.

This module covers the query engine that filters the index by name,
tags and creation time, and the time specifications used to build
creation ranges and day note names.
"""

from datetime import UTC, datetime, timedelta

import pytest

from connote.dependencies import InvalidQueryError
from connote.index.models import IndexEntry
from connote.search.dates import (
    apply_range,
    created_range,
    day_note_name,
    expand_note_name,
    parse_time_spec,
)
from connote.search.engine import compile_name_pattern, is_match, run_query
from connote.search.models import NoteQuery

NOW = datetime(2026, 10, 18, 15, 30, 0, tzinfo=UTC)
T = 1_700_000_000


@pytest.fixture
def index() -> dict[str, IndexEntry]:
    """Index with a handful of notes created one second apart."""
    return {
        "meeting-1": IndexEntry(tags={"work", "status:open"}, created_at=T),
        "meeting-2": IndexEntry(tags={"work", "status:closed"}, created_at=T + 1),
        "groceries": IndexEntry(tags={"home"}, created_at=T + 2),
        "day:14-Feb-2022": IndexEntry(tags=set(), created_at=T + 2),
        "undated": IndexEntry(tags={"work"}, created_at=0),
    }


def names(results: list) -> list[str]:
    return [name for name, _ in results]


# =============================================================================
# Query Engine Tests
# =============================================================================


class TestCompileNamePattern:
    """Tests for compile_name_pattern."""

    def test_blank_means_no_filter(self) -> None:
        """Test that blank patterns compile to None."""
        assert compile_name_pattern("") is None
        assert compile_name_pattern("   ") is None

    def test_invalid_regex(self) -> None:
        """Test that a bad expression raises InvalidQueryError."""
        with pytest.raises(InvalidQueryError):
            compile_name_pattern("meeting(")


class TestIsMatch:
    """Tests for evaluating a single entry."""

    def test_empty_query_matches_past_entries(self) -> None:
        """Test that an empty query accepts anything created up to now."""
        entry = IndexEntry(created_at=T)

        assert is_match(NoteQuery(), "a", entry, now=T)
        assert not is_match(NoteQuery(), "a", entry, now=T - 1)

    def test_bounds_are_inclusive(self) -> None:
        """Test that entries exactly on a bound match."""
        at = datetime.fromtimestamp(T, UTC)
        query = NoteQuery(created_after=at, created_before=at)

        assert is_match(query, "a", IndexEntry(created_at=T), now=T + 100)
        assert not is_match(query, "a", IndexEntry(created_at=T + 1), now=T + 100)

    def test_name_pattern_searches_anywhere(self) -> None:
        """Test that the pattern is not anchored to the start of the name."""
        query = NoteQuery(name_like="ting")
        pattern = compile_name_pattern(query.name_like)

        assert is_match(query, "meeting-1", IndexEntry(), now=T, name_re=pattern)
        assert not is_match(query, "groceries", IndexEntry(), now=T, name_re=pattern)


class TestRunQuery:
    """Tests for run_query over a whole index."""

    def test_orders_newest_first(self, index: dict[str, IndexEntry]) -> None:
        """Test ordering by creation time, ties broken by name."""
        results = run_query(NoteQuery(), index, now=T + 10)

        assert names(results) == [
            "day:14-Feb-2022",
            "groceries",
            "meeting-2",
            "meeting-1",
            "undated",
        ]

    def test_include_tags(self, index: dict[str, IndexEntry]) -> None:
        """Test that every included tag must be present."""
        query = NoteQuery(include_tags=["work", "status:open"])

        assert names(run_query(query, index, now=T + 10)) == ["meeting-1"]

    def test_include_tag_is_exact(self, index: dict[str, IndexEntry]) -> None:
        """Test that a bare key does not match key:value tags."""
        query = NoteQuery(include_tags=["status"])

        assert run_query(query, index, now=T + 10) == []

    def test_exclude_tags(self, index: dict[str, IndexEntry]) -> None:
        """Test that any excluded tag rejects the note."""
        query = NoteQuery(include_tags=["work"], exclude_tags=["status:closed"])

        assert names(run_query(query, index, now=T + 10)) == ["meeting-1", "undated"]

    def test_name_like(self, index: dict[str, IndexEntry]) -> None:
        """Test filtering by regular expression on names."""
        query = NoteQuery(name_like="^meeting-\\d$")

        assert names(run_query(query, index, now=T + 10)) == ["meeting-2", "meeting-1"]

    def test_created_after(self, index: dict[str, IndexEntry]) -> None:
        """Test the lower creation bound."""
        query = NoteQuery(created_after=datetime.fromtimestamp(T + 1, UTC))

        assert names(run_query(query, index, now=T + 10)) == [
            "day:14-Feb-2022",
            "groceries",
            "meeting-2",
        ]

    def test_default_upper_bound_is_now(self, index: dict[str, IndexEntry]) -> None:
        """Test that notes created after 'now' are left out."""
        assert names(run_query(NoteQuery(), index, now=T)) == ["meeting-1", "undated"]

    def test_now_defaults_to_call_time(self, index: dict[str, IndexEntry]) -> None:
        """Test that all past notes match without an explicit now."""
        assert len(run_query(NoteQuery(), index)) == len(index)

    def test_invalid_pattern(self, index: dict[str, IndexEntry]) -> None:
        """Test that an invalid regex fails the whole query."""
        with pytest.raises(InvalidQueryError):
            run_query(NoteQuery(name_like="[a-"), index)

    def test_empty_index(self) -> None:
        """Test that an empty index gives no results."""
        assert run_query(NoteQuery(name_like="x"), {}) == []


# =============================================================================
# Time Specification Tests
# =============================================================================


class TestParseTimeSpec:
    """Tests for parse_time_spec."""

    @pytest.mark.parametrize("spec", ["today", "now", "0", " today "])
    def test_today(self, spec: str) -> None:
        """Test the forms meaning the current time."""
        assert parse_time_spec(spec, now=NOW) == NOW

    @pytest.mark.parametrize("spec", ["yesterday", "yday", "-1"])
    def test_yesterday(self, spec: str) -> None:
        """Test the forms meaning one day ago."""
        assert parse_time_spec(spec, now=NOW) == NOW - timedelta(days=1)

    @pytest.mark.parametrize("spec", ["tomorrow", "tom", "1", "+1"])
    def test_tomorrow(self, spec: str) -> None:
        """Test the forms meaning one day ahead."""
        assert parse_time_spec(spec, now=NOW) == NOW + timedelta(days=1)

    def test_day_offsets(self) -> None:
        """Test arbitrary integer day offsets."""
        assert parse_time_spec("-3", now=NOW) == NOW - timedelta(days=3)
        assert parse_time_spec("10", now=NOW) == NOW + timedelta(days=10)

    @pytest.mark.parametrize("spec", ["14-02-2022", "14/02/2022"])
    def test_dates(self, spec: str) -> None:
        """Test DD-MM-YYYY dates resolve to midnight UTC."""
        assert parse_time_spec(spec, now=NOW) == datetime(2022, 2, 14, tzinfo=UTC)

    @pytest.mark.parametrize("spec", ["", "someday", "2022-02-14", "31-02-2022"])
    def test_unknown(self, spec: str) -> None:
        """Test that unrecognised specs raise ValueError."""
        with pytest.raises(ValueError, match="unknown time-string"):
            parse_time_spec(spec, now=NOW)


class TestCreatedRange:
    """Tests for created_range and apply_range."""

    def test_same_spec_selects_whole_day(self) -> None:
        """Test that equal after and before cover one calendar day."""
        start, end = created_range("today", "today", now=NOW)

        assert start == datetime(2026, 10, 18, tzinfo=UTC)
        assert end == datetime(2026, 10, 18, 23, 59, 59, tzinfo=UTC)

    def test_after_only(self) -> None:
        """Test that a blank before leaves the upper bound open."""
        start, end = created_range("-3", "", now=NOW)

        assert start == NOW - timedelta(days=3)
        assert end is None

    def test_before_only(self) -> None:
        """Test that a blank after leaves the lower bound open."""
        assert created_range("", "yesterday", now=NOW) == (None, NOW - timedelta(days=1))

    def test_both_blank(self) -> None:
        """Test that no specs give no bounds."""
        assert created_range("", "", now=NOW) == (None, None)

    def test_distinct_bounds(self) -> None:
        """Test that differing specs are parsed independently."""
        start, end = created_range("01-10-2026", "yesterday", now=NOW)

        assert start == datetime(2026, 10, 1, tzinfo=UTC)
        assert end == NOW - timedelta(days=1)

    def test_invalid_spec(self) -> None:
        """Test that a bad spec on either side raises ValueError."""
        with pytest.raises(ValueError):
            created_range("today", "later", now=NOW)

    def test_apply_range_copies_query(self) -> None:
        """Test that apply_range leaves the original query untouched."""
        query = NoteQuery(include_tags=["work"])
        ranged = apply_range(query, "14-02-2022", "14-02-2022")

        assert query.created_after is None
        assert ranged.include_tags == ["work"]
        assert ranged.created_after == datetime(2022, 2, 14, tzinfo=UTC)
        assert ranged.created_before == datetime(2022, 2, 14, 23, 59, 59, tzinfo=UTC)


class TestDayNotes:
    """Tests for day note names."""

    def test_day_note_name(self) -> None:
        """Test the day:D-Mon-YYYY layout without zero padding."""
        assert day_note_name(datetime(2026, 10, 5)) == "day:5-Oct-2026"
        assert day_note_name(datetime(2022, 2, 14)) == "day:14-Feb-2022"

    def test_expand_shorthand(self) -> None:
        """Test that '@spec' names resolve to day notes."""
        assert expand_note_name("@today", now=NOW) == "day:18-Oct-2026"
        assert expand_note_name("@yday", now=NOW) == "day:17-Oct-2026"
        assert expand_note_name("@14/02/2022", now=NOW) == "day:14-Feb-2022"

    def test_plain_names_unchanged(self) -> None:
        """Test that ordinary names are only trimmed."""
        assert expand_note_name(" meeting ", now=NOW) == "meeting"

    def test_unknown_spec_unchanged(self) -> None:
        """Test that an unrecognised shorthand is left as written."""
        assert expand_note_name("@someday", now=NOW) == "@someday"
