"""Markdown codec for note documents.

A note file is a YAML front-matter block followed by the markdown body:

    ---
    name: api-design
    tags:
    - project
    - status:draft
    created_at: 2025-11-25 10:30:00+00:00
    updated_at: 2025-11-25 10:30:00+00:00
    ---

    # API Design

The front-matter is optional. When present it must start on the very
first line with three or more hyphens and is closed by the next line of
three or more hyphens.
"""

import re
from datetime import UTC, datetime

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler
from pydantic import ValidationError

from connote.dependencies import InvalidNameError, ParseError
from connote.notes.models import NoteDocument

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9\-_/:]+$")


class NoteFrontmatterHandler(YAMLHandler):
    """YAML handler accepting delimiter lines of three or more hyphens."""

    FM_BOUNDARY = re.compile(r"^-{3,}[ \t]*\r?$", re.MULTILINE)


HANDLER = NoteFrontmatterHandler()


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split raw note text into front-matter and body.

    Args:
        text: Raw note content

    Returns:
        Tuple of (front-matter source or None if absent, body)

    Examples:
        >>> split_frontmatter("---\\nname: foo\\n---\\n\\nbody")
        ('\\nname: foo\\n', '\\n\\nbody')
        >>> split_frontmatter("# No metadata")
        (None, '# No metadata')
    """
    first_line = text.split("\n", 1)[0]
    if not HANDLER.FM_BOUNDARY.match(first_line):
        return None, text

    try:
        return HANDLER.split(text)
    except ValueError:
        # Never closed: everything after the opening line is front-matter.
        rest = text.split("\n", 1)
        return (rest[1] if len(rest) > 1 else ""), ""


def parse_note(text: str | bytes) -> NoteDocument:
    """Parse note text into a NoteDocument.

    Args:
        text: Raw note content, with or without front-matter

    Returns:
        NoteDocument with metadata from the front-matter and the trimmed body

    Raises:
        ParseError: If the front-matter is not a valid YAML mapping of
            note metadata
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"note is not valid UTF-8: {e}") from e

    fm, body = split_frontmatter(text)
    metadata: dict = {}
    if fm is not None and fm.strip():
        try:
            loaded = HANDLER.load(fm)
        except yaml.YAMLError as e:
            raise ParseError(f"invalid front-matter: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ParseError("invalid front-matter: expected a mapping")
        metadata = loaded

    fields = {k: metadata[k] for k in ("name", "tags", "created_at", "updated_at") if k in metadata}
    try:
        return NoteDocument(**fields, content=body.strip())
    except ValidationError as e:
        raise ParseError(f"invalid front-matter: {e}") from e


def normalize_tags(tags: list[str]) -> list[str]:
    """Collapse raw tags to one tag per key.

    Each tag is trimmed and split on its first colon into key and value.
    Blank tags are dropped. When a key repeats, the last occurrence wins
    and keeps the position where the key first appeared.

    Args:
        tags: Raw tags as supplied by the user

    Returns:
        Normalized tags

    Examples:
        >>> normalize_tags(["a", "a:1", " b ", ""])
        ['a:1', 'b']
        >>> normalize_tags(["status:open", "status"])
        ['status']
    """
    collapsed: dict[str, str] = {}
    for raw in tags:
        tag = raw.strip()
        if not tag:
            continue
        key, _, value = tag.partition(":")
        collapsed[key] = value
    return [f"{key}:{value}" if value else key for key, value in collapsed.items()]


def validate_note(note: NoteDocument) -> NoteDocument:
    """Normalize a note in place before it is persisted.

    Trims the name, stamps both timestamps on a note that was never saved,
    and collapses its tags.

    Args:
        note: Note to normalize

    Returns:
        The same note instance

    Raises:
        InvalidNameError: If the trimmed name does not match NAME_PATTERN
    """
    note.name = note.name.strip()
    if note.created_at is None:
        note.created_at = datetime.now(UTC)
        note.updated_at = note.created_at
    note.tags = normalize_tags(note.tags)

    if not NAME_PATTERN.fullmatch(note.name):
        raise InvalidNameError(f"invalid name: '{note.name}'")
    return note


def to_markdown(note: NoteDocument) -> str:
    """Serialize a note as YAML front-matter followed by its body.

    Args:
        note: Note to serialize

    Returns:
        Full note text, ready to be written to disk
    """
    post = frontmatter.Post(note.content)
    post.metadata = note.to_frontmatter_dict()
    return frontmatter.dumps(post, handler=HANDLER, sort_keys=False) + "\n"
