"""Loading, rebuilding and persisting the notes index.

The index lives next to the notes as ``notes_idx.json`` and maps each
note name to its tags and creation time, so queries can run without
reading every markdown file.
"""

from pathlib import Path

from pydantic import ValidationError

from connote.dependencies import CorruptIndexError, logger
from connote.index.models import INDEX_ADAPTER, IndexEntry, NoteIndex
from connote.notes.markdown import parse_note
from connote.notes.models import NoteDocument

INDEX_FILENAME = "notes_idx.json"


def index_path(directory: Path) -> Path:
    """Return the index file location for a store directory."""
    return directory / INDEX_FILENAME


def entry_for(note: NoteDocument) -> IndexEntry:
    """Project a note onto its index entry.

    Args:
        note: Parsed or validated note

    Returns:
        IndexEntry with the note's tags and creation time in whole seconds
    """
    created = int(note.created_at.timestamp()) if note.created_at else 0
    return IndexEntry(tags=set(note.tags), created_at=created)


def load_index(directory: Path) -> NoteIndex:
    """Load the persisted index, rebuilding it when the file is missing.

    Args:
        directory: Store directory

    Returns:
        Mapping of note name to IndexEntry

    Raises:
        CorruptIndexError: If the index path is a directory or does not
            hold a valid index
    """
    path = index_path(directory)
    if not path.exists():
        logger.info("index_missing", extra={"path": str(path)})
        return rebuild_index(directory)
    if path.is_dir():
        raise CorruptIndexError(f"'{path}' is a directory, not an index file")

    try:
        return INDEX_ADAPTER.validate_json(path.read_bytes())
    except ValidationError as e:
        raise CorruptIndexError(f"'{path}' is not a valid index file: {e}") from e


def rebuild_index(directory: Path) -> NoteIndex:
    """Rebuild the index by scanning the store directory.

    Only top-level ``*.md`` files are read; subdirectories are skipped.
    Notes without a name in their front-matter are indexed under the
    file stem. Nothing is persisted unless every file parses.

    Args:
        directory: Store directory

    Returns:
        The rebuilt index, already persisted

    Raises:
        ParseError: If any note file has malformed front-matter
    """
    index: NoteIndex = {}
    for path in sorted(directory.iterdir()):
        if path.is_dir():
            logger.debug("index_skip_dir", extra={"path": str(path)})
            continue
        if path.suffix != ".md":
            continue

        logger.debug("index_read_file", extra={"path": str(path)})
        note = parse_note(path.read_bytes())
        name = note.name.strip() or path.stem
        index[name] = entry_for(note)

    persist_index(directory, index)
    logger.info("index_rebuilt", extra={"path": str(directory), "count": len(index)})
    return index


def persist_index(directory: Path, index: NoteIndex) -> None:
    """Overwrite the index file with the given mapping.

    Args:
        directory: Store directory
        index: Complete index to write
    """
    index_path(directory).write_bytes(INDEX_ADAPTER.dump_json(index))
