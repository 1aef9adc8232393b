"""Directory-backed note store.

A store keeps one markdown file per note plus a JSON index of every
note's tags and creation time. Writes go to the note file first and to
the index second, so a crash in between leaves an unindexed file behind
rather than an index entry without a file. ``reindex`` repairs that.

The store is meant to be owned by a single process and used from a
single thread; callers sharing one instance across threads must wrap
it in their own lock.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from connote.dependencies import (
    ConflictError,
    InvalidProfileError,
    NoteStoreError,
    NotFoundError,
    logger,
)
from connote.index.models import NoteIndex
from connote.index.storage import entry_for, load_index, persist_index, rebuild_index
from connote.notes.markdown import parse_note, to_markdown, validate_note
from connote.notes.models import NoteDocument
from connote.remote.git import GitRunner, clone_repository, sync_repository
from connote.remote.models import CloneOutcome
from connote.search.engine import run_query
from connote.search.models import NoteQuery
from connote.store.models import StoreStats

PROFILE_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9\-_]+$")


def _is_missing_or_empty(directory: Path) -> bool:
    return not directory.exists() or not any(directory.iterdir())


@dataclass
class NoteStore:
    """Notes of one profile, stored as markdown files in a directory."""

    directory: Path
    profile: str
    index: NoteIndex = field(default_factory=dict)
    log: logging.Logger = logger
    git: GitRunner | None = None

    @classmethod
    def open(
        cls,
        profile: str,
        directory: Path | str,
        remote: str = "",
        log: logging.Logger | None = None,
        git: GitRunner | None = None,
    ) -> "NoteStore":
        """Open a profile's store, cloning its remote on first use.

        The directory is created when missing. With a remote URL and a
        missing or empty directory, the remote is cloned into it first.
        The index is then loaded, or rebuilt when no index file exists;
        it stays empty when the clone produced an empty repository.

        Args:
            profile: Profile name, e.g. 'work'
            directory: Directory holding the profile's notes
            remote: Optional git remote URL to clone from
            log: Logger to report to, defaults to the application logger
            git: Git runner, defaults to the git executable

        Returns:
            Ready-to-use NoteStore

        Raises:
            InvalidProfileError: If the profile name is malformed
            NoteStoreError: If the directory path is a regular file
            RemoteError: If cloning the remote fails
            CorruptIndexError: If the index file cannot be loaded
            ParseError: If the index had to be rebuilt and a note is malformed
        """
        profile = profile.strip()
        remote = remote.strip()
        if not PROFILE_PATTERN.fullmatch(profile):
            raise InvalidProfileError(
                f"invalid profile name '{profile}', must match '{PROFILE_PATTERN.pattern}'"
            )

        directory = Path(directory).expanduser()
        if directory.exists() and not directory.is_dir():
            raise NoteStoreError(f"profile path '{directory}' is not a directory")

        store = cls(directory=directory, profile=profile, log=log or logger, git=git)
        if remote and _is_missing_or_empty(directory):
            outcome = clone_repository(remote, directory, runner=git)
            if outcome is CloneOutcome.EMPTY:
                store.log.info("profile_cloned_empty", extra={"profile": profile, "remote": remote})
                return store

        directory.mkdir(parents=True, exist_ok=True)
        store.index = load_index(directory)
        store.log.info(
            "store_opened",
            extra={"profile": profile, "path": str(directory), "count": len(store.index)},
        )
        return store

    def note_path(self, name: str) -> Path:
        """Return the markdown file location of a note."""
        return self.directory / f"{name.strip()}.md"

    def get(self, name: str) -> NoteDocument:
        """Read a note by name.

        Raises:
            NotFoundError: If no note with this name is indexed
            ParseError: If the note file has malformed front-matter
        """
        name = name.strip()
        if name not in self.index:
            raise NotFoundError(f"note with name '{name}' not found")
        return parse_note(self.note_path(name).read_bytes())

    def put(self, note: NoteDocument, create_only: bool = False) -> NoteDocument:
        """Create or replace a note.

        The note is validated, written to its file, and then recorded in
        the index, which is persisted before returning. The caller's
        instance is not modified.

        Args:
            note: Note to save
            create_only: Refuse to replace an existing note

        Returns:
            The note as stored, with normalized name, tags and timestamps

        Raises:
            InvalidNameError: If the note name is malformed
            ConflictError: If create_only is set and the name is taken
        """
        note = note.model_copy(deep=True)
        created_supplied = note.created_at is not None
        validate_note(note)

        existing = self.index.get(note.name)
        if existing is not None and create_only:
            raise ConflictError(f"note with name '{note.name}' already exists")
        if existing is not None and not created_supplied:
            note.created_at = datetime.fromtimestamp(existing.created_at, UTC)
        note.updated_at = datetime.now(UTC)

        path = self.note_path(note.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(to_markdown(note), encoding="utf-8")

        self.index[note.name] = entry_for(note)
        persist_index(self.directory, self.index)
        self.log.info(
            "note_saved",
            extra={"note": note.name, "is_new": existing is None, "tags": note.tags},
        )
        return note

    def delete(self, name: str) -> None:
        """Delete a note by name.

        The index entry is removed and persisted before the file is
        deleted; a file that is already gone is not an error.

        Raises:
            NotFoundError: If no note with this name is indexed
        """
        name = name.strip()
        if name not in self.index:
            raise NotFoundError(f"note with name '{name}' not found")

        del self.index[name]
        persist_index(self.directory, self.index)
        self.note_path(name).unlink(missing_ok=True)
        self.log.info("note_deleted", extra={"note": name})

    def search(self, query: NoteQuery | None = None, load_full: bool = False) -> list[NoteDocument]:
        """Find notes matching a query, most recently created first.

        Without load_full the results come from the index alone and carry
        only name, tags and creation time.

        Raises:
            InvalidQueryError: If the name pattern is not a valid regex
        """
        matches = run_query(query or NoteQuery(), self.index)
        if load_full:
            return [self.get(name) for name, _ in matches]
        return [
            NoteDocument(
                name=name,
                tags=sorted(entry.tags),
                created_at=datetime.fromtimestamp(entry.created_at, UTC),
            )
            for name, entry in matches
        ]

    def reindex(self) -> None:
        """Rebuild the index from the note files.

        On failure the in-memory index is left as it was.
        """
        self.index = rebuild_index(self.directory)

    def stats(self) -> StoreStats:
        """Return profile name, directory and note count."""
        return StoreStats(profile=self.profile, directory=str(self.directory), count=len(self.index))

    def import_notes(
        self, path: Path | str, tags: Iterable[str] = (), recursive: bool = False
    ) -> list[NoteDocument]:
        """Load notes from a markdown file or a directory of them.

        Notes without a name in their front-matter are named after the
        file. Every note is created with create_only, so importing a name
        that already exists fails.

        Args:
            path: Markdown file, or directory of ``*.md`` files
            tags: Extra tags added to every imported note
            recursive: Descend into subdirectories

        Returns:
            The stored notes, in file order

        Raises:
            FileNotFoundError: If the path does not exist
        """
        path = Path(path).expanduser()
        if path.is_dir():
            candidates = path.rglob("*.md") if recursive else path.glob("*.md")
            files = sorted(f for f in candidates if f.is_file())
        elif path.exists():
            files = [path]
        else:
            raise FileNotFoundError(f"path '{path}' does not exist")

        extra_tags = list(tags)
        imported = []
        for file in files:
            note = parse_note(file.read_bytes())
            if not note.name.strip():
                note.name = file.stem
            note.tags = [*note.tags, *extra_tags]
            imported.append(self.put(note, create_only=True))

        self.log.info("notes_imported", extra={"path": str(path), "count": len(imported)})
        return imported

    def sync(self, remote: str = "origin", branch: str | None = None) -> None:
        """Pull with rebase from the remote, then push local commits."""
        sync_repository(self.directory, runner=self.git, remote=remote, branch=branch)
