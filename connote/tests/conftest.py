"""Shared pytest fixtures."""

import os
import tempfile
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables before importing app modules
load_dotenv()

# Keep the module-level app away from the real ~/.connote
if not os.environ.get("NOTES_HOME"):
    os.environ["NOTES_HOME"] = tempfile.mkdtemp(prefix="connote-test-")

from fastapi.testclient import TestClient  # noqa: E402

from connote.main import create_app  # noqa: E402
from connote.notes.models import NoteDocument  # noqa: E402
from connote.remote.models import GitResult  # noqa: E402
from connote.store import NoteStore  # noqa: E402

SAMPLE_CREATED_AT = datetime(2022, 2, 14, 4, 8, 15, tzinfo=UTC)


class FakeGitRunner:
    """GitRunner returning canned results and recording every call."""

    def __init__(self, *results: GitResult, files: dict[str, str] | None = None) -> None:
        self.results = list(results)
        self.files = files or {}
        self.calls: list[tuple[list[str], Path]] = []

    def __call__(self, args: Sequence[str], cwd: Path) -> GitResult:
        self.calls.append((list(args), cwd))
        result = self.results.pop(0) if self.results else GitResult(returncode=0)
        if args and args[0] == "clone" and result.returncode == 0:
            for name, text in self.files.items():
                (cwd / name).write_text(text)
        return result


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """Directory for a test profile (not created yet)."""
    return tmp_path / "notes"


@pytest.fixture
def store(notes_dir: Path) -> NoteStore:
    """Open an empty store for the 'test' profile."""
    return NoteStore.open("test", notes_dir)


@pytest.fixture
def sample_note() -> NoteDocument:
    """A note as a caller would hand it to the store."""
    return NoteDocument(
        name="meeting-notes",
        tags=["work", "status:open"],
        content="# Meeting\n\nDiscussed the roadmap.",
    )


@pytest.fixture
def client(store: NoteStore) -> TestClient:
    """Create a FastAPI test client around the test store."""
    return TestClient(create_app(store=store))
