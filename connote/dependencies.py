"""Shared dependencies: structured logger and the note store error taxonomy."""

import json
import logging
from typing import Any

from connote.config import get_settings

# Attributes every LogRecord carries; anything else was passed through `extra=`.
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }
        data.update({k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS})
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""
    settings = get_settings()
    logger = logging.getLogger("connote")
    logger.setLevel(getattr(logging, settings.log_level.upper()))
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger


logger = setup_logging()


class NoteStoreError(Exception):
    """Base exception for note store operations."""

    pass


class NotFoundError(NoteStoreError):
    """Raised when a note name is absent from the index."""

    pass


class ConflictError(NoteStoreError):
    """Raised when a create-only write hits an existing note."""

    pass


class InvalidNameError(NoteStoreError):
    """Raised when a note name does not match the name pattern."""

    pass


class InvalidProfileError(NoteStoreError):
    """Raised when a profile name is empty or malformed."""

    pass


class ParseError(NoteStoreError):
    """Raised when a note's front-matter block cannot be decoded."""

    pass


class CorruptIndexError(NoteStoreError):
    """Raised when the index file is a directory or cannot be decoded."""

    pass


class InvalidQueryError(NoteStoreError):
    """Raised when a search query carries an invalid name pattern."""

    pass


class RemoteError(NoteStoreError):
    """Base exception for git remote operations."""

    pass


class InvalidRemoteError(RemoteError):
    """Raised when the remote URL is invalid or not accessible."""

    pass


class NonEmptyTargetError(RemoteError):
    """Raised when the clone target already holds files."""

    pass


class GitCommandError(RemoteError):
    """Raised when git exits non-zero for an unrecognised reason."""

    def __init__(self, args: list[str], returncode: int, output: str) -> None:
        super().__init__(f"git {' '.join(args)} exited with status {returncode}: {output.strip()}")
        self.command = args
        self.returncode = returncode
        self.output = output
