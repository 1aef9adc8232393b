"""Models for git remote operations."""

from enum import Enum

from pydantic import BaseModel


class CloneOutcome(str, Enum):
    """Successful outcomes of cloning a profile's remote."""

    CLONED = "cloned"
    EMPTY = "empty"


class GitResult(BaseModel):
    """Exit status and combined stdout/stderr of one git invocation."""

    returncode: int
    output: str = ""
