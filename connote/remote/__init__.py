"""Git remote bootstrap and sync for profile directories."""

from connote.remote.git import (
    GitRunner,
    SubprocessGitRunner,
    classify_clone_output,
    clone_repository,
    sync_repository,
)
from connote.remote.models import CloneOutcome, GitResult

__all__ = [
    "CloneOutcome",
    "GitResult",
    "GitRunner",
    "SubprocessGitRunner",
    "classify_clone_output",
    "clone_repository",
    "sync_repository",
]
