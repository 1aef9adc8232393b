"""Git client adapter for bootstrapping and syncing profile directories.

The git CLI offers no structured error reporting, so outcomes are told
apart by looking for known markers in its combined output. All of that
string matching lives in this module behind ``classify_clone_output``
and ``classify_sync_output``, which work on canned output in tests.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from connote.dependencies import (
    GitCommandError,
    InvalidRemoteError,
    NonEmptyTargetError,
    logger,
)
from connote.remote.models import CloneOutcome, GitResult

EMPTY_CLONE_MARKER = "cloned an empty repository"
READ_FAILED_MARKER = "Could not read from remote repository"
NON_EMPTY_DIR_MARKER = "exists and is not an empty directory"


class GitRunner(Protocol):
    """Runs one git command in a working directory."""

    def __call__(self, args: Sequence[str], cwd: Path) -> GitResult: ...


class SubprocessGitRunner:
    """GitRunner backed by the git executable."""

    def __init__(self, binary: str = "git") -> None:
        self.binary = binary

    def __call__(self, args: Sequence[str], cwd: Path) -> GitResult:
        completed = subprocess.run(
            [self.binary, *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        return GitResult(returncode=completed.returncode, output=completed.stdout or "")


def _raise_for_output(args: Sequence[str], result: GitResult) -> None:
    if result.returncode == 0:
        return
    if READ_FAILED_MARKER in result.output:
        raise InvalidRemoteError("origin url is invalid or is not accessible")
    if NON_EMPTY_DIR_MARKER in result.output:
        raise NonEmptyTargetError("non-empty target directory for clone")
    raise GitCommandError(list(args), result.returncode, result.output)


def classify_clone_output(result: GitResult, args: Sequence[str] = ("clone",)) -> CloneOutcome:
    """Classify the result of ``git clone``.

    Args:
        result: Exit status and combined output of the clone
        args: Arguments the clone ran with, for error messages

    Returns:
        CloneOutcome.EMPTY if the remote had no commits, else CLONED

    Raises:
        InvalidRemoteError: If the remote could not be read
        NonEmptyTargetError: If the target directory already had files
        GitCommandError: For any other non-zero exit
    """
    _raise_for_output(args, result)
    if EMPTY_CLONE_MARKER in result.output:
        return CloneOutcome.EMPTY
    return CloneOutcome.CLONED


def classify_sync_output(result: GitResult, args: Sequence[str]) -> None:
    """Raise the matching RemoteError if a pull or push failed."""
    _raise_for_output(args, result)


def clone_repository(
    url: str, directory: Path, runner: GitRunner | None = None
) -> CloneOutcome:
    """Clone a remote into a profile directory.

    Args:
        url: Remote repository URL
        directory: Target directory, created if missing
        runner: Git runner, defaults to the git executable

    Returns:
        Outcome of the clone
    """
    runner = runner or SubprocessGitRunner()
    directory.mkdir(parents=True, exist_ok=True)

    args = ["clone", url, "."]
    result = runner(args, directory)
    logger.info(
        "git_clone_finished",
        extra={"remote": url, "path": str(directory), "returncode": result.returncode},
    )
    return classify_clone_output(result, args)


def sync_repository(
    directory: Path,
    runner: GitRunner | None = None,
    remote: str = "origin",
    branch: str | None = None,
) -> None:
    """Pull remote changes with rebase, then push local commits.

    Nothing is committed here; only commits already made in the
    directory are pushed.

    Args:
        directory: Profile directory holding a git checkout
        runner: Git runner, defaults to the git executable
        remote: Remote name
        branch: Branch to pull and push, defaults to the upstream branch
    """
    runner = runner or SubprocessGitRunner()
    refspec = [branch] if branch else []

    for args in (["pull", "--rebase", remote, *refspec], ["push", remote, *refspec]):
        result = runner(args, directory)
        logger.info(
            "git_sync_step",
            extra={"command": args[0], "path": str(directory), "returncode": result.returncode},
        )
        classify_sync_output(result, args)
