"""FastAPI router exposing the note store under /v1.

Every handler is ``async def`` so store calls run one at a time on the
event loop thread; the store itself does no locking.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from connote.dependencies import (
    ConflictError,
    CorruptIndexError,
    GitCommandError,
    InvalidNameError,
    InvalidQueryError,
    InvalidRemoteError,
    NonEmptyTargetError,
    NoteStoreError,
    NotFoundError,
    ParseError,
    RemoteError,
    logger,
)
from connote.notes.models import ErrorDetail, ErrorResponse, NoteDocument, NoteWrite
from connote.search.dates import created_range, expand_note_name
from connote.search.models import NoteQuery
from connote.store import NoteStore, StoreStats

router = APIRouter(prefix="/v1", tags=["notes"])

HTTP_422_UNPROCESSABLE = 422

# Most specific classes first.
ERROR_STATUS: list[tuple[type[NoteStoreError], int, str]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (ConflictError, status.HTTP_409_CONFLICT, "conflict"),
    (InvalidNameError, HTTP_422_UNPROCESSABLE, "invalid_name"),
    (ParseError, HTTP_422_UNPROCESSABLE, "parse_error"),
    (InvalidQueryError, HTTP_422_UNPROCESSABLE, "invalid_query"),
    (CorruptIndexError, status.HTTP_500_INTERNAL_SERVER_ERROR, "corrupt_index"),
    (InvalidRemoteError, status.HTTP_502_BAD_GATEWAY, "invalid_remote"),
    (NonEmptyTargetError, status.HTTP_409_CONFLICT, "non_empty_target"),
    (GitCommandError, status.HTTP_502_BAD_GATEWAY, "git_failed"),
    (RemoteError, status.HTTP_502_BAD_GATEWAY, "remote_error"),
]


def get_note_store(request: Request) -> NoteStore:
    """FastAPI dependency provider for the application's NoteStore."""
    return request.app.state.store


def error_response(status_code: int, message: str, code: str) -> HTTPException:
    """Build an HTTPException carrying an ErrorResponse body."""
    error_type = "invalid_request_error" if status_code < 500 else "server_error"
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(
            error=ErrorDetail(message=message, type=error_type, code=code)
        ).model_dump(),
    )


@contextmanager
def store_errors(operation: str, note: str = "") -> Iterator[None]:
    """Translate store exceptions into HTTP errors.

    Args:
        operation: Operation name for logging
        note: Note name involved, if any
    """
    try:
        yield
    except NoteStoreError as e:
        status_code, code = status.HTTP_500_INTERNAL_SERVER_ERROR, "store_error"
        for error_class, mapped_status, mapped_code in ERROR_STATUS:
            if isinstance(e, error_class):
                status_code, code = mapped_status, mapped_code
                break
        logger.info(
            "note_operation_rejected",
            extra={"operation": operation, "note": note, "error": str(e), "code": code},
        )
        raise error_response(status_code, str(e), code) from e
    except OSError as e:
        logger.error(
            "note_operation_failed",
            extra={"operation": operation, "note": note, "error": str(e)},
            exc_info=True,
        )
        raise error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, f"Error performing {operation}: {e!s}", "io_error"
        ) from e


@router.get("/notes", response_model=list[NoteDocument])
async def search_notes(
    name: str = "",
    include: list[str] = Query(default=[]),
    exclude: list[str] = Query(default=[]),
    after: str = "",
    before: str = "",
    full: bool = False,
    store: NoteStore = Depends(get_note_store),
) -> list[NoteDocument]:
    """List notes matching a name pattern, tags and creation range.

    Args:
        name: Regex searched in note names
        include: Tags every result must carry
        exclude: Tags no result may carry
        after: Time spec of the lower creation bound ('today', '-3', '14-02-2022')
        before: Time spec of the upper creation bound
        full: Load whole notes instead of index data
        store: NoteStore dependency

    Returns:
        Matching notes, most recently created first
    """
    try:
        created_after, created_before = created_range(after, before)
    except ValueError as e:
        raise error_response(
            HTTP_422_UNPROCESSABLE, str(e), "invalid_time_spec"
        ) from e

    query = NoteQuery(
        name_like=name,
        include_tags=include,
        exclude_tags=exclude,
        created_after=created_after,
        created_before=created_before,
    )
    with store_errors("search"):
        return store.search(query, load_full=full)


@router.get("/notes/{name:path}", response_model=NoteDocument)
async def get_note(name: str, store: NoteStore = Depends(get_note_store)) -> NoteDocument:
    """Read one note; '@today' style names resolve to day notes."""
    name = expand_note_name(name)
    with store_errors("get", name):
        return store.get(name)


@router.post("/notes", response_model=NoteDocument, status_code=status.HTTP_201_CREATED)
async def create_note(body: NoteWrite, store: NoteStore = Depends(get_note_store)) -> NoteDocument:
    """Create a note, failing with 409 if the name is taken."""
    name = expand_note_name(body.name)
    note = NoteDocument(**body.model_dump(exclude={"name"}), name=name)
    with store_errors("create", name):
        return store.put(note, create_only=True)


@router.put("/notes/{name:path}", response_model=NoteDocument)
async def put_note(
    name: str,
    body: NoteWrite,
    create_only: bool = False,
    store: NoteStore = Depends(get_note_store),
) -> NoteDocument:
    """Create or replace a note; the name in the path wins over the body."""
    name = expand_note_name(name)
    note = NoteDocument(**body.model_dump(exclude={"name"}), name=name)
    with store_errors("put", name):
        return store.put(note, create_only=create_only)


@router.delete("/notes/{name:path}")
async def delete_note(name: str, store: NoteStore = Depends(get_note_store)) -> dict[str, str]:
    """Delete a note by name."""
    name = expand_note_name(name)
    with store_errors("delete", name):
        store.delete(name)
    return {"status": "deleted", "note": name}


@router.get("/store/stats", response_model=StoreStats)
async def store_stats(store: NoteStore = Depends(get_note_store)) -> StoreStats:
    """Profile, directory and note count."""
    return store.stats()


@router.post("/store/reindex", response_model=StoreStats)
async def reindex_store(store: NoteStore = Depends(get_note_store)) -> StoreStats:
    """Rebuild the index from the note files."""
    with store_errors("reindex"):
        store.reindex()
    return store.stats()


@router.post("/store/sync")
async def sync_store(
    remote: str = "origin",
    branch: str | None = None,
    store: NoteStore = Depends(get_note_store),
) -> dict[str, str]:
    """Pull with rebase from the remote, then push."""
    with store_errors("sync"):
        store.sync(remote=remote, branch=branch)
    return {"status": "synced", "remote": remote}
