"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from connote import __version__
from connote.config import get_settings
from connote.dependencies import logger
from connote.notes.router import router as notes_router
from connote.remote.git import SubprocessGitRunner
from connote.store import NoteStore

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the profile's store once for the lifetime of the app."""
    if getattr(app.state, "store", None) is None:
        app.state.store = NoteStore.open(
            settings.profile,
            settings.store_dir,
            remote=settings.git_remote,
            git=SubprocessGitRunner(settings.git_binary),
        )
    logger.info(
        "app_startup",
        extra={"host": settings.host, "port": settings.port, "profile": app.state.store.profile},
    )
    yield


def create_app(store: NoteStore | None = None) -> FastAPI:
    """Build the application, optionally around an already-open store."""
    app = FastAPI(title="connote", version=__version__, lifespan=lifespan)
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(notes_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        store = app.state.store
        return {
            "status": "healthy" if store is not None else "starting",
            "version": __version__,
            "notes_dir": str(store.directory if store is not None else settings.store_dir),
        }

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {"name": "connote", "version": __version__, "docs": "/docs"}

    return app


app = create_app()
