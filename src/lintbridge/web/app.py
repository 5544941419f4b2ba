"""FastAPI application factory for the lintbridge results API."""

from __future__ import annotations

from fastapi import FastAPI

from lintbridge import __version__
from lintbridge.config import EngineConfig
from lintbridge.session.manager import SessionManager
from lintbridge.storage.db import get_db


def create_app(
    config: EngineConfig | None = None,
    manager: SessionManager | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or EngineConfig.load()

    app = FastAPI(
        title="lintbridge",
        version=__version__,
        docs_url="/api/docs",
    )

    # Store config and session in app state; the db opens on startup
    app.state.config = config
    app.state.manager = manager or SessionManager(config)

    from lintbridge.web.api.diagnostics import router as diagnostics_router
    from lintbridge.web.api.reports import router as reports_router
    from lintbridge.web.api.status import router as status_router

    app.include_router(status_router, prefix="/api")
    app.include_router(diagnostics_router, prefix="/api")
    app.include_router(reports_router, prefix="/api")

    @app.on_event("startup")
    async def startup() -> None:
        app.state.db = await get_db(config.data_dir / "lintbridge.db")

    @app.on_event("shutdown")
    async def shutdown() -> None:
        app.state.manager.close()
        if hasattr(app.state, "db"):
            await app.state.db.close()

    return app
