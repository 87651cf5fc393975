"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from api import router, set_store
from config import Settings, load_settings
from store import SessionStore

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def create_app(
    store: SessionStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store and settings for testing; settings are read
    from the environment when omitted.
    """
    if settings is None:
        settings = load_settings()
    if store is None:
        store = SessionStore(
            engine=settings.engine(), max_sessions=settings.max_sessions
        )

    configure_logging(settings.log_level)
    set_store(store)

    app = FastAPI(
        title="Keypad Calculator API",
        description=(
            "Interactive calculator sessions driven by discrete key actions. "
            "Arithmetic chains left to right without operator precedence, "
            "results are trimmed to a fixed number of decimal places, and "
            "each session keeps a short history of completed calculations."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    logger.info(
        "app ready: history_limit=%d precision=%d max_sessions=%d",
        store.engine.history_limit, store.engine.precision, store.max_sessions,
    )
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
