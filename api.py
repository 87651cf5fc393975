"""FastAPI REST endpoints for calculator sessions.

Routes
------
POST   /sessions                 Start a new session
GET    /sessions                 List sessions
GET    /sessions/{id}            Current display and history
POST   /sessions/{id}/actions    Apply engine actions in order
POST   /sessions/{id}/keys       Press keyboard keys in order
POST   /sessions/{id}/theme      Toggle light/dark theme
DELETE /sessions/{id}            End a session
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from models import Action
from store import (
    SessionLimitError,
    SessionNotFoundError,
    SessionStore,
    SessionView,
    StateValidationError,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class ActionBatch(BaseModel):
    actions: list[Action] = Field(..., min_length=1, max_length=1000)


class KeyBatch(BaseModel):
    keys: list[str] = Field(..., min_length=1, max_length=1000)


class SessionListResponse(BaseModel):
    items: list[SessionView]
    total: int


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def _contract_error(e: StateValidationError) -> HTTPException:
    return HTTPException(status_code=500, detail=str(e))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=SessionView, status_code=201)
def create_session() -> SessionView:
    """Start a new session with display '0' and empty history."""
    store = get_store()
    try:
        return SessionView.of(store.create())
    except SessionLimitError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get("", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    store = get_store()
    items = [SessionView.of(s) for s in store.list(offset=offset, limit=limit)]
    return SessionListResponse(items=items, total=store.count())


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    store = get_store()
    try:
        return SessionView.of(store.get(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/actions", response_model=SessionView)
def apply_actions(session_id: str, payload: ActionBatch) -> SessionView:
    """Apply a batch of actions; the response is the state after the last one."""
    store = get_store()
    try:
        return SessionView.of(store.apply(session_id, payload.actions))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except StateValidationError as e:
        raise _contract_error(e) from e


@router.post("/{session_id}/keys", response_model=SessionView)
def press_keys(session_id: str, payload: KeyBatch) -> SessionView:
    """Press keyboard keys; keys with no mapping are ignored."""
    store = get_store()
    try:
        return SessionView.of(store.press_keys(session_id, payload.keys))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except StateValidationError as e:
        raise _contract_error(e) from e


@router.post("/{session_id}/theme", response_model=SessionView)
def toggle_theme(session_id: str) -> SessionView:
    store = get_store()
    try:
        return SessionView.of(store.toggle_theme(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.delete("/{session_id}", response_model=SessionView)
def delete_session(session_id: str) -> SessionView:
    """End a session and return its final view."""
    store = get_store()
    try:
        return SessionView.of(store.delete(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)
