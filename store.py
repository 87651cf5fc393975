"""In-memory calculator session store.

Each session owns one calculator state.  All transitions go through the
store, which runs the engine, validates every produced state against the
contract, and keeps timestamp bookkeeping.  Nothing is persisted.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Iterable

from pydantic import BaseModel, Field

from contract import CalculatorContract, ValidationReport, build_contract
from engine import CalculatorEngine
from formatting import format_number, render_history
from keys import translate_keys
from models import Action, CalculatorState, Operation

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Session(BaseModel):
    """A calculator session as held by the store."""

    id: str = Field(default_factory=_new_id)
    state: CalculatorState = Field(default_factory=CalculatorState)
    dark: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class PendingView(BaseModel):
    """Pending operation with the operand in display text, e.g. ``"Infinity"``."""

    operand: str
    operation: Operation


class SessionView(BaseModel):
    """What the presentation layer renders for a session."""

    id: str
    display: str
    history: list[str]
    waiting_for_operand: bool
    pending: PendingView | None = None
    dark: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(cls, session: Session) -> SessionView:
        state = session.state
        pending = None
        if state.pending is not None:
            pending = PendingView(
                operand=format_number(state.pending.operand),
                operation=state.pending.operation,
            )
        return cls(
            id=session.id,
            display=state.display,
            history=render_history(state.history),
            waiting_for_operand=state.waiting_for_operand,
            pending=pending,
            dark=session.dark,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionLimitError(Exception):
    """Raised when the store already holds its maximum number of sessions."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Session limit reached: {limit}")


class StateValidationError(Exception):
    """Raised when the engine produces a state that breaks the contract."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report
        super().__init__(report.summary())


# ---------------------------------------------------------------------------
# Session store
# ---------------------------------------------------------------------------

class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(
        self,
        engine: CalculatorEngine | None = None,
        max_sessions: int = 1000,
    ) -> None:
        self.engine = engine or CalculatorEngine()
        self.contract: CalculatorContract = build_contract(self.engine)
        self.max_sessions = max_sessions
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    # -- helpers -------------------------------------------------------------

    def _validate_or_raise(self, state: CalculatorState) -> None:
        report = self.contract.validate_state(state)
        if not report.passed:
            logger.error("contract violation: %s", report.summary())
            raise StateValidationError(report)

    def _get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def _replace(self, session: Session, **changes) -> Session:
        changes["updated_at"] = _utcnow()
        updated = session.model_copy(update=changes)
        self._sessions[session.id] = updated
        return updated

    # -- lifecycle -----------------------------------------------------------

    def create(self) -> Session:
        """Start a new session with a fresh calculator."""
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise SessionLimitError(self.max_sessions)
            now = _utcnow()
            session = Session(
                id=_new_id(),
                state=self.engine.initial_state(),
                created_at=now,
                updated_at=now,
            )
            self._sessions[session.id] = session
        logger.info("session %s created", session.id)
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            return self._get(session_id)

    def list(self, *, offset: int = 0, limit: int = 50) -> list[Session]:
        """Sessions, most recently created first."""
        with self._lock:
            items = sorted(
                self._sessions.values(), key=lambda s: s.created_at, reverse=True
            )
        return items[offset : offset + limit]

    def delete(self, session_id: str) -> Session:
        """Delete a session and return its final record."""
        with self._lock:
            session = self._get(session_id)
            del self._sessions[session_id]
        logger.info("session %s deleted", session_id)
        return session

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def clear(self) -> None:
        """Remove all sessions (useful for testing)."""
        with self._lock:
            self._sessions.clear()

    # -- calculator ----------------------------------------------------------

    def apply(self, session_id: str, actions: Iterable[Action]) -> Session:
        """Reduce ``actions`` into the session's state, in order."""
        with self._lock:
            session = self._get(session_id)
            state = session.state
            applied = 0
            for action in actions:
                state = self.engine.apply(state, action)
                self._validate_or_raise(state)
                applied += 1
            updated = self._replace(session, state=state)
        logger.debug(
            "session %s applied %d action(s), display=%s",
            session_id, applied, state.display,
        )
        return updated

    def press_keys(self, session_id: str, keys: Iterable[str]) -> Session:
        """Translate keyboard keys and apply the resulting actions."""
        return self.apply(session_id, translate_keys(keys))

    def toggle_theme(self, session_id: str) -> Session:
        with self._lock:
            session = self._get(session_id)
            return self._replace(session, dark=not session.dark)
