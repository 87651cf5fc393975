"""Shared fixtures for calculator tests."""

from __future__ import annotations

from typing import Callable

import pytest

from engine import CalculatorEngine
from keys import action_for_button
from models import BackspaceAction, CalculatorState
from store import SessionStore


def _tokens_to_actions(sequence: str) -> list:
    """Space-separated button labels; ``⌫`` stands for backspace."""
    actions = []
    for token in sequence.split():
        if token == "⌫":
            actions.append(BackspaceAction())
            continue
        action = action_for_button(token)
        assert action is not None, f"unknown button {token!r}"
        actions.append(action)
    return actions


@pytest.fixture
def engine() -> CalculatorEngine:
    return CalculatorEngine()


@pytest.fixture
def press(engine) -> Callable[..., CalculatorState]:
    """Press buttons, e.g. ``press("3 + 4 × 2 =")``."""

    def _press(sequence: str, state: CalculatorState | None = None) -> CalculatorState:
        return engine.run(_tokens_to_actions(sequence), state)

    return _press


@pytest.fixture
def store(engine) -> SessionStore:
    return SessionStore(engine=engine, max_sessions=10)


@pytest.fixture
def six_calculations() -> list[str]:
    """Six equals-producing button sequences with distinct results."""
    return [
        "1 + 1 =",
        "2 + 2 =",
        "3 + 3 =",
        "4 + 4 =",
        "5 + 5 =",
        "6 + 6 =",
    ]
