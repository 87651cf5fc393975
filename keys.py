"""Input adapter: raw keyboard keys and button labels to engine actions.

The engine never sees raw key names.  Anything not listed here maps to
``None`` and is dropped by ``translate_keys``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from models import (
    Action,
    BackspaceAction,
    ClearAction,
    DecimalAction,
    DigitAction,
    EqualsAction,
    Operation,
    OperatorAction,
)

logger = logging.getLogger(__name__)

# Keyboard ``*`` and ``/`` stand in for the × and ÷ symbols.
KEY_OPERATIONS: dict[str, Operation] = {
    "+": Operation.ADD,
    "-": Operation.SUBTRACT,
    "*": Operation.MULTIPLY,
    "/": Operation.DIVIDE,
}

BUTTON_OPERATIONS: dict[str, Operation] = {
    "+": Operation.ADD,
    "-": Operation.SUBTRACT,
    "−": Operation.SUBTRACT,
    "×": Operation.MULTIPLY,
    "÷": Operation.DIVIDE,
}

EQUALS_KEYS = frozenset({"Enter", "="})
CLEAR_KEY = "Escape"
BACKSPACE_KEY = "Backspace"
CLEAR_BUTTON = "AC"


def _digit(text: str) -> DigitAction | None:
    if len(text) == 1 and "0" <= text <= "9":
        return DigitAction(digit=int(text))
    return None


def action_for_key(key: str) -> Action | None:
    """Map a keyboard key name (as in a ``keydown`` event) to an action."""
    digit = _digit(key)
    if digit is not None:
        return digit
    if key == ".":
        return DecimalAction()
    if key in KEY_OPERATIONS:
        return OperatorAction(operation=KEY_OPERATIONS[key])
    if key in EQUALS_KEYS:
        return EqualsAction()
    if key == CLEAR_KEY:
        return ClearAction()
    if key == BACKSPACE_KEY:
        return BackspaceAction()
    return None


def action_for_button(label: str) -> Action | None:
    """Map an on-screen button label to an action.  No backspace button."""
    digit = _digit(label)
    if digit is not None:
        return digit
    if label == ".":
        return DecimalAction()
    if label in BUTTON_OPERATIONS:
        return OperatorAction(operation=BUTTON_OPERATIONS[label])
    if label == "=":
        return EqualsAction()
    if label == CLEAR_BUTTON:
        return ClearAction()
    return None


def translate_keys(keys: Iterable[str]) -> list[Action]:
    """Translate keys in order, dropping the ones with no action."""
    actions: list[Action] = []
    for key in keys:
        action = action_for_key(key)
        if action is None:
            logger.debug("ignoring unmapped key %r", key)
            continue
        actions.append(action)
    return actions
