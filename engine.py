"""Calculator engine: a pure reducer over calculator state.

``CalculatorEngine.apply(state, action)`` returns the next state and
never mutates its input.  Arithmetic chains strictly left to right with
no operator precedence: each new operator folds the pending one against
the operand just entered, so ``3 + 4 × 2 =`` evaluates to ``14``.

Decision branches are annotated with their branch-IDs (see contract.py
``BranchSpec``) so white-box tests can trace coverage back to the
contract.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple

from formatting import DEFAULT_PRECISION, format_number, parse_display, trimmed
from models import (
    Action,
    BackspaceAction,
    CalculatorState,
    ClearAction,
    DecimalAction,
    DigitAction,
    EqualsAction,
    HistoryEntry,
    Operation,
    OperatorAction,
    PendingOperation,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 5


class Combination(NamedTuple):
    """Outcome of folding two operands: raw value and its trimmed text."""

    value: float
    text: str


def combine(
    left: float,
    right: float,
    operation: Operation | None,
    precision: int = DEFAULT_PRECISION,
) -> Combination:
    """Apply ``operation`` to two operands.

    Branches: COMBINE-ADD, COMBINE-SUB, COMBINE-MUL, COMBINE-DIV,
              COMBINE-DIV-ZERO, COMBINE-NO-OP, COMBINE-NON-FINITE
    """
    if operation is None:                                        # COMBINE-NO-OP
        return Combination(right, format_number(right))

    if operation == Operation.ADD:                               # COMBINE-ADD
        value = left + right
    elif operation == Operation.SUBTRACT:                        # COMBINE-SUB
        value = left - right
    elif operation == Operation.MULTIPLY:                        # COMBINE-MUL
        value = left * right
    elif right != 0:                                             # COMBINE-DIV
        value = left / right
    else:                                                        # COMBINE-DIV-ZERO
        logger.debug("division by zero: %s ÷ 0 -> 0", format_number(left))
        value = 0.0

    if not math.isfinite(value):                                 # COMBINE-NON-FINITE
        logger.debug(
            "non-finite result for %s %s %s -> 0",
            format_number(left), operation.value, format_number(right),
        )
        value = 0.0

    return Combination(value, trimmed(value, precision))


@dataclass(frozen=True)
class CalculatorEngine:
    history_limit: int = DEFAULT_HISTORY_LIMIT
    precision: int = DEFAULT_PRECISION

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ValueError(
                f"history_limit must be >= 1, got {self.history_limit}"
            )
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")

    # -- internal helpers ---------------------------------------------------

    def _fold(
        self,
        state: CalculatorState,
        left: float,
        right: float,
        operation: Operation,
    ) -> tuple[CalculatorState, float]:
        """Combine, record history, and clear the pending operation."""
        result = combine(left, right, operation, self.precision)
        entry = HistoryEntry(
            expression=(
                f"{format_number(left)} {operation.value} {format_number(right)}"
            ),
            result=result.text,
        )
        history = (entry,) + state.history[: self.history_limit - 1]
        folded = state.model_copy(update={
            "display": result.text,
            "pending": None,
            "waiting_for_operand": True,
            "history": history,
        })
        return folded, result.value

    # -- entry --------------------------------------------------------------

    def input_digit(self, state: CalculatorState, digit: int) -> CalculatorState:
        """Start a fresh operand or extend the current one.

        Branches: DIGIT-FRESH, DIGIT-REPLACE-ZERO, DIGIT-APPEND
        """
        if state.waiting_for_operand:                            # DIGIT-FRESH
            return state.model_copy(
                update={"display": str(digit), "waiting_for_operand": False}
            )
        if state.display == "0":                                 # DIGIT-REPLACE-ZERO
            return state.model_copy(update={"display": str(digit)})
        return state.model_copy(                                 # DIGIT-APPEND
            update={"display": state.display + str(digit)}
        )

    def input_decimal(self, state: CalculatorState) -> CalculatorState:
        """Branches: DECIMAL-FRESH, DECIMAL-APPEND, DECIMAL-DUPLICATE"""
        if state.waiting_for_operand:                            # DECIMAL-FRESH
            return state.model_copy(
                update={"display": "0.", "waiting_for_operand": False}
            )
        if "." not in state.display:                             # DECIMAL-APPEND
            return state.model_copy(update={"display": state.display + "."})
        return state                                             # DECIMAL-DUPLICATE

    # -- arithmetic ---------------------------------------------------------

    def select_operator(
        self, state: CalculatorState, operation: Operation
    ) -> CalculatorState:
        """Capture the first operand, or fold the pending operation.

        Branches: OP-CAPTURE, OP-CHAIN
        """
        input_value = parse_display(state.display)

        if state.pending is None:                                # OP-CAPTURE
            operand = input_value
        else:                                                    # OP-CHAIN
            state, operand = self._fold(
                state,
                state.pending.operand,
                input_value,
                state.pending.operation,
            )

        return state.model_copy(update={
            "pending": PendingOperation(operand=operand, operation=operation),
            "waiting_for_operand": True,
        })

    def resolve_equals(self, state: CalculatorState) -> CalculatorState:
        """Apply the pending operation to the displayed operand.

        Branches: EQUALS-RESOLVE, EQUALS-IDLE
        """
        if state.pending is None:                                # EQUALS-IDLE
            return state
        folded, _ = self._fold(                                  # EQUALS-RESOLVE
            state,
            state.pending.operand,
            parse_display(state.display),
            state.pending.operation,
        )
        return folded

    # -- editing ------------------------------------------------------------

    def clear(self, state: CalculatorState) -> CalculatorState:
        """Reset everything except history.  Branch: CLEAR"""
        return state.model_copy(update={
            "display": "0",
            "pending": None,
            "waiting_for_operand": False,
        })

    def backspace(self, state: CalculatorState) -> CalculatorState:
        """Branches: BACKSPACE-IGNORED, BACKSPACE-TRIM, BACKSPACE-EMPTY"""
        if state.waiting_for_operand or state.display == "0":   # BACKSPACE-IGNORED
            return state
        remaining = state.display[:-1]
        if remaining in ("", "-"):                               # BACKSPACE-EMPTY
            remaining = "0"
        return state.model_copy(update={"display": remaining})  # BACKSPACE-TRIM

    # -- reducer ------------------------------------------------------------

    def initial_state(self) -> CalculatorState:
        return CalculatorState()

    def apply(self, state: CalculatorState, action: Action) -> CalculatorState:
        """Reduce one action into the next state."""
        if isinstance(action, DigitAction):
            return self.input_digit(state, action.digit)
        if isinstance(action, DecimalAction):
            return self.input_decimal(state)
        if isinstance(action, OperatorAction):
            return self.select_operator(state, action.operation)
        if isinstance(action, EqualsAction):
            return self.resolve_equals(state)
        if isinstance(action, ClearAction):
            return self.clear(state)
        if isinstance(action, BackspaceAction):
            return self.backspace(state)
        raise TypeError(f"unsupported action: {action!r}")

    def run(
        self,
        actions: Iterable[Action],
        state: CalculatorState | None = None,
    ) -> CalculatorState:
        """Fold a sequence of actions, starting from ``state`` or fresh."""
        if state is None:
            state = self.initial_state()
        for action in actions:
            state = self.apply(state, action)
        return state
