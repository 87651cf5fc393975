"""Calculator state and action models.

The calculator is driven by discrete actions (digit, decimal point,
operator, equals, clear, backspace).  Every model here is immutable:
the engine never mutates a state, it returns a replacement.  This module
defines the data models only -- no transition logic.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Operation: the four binary operators
# ---------------------------------------------------------------------------

class Operation(str, Enum):
    """Binary operator.  The value is the symbol shown in history."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class HistoryEntry(BaseModel):
    """A completed calculation, e.g. ``3 + 4 = 7``."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., min_length=1)
    result: str = Field(..., min_length=1)

    def render(self) -> str:
        return f"{self.expression} = {self.result}"


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class PendingOperation(BaseModel):
    """Left operand and the operator waiting for its right operand.

    Operand and operator travel together so that a state can never hold
    one without the other.
    """

    model_config = ConfigDict(frozen=True)

    operand: float
    operation: Operation


class CalculatorState(BaseModel):
    """Complete calculator state.  Replaced wholesale on every action."""

    model_config = ConfigDict(frozen=True)

    display: str = "0"
    pending: PendingOperation | None = None
    waiting_for_operand: bool = False
    history: tuple[HistoryEntry, ...] = ()

    @property
    def previous_value(self) -> float | None:
        return self.pending.operand if self.pending is not None else None

    @property
    def pending_operation(self) -> Operation | None:
        return self.pending.operation if self.pending is not None else None


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class DigitAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["digit"] = "digit"
    digit: int = Field(..., ge=0, le=9)


class DecimalAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["decimal"] = "decimal"


class OperatorAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["operator"] = "operator"
    operation: Operation


class EqualsAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["equals"] = "equals"


class ClearAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["clear"] = "clear"


class BackspaceAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["backspace"] = "backspace"


Action = Annotated[
    Union[
        DigitAction,
        DecimalAction,
        OperatorAction,
        EqualsAction,
        ClearAction,
        BackspaceAction,
    ],
    Field(discriminator="kind"),
]

ACTION_KINDS: tuple[str, ...] = (
    "digit",
    "decimal",
    "operator",
    "equals",
    "clear",
    "backspace",
)
