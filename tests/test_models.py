"""Tests for state and action models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from models import (
    Action,
    CalculatorState,
    DigitAction,
    EqualsAction,
    HistoryEntry,
    Operation,
    OperatorAction,
    PendingOperation,
)

ACTION_ADAPTER = TypeAdapter(Action)


class TestCalculatorState:

    def test_initial_values(self):
        state = CalculatorState()
        assert state.display == "0"
        assert state.pending is None
        assert state.previous_value is None
        assert state.pending_operation is None
        assert state.waiting_for_operand is False
        assert state.history == ()

    def test_pending_halves(self):
        state = CalculatorState(
            pending=PendingOperation(operand=2.5, operation=Operation.DIVIDE)
        )
        assert state.previous_value == 2.5
        assert state.pending_operation == Operation.DIVIDE

    def test_frozen(self):
        state = CalculatorState()
        with pytest.raises(ValidationError):
            state.display = "1"

    def test_pending_requires_operation(self):
        with pytest.raises(ValidationError):
            PendingOperation(operand=1.0)

    def test_json_round_trip(self):
        state = CalculatorState(
            display="7",
            waiting_for_operand=True,
            history=(HistoryEntry(expression="3 + 4", result="7"),),
        )
        assert CalculatorState.model_validate_json(state.model_dump_json()) == state


class TestHistoryEntry:

    def test_render(self):
        assert HistoryEntry(expression="1 ÷ 3", result="0.3333333").render() == (
            "1 ÷ 3 = 0.3333333"
        )

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            HistoryEntry(expression="", result="1")


class TestActions:

    @pytest.mark.parametrize("digit", [-1, 10, 42])
    def test_digit_out_of_range(self, digit):
        with pytest.raises(ValidationError):
            DigitAction(digit=digit)

    def test_discriminated_digit(self):
        action = ACTION_ADAPTER.validate_python({"kind": "digit", "digit": 4})
        assert action == DigitAction(digit=4)

    def test_discriminated_operator_by_symbol(self):
        action = ACTION_ADAPTER.validate_python({"kind": "operator", "operation": "×"})
        assert action == OperatorAction(operation=Operation.MULTIPLY)

    def test_discriminated_equals(self):
        assert ACTION_ADAPTER.validate_python({"kind": "equals"}) == EqualsAction()

    @pytest.mark.parametrize(
        "payload",
        [
            {"kind": "sqrt"},
            {"kind": "operator", "operation": "^"},
            {"kind": "digit"},
            {"digit": 3},
        ],
    )
    def test_invalid_actions(self, payload):
        with pytest.raises(ValidationError):
            ACTION_ADAPTER.validate_python(payload)

    def test_operation_symbols(self):
        assert [op.value for op in Operation] == ["+", "-", "×", "÷"]
