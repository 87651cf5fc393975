"""Tests for the keyboard and button input adapter."""

from __future__ import annotations

import pytest

from keys import action_for_button, action_for_key, translate_keys
from models import (
    BackspaceAction,
    ClearAction,
    DecimalAction,
    DigitAction,
    EqualsAction,
    Operation,
    OperatorAction,
)


class TestKeyboard:

    @pytest.mark.parametrize("key", list("0123456789"))
    def test_digits(self, key):
        assert action_for_key(key) == DigitAction(digit=int(key))

    @pytest.mark.parametrize(
        "key, operation",
        [
            ("+", Operation.ADD),
            ("-", Operation.SUBTRACT),
            ("*", Operation.MULTIPLY),
            ("/", Operation.DIVIDE),
        ],
    )
    def test_operators(self, key, operation):
        assert action_for_key(key) == OperatorAction(operation=operation)

    @pytest.mark.parametrize("key", ["Enter", "="])
    def test_equals(self, key):
        assert action_for_key(key) == EqualsAction()

    def test_decimal(self):
        assert action_for_key(".") == DecimalAction()

    def test_escape_clears(self):
        assert action_for_key("Escape") == ClearAction()

    def test_backspace(self):
        assert action_for_key("Backspace") == BackspaceAction()

    @pytest.mark.parametrize("key", ["a", "x", "Shift", "", "12", "×", "AC"])
    def test_unmapped(self, key):
        assert action_for_key(key) is None


class TestButtons:

    @pytest.mark.parametrize(
        "label, operation",
        [
            ("+", Operation.ADD),
            ("−", Operation.SUBTRACT),
            ("-", Operation.SUBTRACT),
            ("×", Operation.MULTIPLY),
            ("÷", Operation.DIVIDE),
        ],
    )
    def test_operators(self, label, operation):
        assert action_for_button(label) == OperatorAction(operation=operation)

    def test_ac_clears(self):
        assert action_for_button("AC") == ClearAction()

    def test_equals_and_digits(self):
        assert action_for_button("=") == EqualsAction()
        assert action_for_button("7") == DigitAction(digit=7)
        assert action_for_button(".") == DecimalAction()

    @pytest.mark.parametrize("label", ["Backspace", "⌫", "*", "/", "Enter"])
    def test_no_such_button(self, label):
        assert action_for_button(label) is None


class TestTranslate:

    def test_drops_unmapped_keys(self):
        actions = translate_keys(["1", "Shift", "+", "Tab", "2", "Enter"])
        assert actions == [
            DigitAction(digit=1),
            OperatorAction(operation=Operation.ADD),
            DigitAction(digit=2),
            EqualsAction(),
        ]

    def test_keyboard_drives_engine(self, engine):
        state = engine.run(translate_keys(["3", "+", "4", "*", "2", "Enter"]))
        assert state.display == "14"
        assert state.history[0].expression == "7 × 2"

    def test_backspace_key_ignored_after_result(self, engine):
        state = engine.run(translate_keys(["9", "-", "4", "=", "Backspace"]))
        assert state.display == "5"
