"""Executable contract for the calculator engine.

Every rule is a callable predicate, so validation tools can iterate over
the contract to drive conformance tests and counterexample searches.

Layers
------
StateRule           named predicate over a single CalculatorState
Postcondition       predicate over (before, action, after) for one action kind
TransitionSpec      per-action contract
BranchSpec          every decision point white-box tests must cover
CalculatorContract  the full contract for a configured engine
build_contract()    constructs a CalculatorContract for an engine
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from engine import CalculatorEngine, combine
from formatting import parse_display
from models import ACTION_KINDS, CalculatorState

DISPLAY_PATTERN = re.compile(r"^-?(0|[1-9][0-9]*)(\.[0-9]*)?(e[+-][0-9]+)?$")


# ---------------------------------------------------------------------------
# Rule: a named, executable predicate over a state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StateRule:
    """A named invariant that every reachable state satisfies."""

    id: str
    name: str
    description: str
    check: Callable[[CalculatorState], bool]


def _display_is_finite(s: CalculatorState) -> bool:
    try:
        return Decimal(s.display).is_finite()
    except InvalidOperation:
        return False


def _display_single_dot(s: CalculatorState) -> bool:
    return s.display.count(".") <= 1


def _display_canonical(s: CalculatorState) -> bool:
    return bool(DISPLAY_PATTERN.match(s.display))


def _entries_well_formed(s: CalculatorState) -> bool:
    return all(e.expression.strip() and e.result.strip() for e in s.history)


def _paired_optionals(s: CalculatorState) -> bool:
    return (s.previous_value is None) == (s.pending_operation is None)


def _state_rules(history_limit: int) -> list[StateRule]:
    return [
        StateRule(
            id="STATE-DISPLAY-FINITE",
            name="display_is_finite",
            description="Display parses as a finite decimal number",
            check=_display_is_finite,
        ),
        StateRule(
            id="STATE-DISPLAY-DOT",
            name="display_single_dot",
            description="Display contains at most one decimal point",
            check=_display_single_dot,
        ),
        StateRule(
            id="STATE-DISPLAY-CANONICAL",
            name="display_canonical",
            description="Display has no leading zeros other than '0.'",
            check=_display_canonical,
        ),
        StateRule(
            id="STATE-PENDING-PAIRED",
            name="pending_paired",
            description="Previous value and pending operation are set together",
            check=_paired_optionals,
        ),
        StateRule(
            id="STATE-HISTORY-CAP",
            name="history_within_limit",
            description=f"History holds at most {history_limit} entries",
            check=lambda s: len(s.history) <= history_limit,
        ),
        StateRule(
            id="STATE-HISTORY-ENTRIES",
            name="history_entries_well_formed",
            description="Every history entry has an expression and a result",
            check=_entries_well_formed,
        ),
    ]


# ---------------------------------------------------------------------------
# Validation report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationResult:
    rule_id: str
    rule_name: str
    passed: bool
    description: str


@dataclass(frozen=True)
class ValidationReport:
    results: list[ValidationResult]

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[ValidationResult]:
        return [r for r in self.results if not r.passed]

    def summary(self) -> str:
        total = len(self.results)
        failed = len(self.failures)
        if failed == 0:
            return f"All {total} rules passed"
        lines = [f"{failed}/{total} rules failed:"]
        for f in self.failures:
            lines.append(f"  [{f.rule_id}] {f.rule_name}: {f.description}")
        return "\n".join(lines)


def _run(checks: list[tuple[str, str, str, Callable[[], bool]]]) -> ValidationReport:
    results = []
    for rule_id, name, description, check in checks:
        try:
            passed = bool(check())
        except Exception:
            passed = False
        results.append(
            ValidationResult(
                rule_id=rule_id,
                rule_name=name,
                passed=passed,
                description=description,
            )
        )
    return ValidationReport(results=results)


# ---------------------------------------------------------------------------
# Transition building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[[CalculatorState, Any, CalculatorState], bool]


@dataclass(frozen=True)
class TransitionSpec:
    kind: str
    postconditions: list[Postcondition]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class CalculatorContract:
    """Complete contract for a configured engine."""

    history_limit: int
    precision: int
    state_rules: list[StateRule]
    transitions: dict[str, TransitionSpec]
    branches: list[BranchSpec]

    @property
    def branch_ids(self) -> set[str]:
        return {b.id for b in self.branches}

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for kind, transition in self.transitions.items():
            for post in transition.postconditions:
                out.append((kind, post))
        return out

    def validate_state(self, state: CalculatorState) -> ValidationReport:
        """Run every state rule against ``state``."""
        return _run([
            (r.id, r.name, r.description, lambda r=r: r.check(state))
            for r in self.state_rules
        ])

    def check_transition(
        self,
        before: CalculatorState,
        action: Any,
        after: CalculatorState,
    ) -> ValidationReport:
        """Run the postconditions for ``action.kind`` and the state rules."""
        transition = self.transitions[action.kind]
        checks = [
            (
                f"{action.kind.upper()}-{p.name.upper()}",
                p.name,
                p.description,
                lambda p=p: p.check(before, action, after),
            )
            for p in transition.postconditions
        ]
        checks.extend(
            (r.id, r.name, r.description, lambda r=r: r.check(after))
            for r in self.state_rules
        )
        return _run(checks)


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(engine: CalculatorEngine) -> CalculatorContract:
    """Construct the full contract for ``engine``'s configuration."""

    limit = engine.history_limit
    places = engine.precision

    def _history_kept(before: CalculatorState, _a: Any, after: CalculatorState) -> bool:
        return after.history == before.history

    def _history_pushed(before: CalculatorState, after: CalculatorState) -> bool:
        return (
            len(after.history) == min(len(before.history) + 1, limit)
            and after.history[1:] == before.history[: limit - 1]
            and after.history[0].result == after.display
        )

    def _expected_fold(before: CalculatorState) -> str:
        assert before.pending is not None
        return combine(
            before.pending.operand,
            parse_display(before.display),
            before.pending.operation,
            places,
        ).text

    # ---------------------------------------------------------------- digit
    digit_transition = TransitionSpec(
        kind="digit",
        postconditions=[
            Postcondition(
                "fresh_operand",
                "After an operator or equals the digit starts a new operand",
                lambda b, a, s: (
                    not b.waiting_for_operand or s.display == str(a.digit)
                ),
            ),
            Postcondition(
                "extends_operand",
                "Otherwise the digit replaces '0' or is appended",
                lambda b, a, s: b.waiting_for_operand or s.display == (
                    str(a.digit) if b.display == "0" else b.display + str(a.digit)
                ),
            ),
            Postcondition(
                "not_waiting",
                "Digit entry always clears waiting_for_operand",
                lambda b, a, s: not s.waiting_for_operand,
            ),
            Postcondition(
                "pending_kept", "Pending operation untouched",
                lambda b, a, s: s.pending == b.pending,
            ),
            Postcondition("history_kept", "History untouched", _history_kept),
        ],
    )

    # -------------------------------------------------------------- decimal
    decimal_transition = TransitionSpec(
        kind="decimal",
        postconditions=[
            Postcondition(
                "fresh_operand",
                "After an operator or equals the display becomes '0.'",
                lambda b, a, s: not b.waiting_for_operand or s.display == "0.",
            ),
            Postcondition(
                "single_dot",
                "A second decimal point in one operand is ignored",
                lambda b, a, s: (
                    b.waiting_for_operand
                    or s.display == (b.display if "." in b.display else b.display + ".")
                ),
            ),
            Postcondition(
                "pending_kept", "Pending operation untouched",
                lambda b, a, s: s.pending == b.pending,
            ),
            Postcondition("history_kept", "History untouched", _history_kept),
        ],
    )

    # ------------------------------------------------------------- operator
    operator_transition = TransitionSpec(
        kind="operator",
        postconditions=[
            Postcondition(
                "operator_pending",
                "The selected operator becomes the pending operation",
                lambda b, a, s: s.pending_operation == a.operation,
            ),
            Postcondition(
                "waiting",
                "An operator always sets waiting_for_operand",
                lambda b, a, s: s.waiting_for_operand,
            ),
            Postcondition(
                "capture",
                "With nothing pending the display becomes the left operand",
                lambda b, a, s: b.pending is not None or (
                    s.previous_value == parse_display(b.display)
                    and s.display == b.display
                    and s.history == b.history
                ),
            ),
            Postcondition(
                "chain",
                "With an operation pending it is folded left to right",
                lambda b, a, s: b.pending is None or (
                    s.display == _expected_fold(b) and _history_pushed(b, s)
                ),
            ),
        ],
    )

    # --------------------------------------------------------------- equals
    equals_transition = TransitionSpec(
        kind="equals",
        postconditions=[
            Postcondition(
                "idle",
                "With nothing pending equals changes nothing",
                lambda b, a, s: b.pending is not None or s == b,
            ),
            Postcondition(
                "resolve",
                "With an operation pending the trimmed result is displayed",
                lambda b, a, s: b.pending is None or (
                    s.display == _expected_fold(b)
                    and s.pending is None
                    and s.waiting_for_operand
                    and _history_pushed(b, s)
                ),
            ),
        ],
    )

    # ---------------------------------------------------------------- clear
    clear_transition = TransitionSpec(
        kind="clear",
        postconditions=[
            Postcondition(
                "reset",
                "Display, pending operation and waiting flag are reset",
                lambda b, a, s: (
                    s.display == "0"
                    and s.pending is None
                    and not s.waiting_for_operand
                ),
            ),
            Postcondition("history_kept", "Clear never touches history", _history_kept),
        ],
    )

    # ------------------------------------------------------------ backspace
    backspace_transition = TransitionSpec(
        kind="backspace",
        postconditions=[
            Postcondition(
                "ignored",
                "Ignored while waiting for an operand or at '0'",
                lambda b, a, s: not (
                    b.waiting_for_operand or b.display == "0"
                ) or s == b,
            ),
            Postcondition(
                "trim",
                "Otherwise drops the last character, falling back to '0'",
                lambda b, a, s: (
                    b.waiting_for_operand
                    or b.display == "0"
                    or s.display == (b.display[:-1] if b.display[:-1] not in ("", "-") else "0")
                ),
            ),
            Postcondition("history_kept", "History untouched", _history_kept),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        BranchSpec("DIGIT-FRESH", "Digit starts a new operand",
                   "waiting_for_operand", "input_digit"),
        BranchSpec("DIGIT-REPLACE-ZERO", "Digit replaces a lone zero",
                   "not waiting and display == '0'", "input_digit"),
        BranchSpec("DIGIT-APPEND", "Digit appended to the operand",
                   "not waiting and display != '0'", "input_digit"),
        BranchSpec("DECIMAL-FRESH", "Decimal starts '0.'",
                   "waiting_for_operand", "input_decimal"),
        BranchSpec("DECIMAL-APPEND", "Decimal point appended",
                   "not waiting and '.' not in display", "input_decimal"),
        BranchSpec("DECIMAL-DUPLICATE", "Second decimal point ignored",
                   "not waiting and '.' in display", "input_decimal"),
        BranchSpec("OP-CAPTURE", "First operand captured, no computation",
                   "pending is None", "select_operator"),
        BranchSpec("OP-CHAIN", "Pending operation folded before the new one",
                   "pending is not None", "select_operator"),
        BranchSpec("EQUALS-RESOLVE", "Pending operation applied",
                   "pending is not None", "resolve_equals"),
        BranchSpec("EQUALS-IDLE", "Nothing pending, state unchanged",
                   "pending is None", "resolve_equals"),
        BranchSpec("COMBINE-ADD", "Addition", "operation == ADD", "combine"),
        BranchSpec("COMBINE-SUB", "Subtraction", "operation == SUBTRACT", "combine"),
        BranchSpec("COMBINE-MUL", "Multiplication", "operation == MULTIPLY", "combine"),
        BranchSpec("COMBINE-DIV", "Division", "operation == DIVIDE and right != 0",
                   "combine"),
        BranchSpec("COMBINE-DIV-ZERO", "Division by zero yields 0",
                   "operation == DIVIDE and right == 0", "combine"),
        BranchSpec("COMBINE-NO-OP", "No operator, right operand returned",
                   "operation is None", "combine"),
        BranchSpec("COMBINE-NON-FINITE", "Float overflow reported as 0",
                   "not isfinite(value)", "combine"),
        BranchSpec("CLEAR", "Reset all but history", "always", "clear"),
        BranchSpec("BACKSPACE-IGNORED", "Backspace ignored",
                   "waiting or display == '0'", "backspace"),
        BranchSpec("BACKSPACE-TRIM", "Last character removed",
                   "not waiting and display != '0'", "backspace"),
        BranchSpec("BACKSPACE-EMPTY", "Nothing left, display becomes '0'",
                   "display[:-1] in ('', '-')", "backspace"),
    ]

    transitions = {
        "digit": digit_transition,
        "decimal": decimal_transition,
        "operator": operator_transition,
        "equals": equals_transition,
        "clear": clear_transition,
        "backspace": backspace_transition,
    }
    assert set(transitions) == set(ACTION_KINDS)

    return CalculatorContract(
        history_limit=limit,
        precision=places,
        state_rules=_state_rules(limit),
        transitions=transitions,
        branches=branches,
    )
