"""Counterexample search: discovers gaps in the engine or its tests.

This module runs independently of the test suite.  It searches for:

1. Rule violations: reachable states that break a state rule.
2. Postcondition violations: transitions whose (before, action, after)
   triple breaks the contract for that action kind.
3. Scenario mismatches: canonical key sequences whose final display
   differs from the documented result.

States are reached by seeded random walks over the action alphabet, so a
reported counterexample can be replayed exactly.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field

from contract import CalculatorContract, build_contract
from engine import CalculatorEngine
from keys import translate_keys
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


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    rule: str
    actions: list[str]
    expected: str
    actual: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.rule}")
                lines.append(f"      Actions:  {' '.join(cx.actions)}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
        else:
            lines.append("\nNo counterexamples found, all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Action generation
# ---------------------------------------------------------------------------

def label(action: Action) -> str:
    """Short human-readable token for an action."""
    if isinstance(action, DigitAction):
        return str(action.digit)
    if isinstance(action, OperatorAction):
        return action.operation.value
    return {
        "decimal": ".",
        "equals": "=",
        "clear": "AC",
        "backspace": "⌫",
    }[action.kind]


def random_action(rng: random.Random) -> Action:
    """Draw one action, weighted towards digits like real key presses."""
    roll = rng.random()
    if roll < 0.5:
        return DigitAction(digit=rng.randint(0, 9))
    if roll < 0.7:
        return OperatorAction(operation=rng.choice(list(Operation)))
    if roll < 0.8:
        return EqualsAction()
    if roll < 0.88:
        return DecimalAction()
    if roll < 0.95:
        return BackspaceAction()
    return ClearAction()


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_random_walks(
    engine: CalculatorEngine,
    contract: CalculatorContract,
    walks: int = 200,
    length: int = 40,
    seed: int = 0,
) -> tuple[list[Counterexample], int]:
    """Check every transition of seeded random walks against the contract."""
    rng = random.Random(seed)
    cxs: list[Counterexample] = []
    checks = 0

    for _ in range(walks):
        state = engine.initial_state()
        trail: list[str] = []
        for _ in range(length):
            action = random_action(rng)
            trail.append(label(action))
            after = engine.apply(state, action)
            report = contract.check_transition(state, action, after)
            checks += len(report.results)
            for failure in report.failures:
                cxs.append(Counterexample(
                    category="transition_violation",
                    rule=failure.rule_id,
                    actions=list(trail),
                    expected=failure.description,
                    actual=f"display={after.display!r} pending={after.pending}",
                ))
            if not report.passed:
                break
            state = after

    return cxs, checks


# Canonical sequences typed as keyboard keys, with the expected display.
SCENARIOS: list[tuple[list[str], str]] = [
    (["1", "2", "3"], "123"),
    (["1", ".", ".", "5"], "1.5"),
    (["3", "+", "4", "*", "2", "Enter"], "14"),
    (["5", "/", "0", "Enter"], "0"),
    (["1", "/", "3", "="], "0.3333333"),
    ([".", "1", "+", ".", "2", "="], "0.3"),
    (["2", "-", "5", "="], "-3"),
    (["7", "=", "="], "7"),
    (["4", "2", "Backspace"], "4"),
    (["9", "+", "1", "Escape"], "0"),
]


def search_scenarios(engine: CalculatorEngine) -> tuple[list[Counterexample], int]:
    """Replay the canonical scenarios and compare final displays."""
    cxs: list[Counterexample] = []
    for keys, expected in SCENARIOS:
        state = engine.run(translate_keys(keys))
        if state.display != expected:
            cxs.append(Counterexample(
                category="scenario_mismatch",
                rule="final_display",
                actions=keys,
                expected=expected,
                actual=state.display,
            ))
    return cxs, len(SCENARIOS)


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(
    engine: CalculatorEngine,
    walks: int = 200,
    length: int = 40,
    seed: int = 0,
) -> SearchReport:
    """Run the complete counterexample search for one engine."""
    contract = build_contract(engine)
    report = SearchReport()

    for cxs, checks in (
        search_random_walks(engine, contract, walks, length, seed),
        search_scenarios(engine),
    ):
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run the search across several engine configurations."""
    configs = [
        ("history 5 / precision 7", CalculatorEngine()),
        ("history 1 / precision 7", CalculatorEngine(history_limit=1)),
        ("history 10 / precision 7", CalculatorEngine(history_limit=10)),
    ]

    all_passed = True
    for name, engine in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(engine)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
