"""
game/validation.py - Contract Checks and Stoprules

Trial-count validation and the defensive checks that keep every trial inside
the closed set of cases the game allows. Each stoprule emits an anomaly
receipt, then raises.
"""

import numbers
from typing import Optional, Sequence

from receipts import DEFAULT_TENANT, StopRule, emit_anomaly

from .constants import DOORS, DoorLabel, Outcome, Strategy


# =============================================================================
# EXCEPTIONS
# =============================================================================

class InvalidTrialCount(ValueError):
    """Batch asked for a non-positive or non-integer number of trials."""

    def __init__(self, message: str, receipt: Optional[dict] = None):
        super().__init__(message)
        self.receipt = receipt


class ExhaustiveCaseViolation(StopRule):
    """A value fell outside the closed set of cases the game defines."""

    def __init__(self, message: str, receipt: Optional[dict] = None):
        super().__init__(message)
        self.receipt = receipt


# =============================================================================
# STOPRULES
# =============================================================================

def stoprule_invalid_trial_count(n, tenant_id: str = DEFAULT_TENANT) -> None:
    """
    Stoprule for a batch size that is not a positive integer.

    Raises:
        InvalidTrialCount: Always
    """
    detail = f"trial count must be a positive integer, got {n!r} ({type(n).__name__})"
    receipt = emit_anomaly("n_trials", "invalid_trial_count", detail, tenant_id)
    raise InvalidTrialCount(detail, receipt=receipt)


def stoprule_exhaustive_case(metric: str, detail: str,
                             tenant_id: str = DEFAULT_TENANT) -> None:
    """
    Stoprule for an impossible game state.

    Raises:
        ExhaustiveCaseViolation: Always
    """
    receipt = emit_anomaly(metric, "exhaustive_case_violation", detail, tenant_id)
    raise ExhaustiveCaseViolation(f"{metric}: {detail}", receipt=receipt)


# =============================================================================
# CHECKS
# =============================================================================

def validate_trial_count(n) -> int:
    """
    Return n as a plain int if it is a usable trial count.

    Integral numbers (numpy integers included) >= 1 pass. Booleans and floats
    are rejected even when they hold a whole value; nothing is clamped.
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        stoprule_invalid_trial_count(n)
    if n < 1:
        stoprule_invalid_trial_count(n)
    return int(n)


def check_door(door, name: str = "door") -> int:
    """Return door as int, halting unless it is one of DOORS."""
    if isinstance(door, bool) or not isinstance(door, numbers.Integral) or door not in DOORS:
        stoprule_exhaustive_case(name, f"{door!r} is not one of {DOORS}")
    return int(door)


def check_labels(labels: Sequence) -> None:
    """Halt unless labels is three DoorLabels with exactly one PRIZE."""
    if len(labels) != len(DOORS):
        stoprule_exhaustive_case("arrangement", f"expected {len(DOORS)} doors, got {len(labels)}")
    if not all(isinstance(label, DoorLabel) for label in labels):
        stoprule_exhaustive_case("arrangement", f"unknown door label in {list(labels)!r}")
    prizes = sum(1 for label in labels if label is DoorLabel.PRIZE)
    if prizes != 1:
        stoprule_exhaustive_case("arrangement", f"expected exactly one prize, got {prizes}")


def check_trial_invariants(trial) -> None:
    """
    Halt unless a finished trial respects the game's invariants.

    - revealed door differs from the initial pick and hides no prize
    - stay keeps the initial pick, switch takes the third door
    - stay and switch never both win or both lose
    """
    arrangement = trial.arrangement
    pick = trial.initial_pick
    revealed = trial.revealed_door

    if revealed == pick:
        stoprule_exhaustive_case("revealed_door", f"host opened the contestant's door {pick}")
    if arrangement[revealed] is DoorLabel.PRIZE:
        stoprule_exhaustive_case("revealed_door", f"host opened the prize door {revealed}")

    stay_pick = trial.final_picks[Strategy.STAY]
    switch_pick = trial.final_picks[Strategy.SWITCH]
    if stay_pick != pick:
        stoprule_exhaustive_case("final_pick", f"stay moved from {pick} to {stay_pick}")
    if {switch_pick, revealed, pick} != set(DOORS):
        stoprule_exhaustive_case(
            "final_pick",
            f"switch={switch_pick}, revealed={revealed}, pick={pick} do not cover {DOORS}"
        )

    if trial.outcomes[Strategy.STAY] is trial.outcomes[Strategy.SWITCH]:
        stoprule_exhaustive_case(
            "outcome",
            f"stay and switch both {trial.outcomes[Strategy.STAY].value}"
        )
    if trial.outcomes[Strategy.STAY] is Outcome.WIN and arrangement[pick] is not DoorLabel.PRIZE:
        stoprule_exhaustive_case("outcome", f"stay won without the prize behind door {pick}")
