"""
game/types_state.py - DoorArrangement and OutcomeTally Dataclasses

The per-trial door layout (immutable) and the per-batch outcome accumulator
(mutable, updated after each trial).
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .constants import DOORS, DoorLabel, Outcome, Strategy
from .validation import check_door, check_labels


# =============================================================================
# DOOR ARRANGEMENT
# =============================================================================

@dataclass(frozen=True)
class DoorArrangement:
    """What sits behind doors 1..3 for one trial.

    Indexed by 1-based door position:

        >>> arrangement = DoorArrangement.from_names(["car", "goat", "goat"])
        >>> arrangement[1]
        <DoorLabel.PRIZE: 'car'>
    """
    labels: Tuple[DoorLabel, ...]

    def __post_init__(self) -> None:
        if isinstance(self.labels, list):
            object.__setattr__(self, "labels", tuple(self.labels))
        check_labels(self.labels)

    def __getitem__(self, door: int) -> DoorLabel:
        return self.labels[check_door(door) - 1]

    def __iter__(self):
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)

    @property
    def prize_door(self) -> int:
        """Door position hiding the prize."""
        return self.labels.index(DoorLabel.PRIZE) + 1

    @property
    def non_prize_doors(self) -> Tuple[int, ...]:
        """Door positions hiding no prize, ascending."""
        return tuple(door for door in DOORS if self.labels[door - 1] is DoorLabel.NON_PRIZE)

    def names(self) -> Tuple[str, ...]:
        """Labels as "car"/"goat" strings."""
        return tuple(label.value for label in self.labels)

    @classmethod
    def from_names(cls, names) -> "DoorArrangement":
        """Build from "car"/"goat" strings."""
        return cls(tuple(DoorLabel(name) for name in names))


# =============================================================================
# OUTCOME TALLY
# =============================================================================

def _empty_counts() -> Dict[Strategy, Dict[Outcome, int]]:
    return {strategy: {outcome: 0 for outcome in Outcome} for strategy in Strategy}


@dataclass
class OutcomeTally:
    """Win/lose counters per strategy, built up one trial at a time."""
    counts: Dict[Strategy, Dict[Outcome, int]] = field(default_factory=_empty_counts)
    trials: int = 0

    def record(self, trial) -> None:
        """Count both strategy outcomes of a finished trial."""
        for strategy, outcome in trial.outcomes.items():
            self.counts[strategy][outcome] += 1
        self.trials += 1

    def merge(self, other: "OutcomeTally") -> None:
        """Fold another tally into this one (order independent)."""
        for strategy in Strategy:
            for outcome in Outcome:
                self.counts[strategy][outcome] += other.counts[strategy][outcome]
        self.trials += other.trials

    @property
    def total(self) -> int:
        return self.trials

    def count(self, strategy: Strategy, outcome: Outcome) -> int:
        return self.counts[strategy][outcome]

    def proportions(self, precision: int) -> Dict[Strategy, Dict[Outcome, float]]:
        """
        Row-normalized proportions rounded to precision digits.

        Each row divides by the number of trials, so WIN and LOSE in a row
        sum to 1.0 up to rounding.
        """
        if self.trials == 0:
            raise ValueError("cannot normalize an empty tally")
        return {
            strategy: {
                outcome: round(self.counts[strategy][outcome] / self.trials, precision)
                for outcome in Outcome
            }
            for strategy in Strategy
        }

    def as_table(self) -> Dict[str, Dict[str, int]]:
        """Counts keyed by enum values, for JSON and receipts."""
        return {
            strategy.value: {outcome.value: n for outcome, n in row.items()}
            for strategy, row in self.counts.items()
        }
