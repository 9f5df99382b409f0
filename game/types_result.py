"""
game/types_result.py - TrialResult and AggregateResult Dataclasses

Immutable result containers for one trial and for a finished batch.
"""

from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from .constants import Outcome, Strategy
from .types_config import GameConfig
from .types_state import DoorArrangement


@dataclass(frozen=True)
class TrialResult:
    """One playthrough: the shared setup plus each strategy's outcome.

    final_picks and outcomes are stored as read-only mappings.
    """
    arrangement: DoorArrangement
    initial_pick: int
    revealed_door: int
    final_picks: Mapping[Strategy, int]
    outcomes: Mapping[Strategy, Outcome]

    def __post_init__(self) -> None:
        object.__setattr__(self, "final_picks", MappingProxyType(dict(self.final_picks)))
        object.__setattr__(self, "outcomes", MappingProxyType(dict(self.outcomes)))

    def __hash__(self) -> int:
        return hash((self.arrangement, self.initial_pick, self.revealed_door,
                     tuple(self.final_picks[s] for s in Strategy),
                     tuple(self.outcomes[s] for s in Strategy)))

    def __reduce__(self):
        # mappingproxy does not pickle; rebuild from plain dicts in worker results
        return (self.__class__, (self.arrangement, self.initial_pick, self.revealed_door,
                                 dict(self.final_picks), dict(self.outcomes)))

    def outcome(self, strategy: Strategy) -> Outcome:
        return self.outcomes[strategy]

    def to_dict(self) -> dict:
        return {
            "doors": list(self.arrangement.names()),
            "initial_pick": self.initial_pick,
            "revealed_door": self.revealed_door,
            "final_picks": {s.value: door for s, door in self.final_picks.items()},
            "outcomes": {s.value: o.value for s, o in self.outcomes.items()},
        }


@dataclass(frozen=True)
class AggregateResult:
    """Finished batch: every trial in order plus the strategy x outcome table."""
    trials: Tuple[TrialResult, ...]
    counts: Dict[Strategy, Dict[Outcome, int]]
    proportions: Dict[Strategy, Dict[Outcome, float]]
    n_trials: int
    config: GameConfig
    receipt: dict
    receipts: Tuple[dict, ...] = ()  # batch_config then batch_result

    def win_count(self, strategy: Strategy) -> int:
        return self.counts[strategy][Outcome.WIN]

    def win_proportion(self, strategy: Strategy) -> float:
        """Rounded share of trials won by strategy."""
        return self.proportions[strategy][Outcome.WIN]

    def exact_win_fraction(self, strategy: Strategy) -> Fraction:
        """Unrounded share of trials won by strategy."""
        return Fraction(self.win_count(strategy), self.n_trials)

    def table(self) -> List[dict]:
        """One row per strategy with raw counts and rounded proportions."""
        return [
            {
                "strategy": strategy.value,
                "win": self.counts[strategy][Outcome.WIN],
                "lose": self.counts[strategy][Outcome.LOSE],
                "win_proportion": self.proportions[strategy][Outcome.WIN],
                "lose_proportion": self.proportions[strategy][Outcome.LOSE],
            }
            for strategy in Strategy
        ]
