"""
game/trial.py - Single Game Runner

One trial = setup, first pick, host reveal, then both strategies played
against the same doors.
"""

from typing import Optional

import numpy as np

from .arrangement import create_arrangement, ensure_rng, select_door
from .constants import Strategy
from .host import reveal_goat_door
from .judge import judge
from .resolver import resolve_final_pick
from .types_result import TrialResult
from .types_state import DoorArrangement
from .validation import check_trial_invariants


def play_game(arrangement: DoorArrangement, pick: int,
              rng: Optional[np.random.Generator] = None) -> TrialResult:
    """
    Play a trial from a known setup and first pick.

    The host opens a door once; stay and switch are then resolved and
    judged against that same reveal.

    Args:
        arrangement: Doors for this trial
        pick: Contestant's first pick, 1..3
        rng: Random source for the host's tie-break

    Returns:
        TrialResult with both strategy outcomes
    """
    revealed = reveal_goat_door(arrangement, pick, rng)

    final_picks = {}
    outcomes = {}
    for strategy in Strategy:
        final_picks[strategy] = resolve_final_pick(strategy, revealed, pick)
        outcomes[strategy] = judge(final_picks[strategy], arrangement)

    trial = TrialResult(
        arrangement=arrangement,
        initial_pick=pick,
        revealed_door=revealed,
        final_picks=final_picks,
        outcomes=outcomes,
    )
    check_trial_invariants(trial)
    return trial


def run_single_game(rng: Optional[np.random.Generator] = None) -> TrialResult:
    """Play one complete random trial."""
    rng = ensure_rng(rng)
    arrangement = create_arrangement(rng)
    pick = select_door(rng)
    return play_game(arrangement, pick, rng)
