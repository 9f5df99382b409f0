"""
game/judge.py - Outcome Judge
"""

from .constants import DoorLabel, Outcome
from .types_state import DoorArrangement


def judge(final_pick: int, arrangement: DoorArrangement) -> Outcome:
    """WIN if the car is behind final_pick, else LOSE."""
    if arrangement[final_pick] is DoorLabel.PRIZE:
        return Outcome.WIN
    return Outcome.LOSE
