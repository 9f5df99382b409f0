"""
game/resolver.py - Strategy Resolution

Turns a strategy into the contestant's final door.
"""

from .constants import DOORS, Strategy
from .validation import check_door, stoprule_exhaustive_case


def resolve_final_pick(strategy: Strategy, revealed: int, pick: int) -> int:
    """
    Final door under strategy.

    STAY keeps pick. SWITCH takes the only door that is neither pick nor
    the revealed one.

    Raises:
        ExhaustiveCaseViolation: if revealed == pick or either is not a door
    """
    revealed = check_door(revealed, "revealed")
    pick = check_door(pick, "pick")
    if revealed == pick:
        stoprule_exhaustive_case("revealed", f"revealed door equals pick ({pick})")

    if strategy is Strategy.STAY:
        return pick
    if strategy is Strategy.SWITCH:
        return next(door for door in DOORS if door not in (revealed, pick))
    stoprule_exhaustive_case("strategy", f"unknown strategy {strategy!r}")
