"""
game/host.py - Host Reveal

The host always opens a goat door the contestant did not pick.
"""

from typing import Optional

import numpy as np

from .arrangement import ensure_rng
from .constants import DoorLabel
from .types_state import DoorArrangement
from .validation import check_door, stoprule_exhaustive_case


def reveal_goat_door(arrangement: DoorArrangement, pick: int,
                     rng: Optional[np.random.Generator] = None) -> int:
    """
    Door the host opens after the contestant's first pick.

    If the contestant is sitting on the car, both goat doors are eligible
    and the host picks one uniformly at random. Otherwise exactly one goat
    door remains besides the pick and the host must open it.

    Args:
        arrangement: Doors for this trial
        pick: Contestant's first pick, 1..3
        rng: Random source for the car-picked tie-break

    Returns:
        int: A NON_PRIZE door other than pick
    """
    pick = check_door(pick, "pick")
    goat_doors = arrangement.non_prize_doors

    if arrangement[pick] is DoorLabel.PRIZE:
        return goat_doors[int(ensure_rng(rng).integers(len(goat_doors)))]

    remaining = [door for door in goat_doors if door != pick]
    if len(remaining) != 1:
        stoprule_exhaustive_case("revealed_door", f"{len(remaining)} goat doors left beside pick {pick}")
    return remaining[0]
