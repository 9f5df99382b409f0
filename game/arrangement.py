"""
game/arrangement.py - Door Setup and Contestant Selection

create_arrangement() hides the prize, select_door() makes the first pick.
Both draw from an explicitly passed numpy Generator.
"""

from typing import Optional

import numpy as np

from .constants import DOORS, LABEL_MULTISET, N_DOORS
from .types_state import DoorArrangement


def ensure_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return rng, or a freshly seeded Generator when none is given."""
    if rng is None:
        return np.random.default_rng()
    return rng


def create_arrangement(rng: Optional[np.random.Generator] = None) -> DoorArrangement:
    """
    Shuffle two goats and one car behind doors 1..3.

    A uniform permutation of the label multiset, so each of the three
    distinguishable placements comes up with probability 1/3.

    Args:
        rng: Random source (fresh Generator if None)

    Returns:
        DoorArrangement with exactly one PRIZE
    """
    order = ensure_rng(rng).permutation(N_DOORS)
    return DoorArrangement(tuple(LABEL_MULTISET[i] for i in order))


def select_door(rng: Optional[np.random.Generator] = None) -> int:
    """Contestant's first pick, uniform over DOORS."""
    return int(ensure_rng(rng).integers(DOORS[0], DOORS[-1] + 1))
