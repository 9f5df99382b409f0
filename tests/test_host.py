"""
tests/test_host.py - Host Reveal Tests

Validates:
- The host never opens the contestant's door or the prize door
- A goat pick leaves the host exactly one choice
- A prize pick splits the host's choice evenly between both goats
"""

from collections import Counter

import numpy as np
import pytest

from game.constants import DOORS, DoorLabel
from game.host import reveal_goat_door
from game.types_state import DoorArrangement
from game.validation import ExhaustiveCaseViolation

ALL_ARRANGEMENTS = [
    DoorArrangement.from_names(["car", "goat", "goat"]),
    DoorArrangement.from_names(["goat", "car", "goat"]),
    DoorArrangement.from_names(["goat", "goat", "car"]),
]


class TestRevealGoatDoor:
    """Test reveal_goat_door function."""

    def test_never_pick_never_prize(self):
        """Revealed door differs from the pick and hides a goat, for every case."""
        rng = np.random.default_rng(5)
        for arrangement in ALL_ARRANGEMENTS:
            for pick in DOORS:
                for _ in range(50):
                    revealed = reveal_goat_door(arrangement, pick, rng)
                    assert revealed != pick
                    assert arrangement[revealed] is DoorLabel.NON_PRIZE

    def test_goat_pick_is_deterministic(self):
        """With a goat picked, the other goat is always opened."""
        arrangement = DoorArrangement.from_names(["car", "goat", "goat"])
        for seed in range(20):
            assert reveal_goat_door(arrangement, 2, np.random.default_rng(seed)) == 3
            assert reveal_goat_door(arrangement, 3, np.random.default_rng(seed)) == 2

    def test_prize_pick_tie_break_uniform(self):
        """With the car picked, both goat doors are opened about equally often."""
        arrangement = DoorArrangement.from_names(["car", "goat", "goat"])
        rng = np.random.default_rng(6)
        counts = Counter(reveal_goat_door(arrangement, 1, rng) for _ in range(4000))
        assert set(counts) == {2, 3}, "Tie-break must reach both goat doors"
        assert 1800 < counts[2] < 2200, f"door 2 opened {counts[2]} of 4000"

    def test_prize_pick_middle_door(self):
        """Tie-break also covers non-adjacent goat doors."""
        arrangement = DoorArrangement.from_names(["goat", "car", "goat"])
        rng = np.random.default_rng(7)
        opened = {reveal_goat_door(arrangement, 2, rng) for _ in range(200)}
        assert opened == {1, 3}

    def test_returns_plain_int(self):
        """Revealed door is a Python int."""
        arrangement = DoorArrangement.from_names(["goat", "goat", "car"])
        assert type(reveal_goat_door(arrangement, 3, np.random.default_rng(0))) is int
        assert type(reveal_goat_door(arrangement, 1)) is int

    def test_accepts_numpy_integer_pick(self):
        """numpy integers are valid door numbers."""
        arrangement = DoorArrangement.from_names(["car", "goat", "goat"])
        assert reveal_goat_door(arrangement, np.int64(2)) == 3

    @pytest.mark.parametrize("pick", [0, 4, 1.0, True])
    def test_rejects_invalid_pick(self, pick):
        """Picks outside 1..3 halt."""
        arrangement = DoorArrangement.from_names(["car", "goat", "goat"])
        with pytest.raises(ExhaustiveCaseViolation):
            reveal_goat_door(arrangement, pick)
