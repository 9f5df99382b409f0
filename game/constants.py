"""
game/constants.py - Game Constants and Enumerations

Door labels, strategies, outcomes and reporting precision.
Pure data, no behavior.
"""

from enum import Enum

# =============================================================================
# DOORS
# =============================================================================

DOORS = (1, 2, 3)  # 1-based door positions
N_DOORS = len(DOORS)


class DoorLabel(Enum):
    """What is behind a door. Car and goat in the TV framing."""
    NON_PRIZE = "goat"
    PRIZE = "car"


# Multiset every arrangement is a permutation of
LABEL_MULTISET = (DoorLabel.NON_PRIZE, DoorLabel.NON_PRIZE, DoorLabel.PRIZE)


# =============================================================================
# DECISIONS AND RESULTS
# =============================================================================

class Strategy(Enum):
    """Contestant's decision rule after the host opens a door."""
    STAY = "stay"
    SWITCH = "switch"


class Outcome(Enum):
    """Result of a final pick."""
    WIN = "WIN"
    LOSE = "LOSE"


# =============================================================================
# REPORTING
# =============================================================================

DISPLAY_PRECISION = 2  # Decimal digits for proportion tables
MAX_PRECISION = 6

# Known long-run win rates, used only to judge convergence in reports and tests
EXPECTED_WIN_RATE = {
    Strategy.STAY: 1 / 3,
    Strategy.SWITCH: 2 / 3,
}
CONVERGENCE_TOLERANCE = 0.02

# =============================================================================
# RECEIPT SCHEMA
# =============================================================================

RECEIPT_SCHEMA = [
    "batch_config", "batch_result", "anomaly",
]
