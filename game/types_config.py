"""
game/types_config.py - GameConfig Dataclass and Scenario Presets

Immutable configuration for batch runs.
Frozen dataclass, no behavior.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import DISPLAY_PRECISION


@dataclass(frozen=True)
class GameConfig:
    """Batch configuration (immutable)."""
    n_trials: int = 1000
    random_seed: Optional[int] = 42  # None draws fresh OS entropy
    n_workers: int = 1  # >1 runs chunks in worker processes
    precision: int = DISPLAY_PRECISION
    tenant_id: str = "monty-hall"
    scenario_name: str = "BASELINE"


# =============================================================================
# SCENARIO PRESETS
# =============================================================================

SCENARIO_BASELINE = GameConfig(
    n_trials=1000,
    random_seed=42,
    scenario_name="BASELINE"
)

# Small enough to eyeball, large sampling error expected
SCENARIO_SMALL = GameConfig(
    n_trials=30,
    random_seed=43,
    scenario_name="SMALL"
)

SCENARIO_CONVERGENCE = GameConfig(
    n_trials=10000,
    random_seed=44,
    scenario_name="CONVERGENCE"
)

SCENARIO_PARALLEL = GameConfig(
    n_trials=10000,
    random_seed=45,
    n_workers=4,
    scenario_name="PARALLEL"
)

MANDATORY_SCENARIOS = [
    "BASELINE",
    "SMALL",
    "CONVERGENCE",
    "PARALLEL",
]

SCENARIOS = {
    config.scenario_name: config
    for config in (SCENARIO_BASELINE, SCENARIO_SMALL, SCENARIO_CONVERGENCE, SCENARIO_PARALLEL)
}
