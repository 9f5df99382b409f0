"""
game - Monty Hall Simulation Package

Public API for single trials and batch estimation of stay/switch win rates.
Flat, focused files. One file = one responsibility.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_config import (
    GameConfig,
    SCENARIO_BASELINE,
    SCENARIO_SMALL,
    SCENARIO_CONVERGENCE,
    SCENARIO_PARALLEL,
    MANDATORY_SCENARIOS,
    SCENARIOS,
)
from .types_state import DoorArrangement, OutcomeTally
from .types_result import TrialResult, AggregateResult

# =============================================================================
# CONSTANTS
# =============================================================================
from .constants import (
    DOORS,
    DoorLabel,
    Strategy,
    Outcome,
    DISPLAY_PRECISION,
    RECEIPT_SCHEMA,
)

# =============================================================================
# ERRORS AND VALIDATION
# =============================================================================
from .validation import (
    InvalidTrialCount,
    ExhaustiveCaseViolation,
    validate_trial_count,
    check_trial_invariants,
)

# =============================================================================
# GAME STEPS
# =============================================================================
from .arrangement import create_arrangement, select_door
from .host import reveal_goat_door
from .resolver import resolve_final_pick
from .judge import judge

# =============================================================================
# RUNNERS
# =============================================================================
from .trial import play_game, run_single_game
from .batch import run_batch, run_scenario, run_scenarios

# =============================================================================
# EXPORT
# =============================================================================
from .export import (
    proportion_table,
    convergence_check,
    generate_report,
    export_json,
    write_receipts,
)

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    # Types
    "GameConfig",
    "DoorArrangement",
    "OutcomeTally",
    "TrialResult",
    "AggregateResult",
    # Scenario presets
    "SCENARIO_BASELINE",
    "SCENARIO_SMALL",
    "SCENARIO_CONVERGENCE",
    "SCENARIO_PARALLEL",
    "MANDATORY_SCENARIOS",
    "SCENARIOS",
    # Constants
    "DOORS",
    "DoorLabel",
    "Strategy",
    "Outcome",
    "DISPLAY_PRECISION",
    "RECEIPT_SCHEMA",
    # Errors and validation
    "InvalidTrialCount",
    "ExhaustiveCaseViolation",
    "validate_trial_count",
    "check_trial_invariants",
    # Game steps
    "create_arrangement",
    "select_door",
    "reveal_goat_door",
    "resolve_final_pick",
    "judge",
    # Runners
    "play_game",
    "run_single_game",
    "run_batch",
    "run_scenario",
    "run_scenarios",
    # Export
    "proportion_table",
    "convergence_check",
    "generate_report",
    "export_json",
    "write_receipts",
]
