"""
Monty Hall Configuration Schema - Self-Validating Batch Config Loader

Loads GameConfig from JSON or YAML files and plain dicts.

Consumed by:
- play.py (CLI --config and validate-config)
- game.batch.run_scenario (through the GameConfig it returns)

Design Principles:
- Self-validating: JSON Schema (Draft 2020-12) plus manual rules
- Defaults: missing optional fields take the schema default quietly
- Self-healing: out-of-range or mistyped knobs and unknown fields are
  repaired with a UserWarning, unless strict=True
- Trial counts are never healed: a bad n_trials raises InvalidTrialCount
- Immutable: the result is a frozen GameConfig
"""

from __future__ import annotations

import json
import logging
import warnings
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml
from jsonschema import Draft202012Validator

from receipts import emit_receipt
from game.constants import MAX_PRECISION
from game.types_config import GameConfig, SCENARIOS
from game.validation import validate_trial_count

logger = logging.getLogger(__name__)

__all__ = [
    'load',
    'load_with_receipt',
    'from_dict',
    'default',
    'to_dict',
    'save',
    'schema',
    'RECEIPT_SCHEMA',
]

# Module exports for receipt types
RECEIPT_SCHEMA = ["config_loaded"]


# =============================================================================
# JSON Schema Definition (Draft 2020-12)
# =============================================================================

_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "GameConfig",
    "description": "Monty Hall batch configuration",
    "type": "object",
    "required": ["n_trials"],
    "properties": {
        "n_trials": {
            "type": "integer",
            "description": "Number of independent trials",
            "minimum": 1
        },
        "random_seed": {
            "type": ["integer", "null"],
            "description": "Seed for reproducible runs, null for fresh entropy",
            "minimum": 0,
            "default": 42
        },
        "n_workers": {
            "type": "integer",
            "description": "Worker processes, 1 runs in-process",
            "minimum": 1,
            "default": 1
        },
        "precision": {
            "type": "integer",
            "description": "Decimal digits in the proportion table",
            "minimum": 0,
            "maximum": MAX_PRECISION,
            "default": 2
        },
        "tenant_id": {
            "type": "string",
            "minLength": 1,
            "default": "monty-hall"
        },
        "scenario_name": {
            "type": "string",
            "minLength": 1,
            "default": "CUSTOM"
        }
    },
    "additionalProperties": False
}

_DEFAULTS: Dict[str, Any] = {
    'random_seed': 42,
    'n_workers': 1,
    'precision': 2,
    'tenant_id': 'monty-hall',
    'scenario_name': 'CUSTOM',
}

_KNOWN_FIELDS = frozenset(_JSON_SCHEMA["properties"])

# Compiled once at import
Draft202012Validator.check_schema(_JSON_SCHEMA)
_COMPILED_VALIDATOR = Draft202012Validator(_JSON_SCHEMA)


# =============================================================================
# Public API
# =============================================================================

def load(
    path: Union[str, Path],
    validate: bool = True,
    strict: bool = False
) -> GameConfig:
    """
    Load config from a JSON or YAML file.

    Same as load_with_receipt() without the receipt.
    """
    config, _ = load_with_receipt(path, validate, strict)
    return config


def load_with_receipt(
    path: Union[str, Path],
    validate: bool = True,
    strict: bool = False
) -> Tuple[GameConfig, Dict[str, Any]]:
    """
    Load config from a JSON or YAML file and evidence the load.

    Args:
        path: Path to config file (.json, .yaml or .yml)
        validate: Whether to validate (default True)
        strict: If True, raise on invalid; if False, self-heal with warnings

    Returns:
        (GameConfig, config_loaded receipt)

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If the file does not parse, is not a mapping, or
            strict=True and validation fails
        InvalidTrialCount: If n_trials is missing a positive integer value
    """
    path_obj = Path(path)

    if not path_obj.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    content = path_obj.read_text()

    try:
        if path_obj.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot parse config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    config = _create_config(data, validate, strict)
    receipt = emit_receipt("config_loaded", {
        "path": str(path_obj),
        "scenario": config.scenario_name,
        "n_trials": config.n_trials,
    }, tenant_id=config.tenant_id)
    logger.debug("loaded config %s from %s", config.scenario_name, path_obj)
    return config, receipt


def from_dict(
    data: Dict[str, Any],
    validate: bool = True,
    strict: bool = False
) -> GameConfig:
    """
    Create config from a dictionary.

    Same validation as load().
    """
    return _create_config(dict(data), validate, strict)


def default(scenario: str = "BASELINE") -> GameConfig:
    """
    Return a preset config by scenario name.

    Raises:
        ValueError: Unknown scenario name
    """
    key = scenario.upper()
    if key not in SCENARIOS:
        raise ValueError(f"Unknown scenario '{scenario}'. Must be one of: {sorted(SCENARIOS)}")
    return SCENARIOS[key]


def to_dict(config: GameConfig) -> Dict[str, Any]:
    """Export config as a plain dictionary."""
    return asdict(config)


def save(config: GameConfig, path: Union[str, Path]) -> None:
    """
    Write config to file.

    Args:
        config: Config to write
        path: Destination (.json, .yaml or .yml)
    """
    data = to_dict(config)
    path_obj = Path(path)

    if path_obj.suffix in ('.yaml', '.yml'):
        content = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
    else:
        content = json.dumps(data, indent=2, sort_keys=True)

    path_obj.write_text(content)


def schema() -> Dict[str, Any]:
    """JSON Schema dict for external validation."""
    return json.loads(json.dumps(_JSON_SCHEMA))


# =============================================================================
# Internal Validation Functions
# =============================================================================

def _validate(data: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
    """
    Validate config data.

    Returns: (is_valid, errors, warnings)

    Rules:
    - n_trials is handled by validate_trial_count, never here
    - n_workers is an integer >= 1
    - precision is an integer in 0..MAX_PRECISION
    - unknown fields are reported
    """
    errors: List[str] = []
    warns: List[str] = []

    for key in ('n_workers', 'precision'):
        if key in data:
            val = data[key]
            if isinstance(val, bool) or not isinstance(val, int):
                errors.append(f"{key} must be integer, got {type(val).__name__}")

    if 'random_seed' in data:
        val = data['random_seed']
        if val is not None and (isinstance(val, bool) or not isinstance(val, int)):
            errors.append(f"random_seed must be integer or null, got {type(val).__name__}")

    for key in ('tenant_id', 'scenario_name'):
        if key in data and not isinstance(data[key], str):
            errors.append(f"{key} must be string, got {type(data[key]).__name__}")

    for err in _COMPILED_VALIDATOR.iter_errors(data):
        path = ".".join(str(p) for p in err.absolute_path)
        if path == 'n_trials' or err.validator == 'required':
            continue
        if err.validator == 'type':
            # Reported above with a clearer message
            continue
        if err.validator in ('minimum', 'maximum', 'minLength'):
            warns.append(f"Schema: {err.message} ({path})")
        else:
            errors.append(f"Schema: {err.message}")

    is_valid = len(errors) == 0 and not warns
    return is_valid, errors, warns


def _self_heal(data: Dict[str, Any], warns: List[str]) -> Dict[str, Any]:
    """
    Apply self-healing to config data.

    Self-healing behavior:
    - Out-of-range knob -> clamp to valid range, add warning
    - Wrongly typed optional field -> use default, add warning
    - Unknown field -> drop, add warning
    n_trials is left untouched.
    """
    healed = {**_DEFAULTS, **data}

    val = healed['n_workers']
    if isinstance(val, bool) or not isinstance(val, int):
        healed['n_workers'] = _DEFAULTS['n_workers']
        warns.append(f"Replaced non-integer n_workers {val!r} with {_DEFAULTS['n_workers']}")
    elif val < 1:
        healed['n_workers'] = 1
        warns.append(f"Clamped n_workers from {val} to 1")

    val = healed['precision']
    if isinstance(val, bool) or not isinstance(val, int):
        healed['precision'] = _DEFAULTS['precision']
        warns.append(f"Replaced non-integer precision {val!r} with {_DEFAULTS['precision']}")
    elif val < 0:
        healed['precision'] = 0
        warns.append(f"Clamped precision from {val} to 0")
    elif val > MAX_PRECISION:
        healed['precision'] = MAX_PRECISION
        warns.append(f"Clamped precision from {val} to {MAX_PRECISION}")

    val = healed['random_seed']
    if val is not None and (isinstance(val, bool) or not isinstance(val, int) or val < 0):
        healed['random_seed'] = _DEFAULTS['random_seed']
        warns.append(f"Replaced invalid random_seed {val!r} with {_DEFAULTS['random_seed']}")

    for field in ('tenant_id', 'scenario_name'):
        if not isinstance(healed[field], str) or not healed[field]:
            warns.append(f"Replaced invalid {field} {healed[field]!r} with {_DEFAULTS[field]!r}")
            healed[field] = _DEFAULTS[field]

    unknown = set(healed.keys()) - _KNOWN_FIELDS
    for field in sorted(unknown):
        del healed[field]
        warns.append(f"Ignoring unknown field: {field}")

    return healed


def _create_config(
    data: Dict[str, Any],
    validate: bool,
    strict: bool
) -> GameConfig:
    """
    Internal factory for creating GameConfig from data.

    Handles trial-count checking, validation and self-healing.
    """
    if 'n_trials' not in data:
        validate_trial_count(None)
    n_trials = validate_trial_count(data['n_trials'])

    all_warnings: List[str] = []

    if validate:
        is_valid, errors, warns = _validate(data)

        if not is_valid:
            if strict:
                problems = errors + warns
                raise ValueError("Config validation failed:\n" + "\n".join(f"  - {e}" for e in problems))
            all_warnings.extend(errors)
            all_warnings.extend(warns)
            data = _self_heal(data, all_warnings)
            is_valid, errors, _ = _validate(data)
            if not is_valid:
                raise ValueError("Config validation failed after self-healing:\n" +
                                 "\n".join(f"  - {e}" for e in errors))
    data = {**_DEFAULTS, **data}

    for w in all_warnings:
        warnings.warn(f"GameConfig: {w}", UserWarning, stacklevel=3)

    return GameConfig(
        n_trials=n_trials,
        random_seed=data['random_seed'],
        n_workers=int(data['n_workers']),
        precision=int(data['precision']),
        tenant_id=data['tenant_id'],
        scenario_name=data['scenario_name'],
    )
