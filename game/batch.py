"""
game/batch.py - Batch Simulator

Runs N independent trials, tallies outcomes as they arrive and, once every
trial is in, turns the tally into per-strategy proportions.
Entry points: run_batch, run_scenario, run_scenarios.
"""

import logging
import numbers
from concurrent.futures import ProcessPoolExecutor
from dataclasses import replace
from typing import List, Optional

import numpy as np

from receipts import emit_receipt, merkle

from .constants import DISPLAY_PRECISION, MAX_PRECISION, Outcome, Strategy
from .trial import run_single_game
from .types_config import GameConfig
from .types_result import AggregateResult, TrialResult
from .types_state import OutcomeTally
from .validation import validate_trial_count

logger = logging.getLogger(__name__)


def _run_chunk(n_trials: int, rng: np.random.Generator) -> List[TrialResult]:
    """Worker body: n_trials games on one private generator."""
    return [run_single_game(rng) for _ in range(n_trials)]


def _chunk_sizes(n: int, n_chunks: int) -> List[int]:
    """Split n into n_chunks contiguous sizes differing by at most one."""
    base, extra = divmod(n, n_chunks)
    return [base + (1 if i < extra else 0) for i in range(n_chunks) if base or i < extra]


def _check_options(n_workers, precision) -> None:
    if isinstance(n_workers, bool) or not isinstance(n_workers, numbers.Integral) or n_workers < 1:
        raise ValueError(f"n_workers must be an integer >= 1, got {n_workers!r}")
    if isinstance(precision, bool) or not isinstance(precision, numbers.Integral) \
            or not 0 <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be an integer in [0, {MAX_PRECISION}], got {precision!r}")


def run_batch(n, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None,
              n_workers: int = 1, precision: int = DISPLAY_PRECISION,
              config: Optional[GameConfig] = None) -> AggregateResult:
    """
    Run n independent trials and tabulate stay/switch outcomes.

    With n_workers > 1 the trials are cut into contiguous chunks, one per
    worker process, each with its own child generator spawned from the
    parent. Chunks are merged in order once all workers have finished, so
    the trial list is reproducible for a fixed seed and worker count.

    Args:
        n: Number of trials, integer >= 1
        rng: Parent random source; takes precedence over seed
        seed: Seed for a fresh parent generator when rng is None
        n_workers: Worker processes (1 = run in this process)
        precision: Decimal digits for the proportion table
        config: Config to record on the result (built from the other args if
            None). Its n_trials, n_workers and precision are overridden by
            the arguments, so the recorded config is what actually ran.

    Returns:
        AggregateResult with every trial, raw counts and rounded proportions

    Raises:
        InvalidTrialCount: n is not a positive integer (nothing is run)
        ValueError: n_workers or precision out of range
    """
    n = validate_trial_count(n)
    _check_options(n_workers, precision)
    if config is None:
        config = GameConfig(n_trials=n, random_seed=seed, n_workers=n_workers,
                            precision=precision, scenario_name="AD_HOC")
    elif (config.n_trials, config.n_workers, config.precision) != (n, n_workers, precision):
        config = replace(config, n_trials=n, n_workers=n_workers, precision=precision)

    if rng is not None:
        rng_source = "external"
    elif seed is not None:
        rng_source = "seed"
    else:
        rng_source = "entropy"

    config_receipt = emit_receipt("batch_config", {
        "scenario": config.scenario_name,
        "n_trials": n,
        "rng_source": rng_source,
        "random_seed": seed if rng is None else None,
        "n_workers": n_workers,
        "precision": precision,
    }, tenant_id=config.tenant_id)
    logger.info("batch %s: %d trials on %d worker(s)", config.scenario_name, n, n_workers)

    parent = rng if rng is not None else np.random.default_rng(seed)
    trials: List[TrialResult] = []
    tally = OutcomeTally()

    if n_workers == 1:
        for _ in range(n):
            trial = run_single_game(parent)
            trials.append(trial)
            tally.record(trial)
    else:
        sizes = _chunk_sizes(n, n_workers)
        children = parent.spawn(len(sizes))
        with ProcessPoolExecutor(max_workers=len(sizes)) as executor:
            futures = [executor.submit(_run_chunk, size, child)
                       for size, child in zip(sizes, children)]
            # Results are consumed in submission order; the with-block joins all workers.
            chunks = [future.result() for future in futures]
        for chunk in chunks:
            for trial in chunk:
                trials.append(trial)
                tally.record(trial)

    proportions = tally.proportions(precision)
    counts = {strategy: dict(row) for strategy, row in tally.counts.items()}

    result_receipt = emit_receipt("batch_result", {
        "scenario": config.scenario_name,
        "n_trials": tally.total,
        "counts": tally.as_table(),
        "proportions": {
            s.value: {o.value: p for o, p in row.items()} for s, row in proportions.items()
        },
        "trials_merkle": merkle([trial.to_dict() for trial in trials]),
        "config_hash": config_receipt["payload_hash"],
    }, tenant_id=config.tenant_id)
    logger.info(
        "batch %s done: stay=%.*f switch=%.*f",
        config.scenario_name,
        precision, proportions[Strategy.STAY][Outcome.WIN],
        precision, proportions[Strategy.SWITCH][Outcome.WIN],
    )

    return AggregateResult(
        trials=tuple(trials),
        counts=counts,
        proportions=proportions,
        n_trials=tally.total,
        config=config,
        receipt=result_receipt,
        receipts=(config_receipt, result_receipt),
    )


def run_scenario(config: GameConfig) -> AggregateResult:
    """Run one batch as described by config."""
    return run_batch(
        config.n_trials,
        seed=config.random_seed,
        n_workers=config.n_workers,
        precision=config.precision,
        config=config,
    )


def run_scenarios(configs: List[GameConfig]) -> List[AggregateResult]:
    """Run several configs in sequence."""
    return [run_scenario(config) for config in configs]
