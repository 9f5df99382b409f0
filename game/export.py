"""
game/export.py - Report and Export Functions

Formats a finished AggregateResult for people (text report) and for tools
(JSON, JSONL receipt ledger). Rendering to a terminal is left to callers.
"""

import json
from pathlib import Path
from typing import Iterable, List, Union

from receipts import write_ledger

from .constants import CONVERGENCE_TOLERANCE, EXPECTED_WIN_RATE, Outcome, Strategy
from .types_result import AggregateResult


def proportion_table(result: AggregateResult) -> List[List[str]]:
    """
    Strategy x outcome proportions as printable cells.

    First row is the header, then one row per strategy, LOSE before WIN as
    in a sorted contingency table.
    """
    precision = result.config.precision
    rows = [["strategy", Outcome.LOSE.value, Outcome.WIN.value]]
    for strategy in Strategy:
        row = result.proportions[strategy]
        rows.append([
            strategy.value,
            f"{row[Outcome.LOSE]:.{precision}f}",
            f"{row[Outcome.WIN]:.{precision}f}",
        ])
    return rows


def convergence_check(result: AggregateResult,
                      tolerance: float = CONVERGENCE_TOLERANCE) -> dict:
    """Distance of each strategy's exact win share from its long-run rate."""
    check = {}
    for strategy in Strategy:
        observed = float(result.exact_win_fraction(strategy))
        delta = observed - EXPECTED_WIN_RATE[strategy]
        check[strategy.value] = {
            "observed": observed,
            "expected": EXPECTED_WIN_RATE[strategy],
            "delta": delta,
            "within_tolerance": abs(delta) <= tolerance,
        }
    return check


def generate_report(result: AggregateResult) -> str:
    """
    Human-readable summary of a batch.

    Args:
        result: Finished batch

    Returns:
        str: Report text
    """
    table = proportion_table(result)
    widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
    table_lines = [
        "  ".join(cell.ljust(widths[i]) if i == 0 else cell.rjust(widths[i])
                  for i, cell in enumerate(row))
        for row in table
    ]

    check = convergence_check(result)
    converged = all(entry["within_tolerance"] for entry in check.values())
    stay_wins = result.win_count(Strategy.STAY)
    switch_wins = result.win_count(Strategy.SWITCH)

    lines = [
        "=== MONTY HALL REPORT ===",
        f"Scenario: {result.config.scenario_name}",
        f"Trials: {result.n_trials}",
        "",
        *table_lines,
        "",
        f"Stay wins: {stay_wins}/{result.n_trials}",
        f"Switch wins: {switch_wins}/{result.n_trials}",
        f"Trials merkle: {result.receipt['trials_merkle'][:16]}...",
        "",
        f"Convergence (+/-{CONVERGENCE_TOLERANCE}): " + ("PASS" if converged else "FAIL")
    ]
    return "\n".join(lines)


def export_json(result: AggregateResult, include_trials: bool = False) -> str:
    """
    Batch as JSON for downstream analysis.

    Args:
        result: Finished batch
        include_trials: Also list every trial (large for big batches)
    """
    export_data = {
        "config": {
            "scenario_name": result.config.scenario_name,
            "n_trials": result.config.n_trials,
            "random_seed": result.config.random_seed,
            "n_workers": result.config.n_workers,
            "precision": result.config.precision,
        },
        "table": result.table(),
        "exact_win_fraction": {
            s.value: str(result.exact_win_fraction(s)) for s in Strategy
        },
        "convergence": convergence_check(result),
        "receipt": result.receipt,
    }
    if include_trials:
        export_data["trials"] = [trial.to_dict() for trial in result.trials]
    return json.dumps(export_data, indent=2)


def write_receipts(receipts: Iterable[dict], path: Union[str, Path]) -> int:
    """Append receipts to a JSONL ledger. Returns the number written."""
    return write_ledger(receipts, path)
