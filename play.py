"""
play.py - Monty Hall CLI Harness

Runs batches and single trials from the command line and renders the
strategy x outcome table. All numbers come from game.run_batch; this
module only formats them.

Examples:
  python play.py run -n 10000 --seed 7
  python play.py run --scenario PARALLEL -o json
  python play.py run --config batch.yaml --receipts receipts.jsonl
  python play.py trial --seed 3
  python play.py validate-config batch.yaml
  python play.py scenarios
"""

import json
import logging
import sys
from typing import Optional

import click
import numpy as np
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import config_schema
from game import (
    SCENARIOS,
    GameConfig,
    InvalidTrialCount,
    Outcome,
    Strategy,
    convergence_check,
    export_json,
    run_scenario,
    run_single_game,
    write_receipts,
)

console = Console()


# =============================================================================
# Output helpers
# =============================================================================

def print_success(message: str) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}")


def _outcome_style(outcome: Outcome) -> str:
    return "green" if outcome is Outcome.WIN else "red"


def _render_batch(result) -> None:
    precision = result.config.precision
    table = Table(title=f"Monty Hall: {result.config.scenario_name} ({result.n_trials} trials)")
    table.add_column("strategy", style="cyan", no_wrap=True)
    table.add_column("WIN", justify="right", style="green")
    table.add_column("LOSE", justify="right", style="red")
    table.add_column("wins", justify="right", style="magenta")
    table.add_column("losses", justify="right", style="magenta")

    for row in result.table():
        table.add_row(
            row["strategy"],
            f"{row['win_proportion']:.{precision}f}",
            f"{row['lose_proportion']:.{precision}f}",
            str(row["win"]),
            str(row["lose"]),
        )
    console.print(table)

    check = convergence_check(result)
    for name, entry in check.items():
        line = f"{name}: {entry['observed']:.4f} vs {entry['expected']:.4f} (delta {entry['delta']:+.4f})"
        if entry["within_tolerance"]:
            print_success(line)
        else:
            print_error(line)


# =============================================================================
# Click CLI Group
# =============================================================================

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log batch progress")
def cli(verbose: bool):
    """Monty Hall Monte Carlo simulator."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


# --- run ---

@cli.command("run")
@click.option("--trials", "-n", type=int, default=None, help="Number of trials")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option("--workers", "-w", type=int, default=None, help="Worker processes")
@click.option("--precision", "-p", type=int, default=None, help="Decimal digits in the table")
@click.option("--scenario", "-s", type=click.Choice(sorted(SCENARIOS), case_sensitive=False),
              default=None, help="Start from a preset")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), default=None,
              help="Start from a JSON/YAML config file")
@click.option("--receipts", "-r", "receipts_path", type=click.Path(), default=None,
              help="Append config and batch receipts to a JSONL ledger")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def run_cmd(trials: Optional[int], seed: Optional[int], workers: Optional[int],
            precision: Optional[int], scenario: Optional[str], config_path: Optional[str],
            receipts_path: Optional[str], output: str) -> None:
    """Run a batch of trials and print the proportion table."""
    receipts = []
    try:
        if config_path:
            base, load_receipt = config_schema.load_with_receipt(config_path)
            receipts.append(load_receipt)
        elif scenario:
            base = config_schema.default(scenario)
        else:
            base = GameConfig(scenario_name="CLI")

        config = GameConfig(
            n_trials=trials if trials is not None else base.n_trials,
            random_seed=seed if seed is not None else base.random_seed,
            n_workers=workers if workers is not None else base.n_workers,
            precision=precision if precision is not None else base.precision,
            tenant_id=base.tenant_id,
            scenario_name=base.scenario_name,
        )
        result = run_scenario(config)

        receipts.extend(result.receipts)
        if receipts_path:
            write_receipts(receipts, receipts_path)

        if output == "json":
            click.echo(export_json(result))
        else:
            _render_batch(result)
            if receipts_path:
                print_success(f"{len(receipts)} receipts appended to {receipts_path}")

    except InvalidTrialCount as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(str(e))
        sys.exit(2)
    except ValueError as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(f"Invalid configuration: {e}")
        sys.exit(2)


# --- trial ---

@cli.command("trial")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def trial_cmd(seed: Optional[int], output: str) -> None:
    """Play one game and show both strategies."""
    trial = run_single_game(np.random.default_rng(seed))

    if output == "json":
        click.echo(json.dumps(trial.to_dict(), indent=2))
        return

    doors = "  ".join(
        f"[{door}] {name}" for door, name in enumerate(trial.arrangement.names(), start=1)
    )
    lines = [
        f"Doors: {doors}",
        f"First pick: {trial.initial_pick}",
        f"Host opens: {trial.revealed_door}",
    ]
    for strategy in Strategy:
        outcome = trial.outcome(strategy)
        style = _outcome_style(outcome)
        lines.append(
            f"{strategy.value}: door {trial.final_picks[strategy]} -> [{style}]{outcome.value}[/{style}]"
        )
    console.print(Panel("\n".join(lines), title="[bold]Single Trial[/bold]", border_style="cyan"))


# --- validate-config ---

@cli.command("validate-config")
@click.argument("config_path", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def validate_config_cmd(config_path: str, output: str) -> None:
    """Validate a batch config file."""
    try:
        config = config_schema.load(config_path, strict=True)
    except (ValueError, FileNotFoundError) as e:
        if output == "json":
            click.echo(json.dumps({"path": config_path, "valid": False, "error": str(e)}))
        else:
            console.print(Panel(
                f"File: {config_path}\n[red]✗[/red] {e}",
                title="[bold red]Config Validation: FAILED[/bold red]",
                border_style="red",
            ))
        sys.exit(2)

    if output == "json":
        click.echo(json.dumps({
            "path": config_path,
            "valid": True,
            "config": config_schema.to_dict(config),
        }, indent=2))
    else:
        content = (
            f"File: {config_path}\n"
            f"Scenario: {config.scenario_name}    Trials: {config.n_trials}\n"
            f"Seed: {config.random_seed}    Workers: {config.n_workers}    "
            f"Precision: {config.precision}"
        )
        console.print(Panel(
            content,
            title="[bold green]Config Validation: PASSED[/bold green]",
            border_style="green",
        ))


# --- scenarios ---

@cli.command("scenarios")
def scenarios_cmd() -> None:
    """List preset scenarios."""
    table = Table(title="Scenarios")
    table.add_column("name", style="cyan")
    table.add_column("trials", justify="right")
    table.add_column("seed", justify="right")
    table.add_column("workers", justify="right")
    for name, config in sorted(SCENARIOS.items()):
        table.add_row(name, str(config.n_trials), str(config.random_seed), str(config.n_workers))
    console.print(table)


# --- entry point ---

def main() -> int:
    """Entry point for the CLI."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return 2
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
