"""Command line helpers for RewardForge."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .diagnostics.checklist import run_checklist as checklist_run
from .diagnostics.play_simulator import PlaySimulator
from .loaders import load_games_file, validate_games_file

console = Console()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def run_validate(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="RewardForge game catalog validator")
    parser.add_argument("catalog", help="Path to games JSON file")
    args = parser.parse_args(argv)

    errors = validate_games_file(Path(args.catalog))
    if errors:
        console.print("[bold red]Catalog errors:[/bold red]")
        for err in errors:
            console.print(f"- {err}")
        sys.exit(1)
    console.print("[bold green]Catalog is valid.[/bold green]")


def run_simulator(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="RewardForge reward distribution simulator")
    parser.add_argument("catalog", help="Path to games JSON file")
    parser.add_argument("game_id", help="Game identifier to simulate")
    parser.add_argument("--plays", type=int, default=1000, help="Number of plays to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    games = {game.game_id: game for game in load_games_file(Path(args.catalog))}
    if args.game_id not in games:
        console.print(f"[bold red]Game {args.game_id} not found in catalog.[/bold red]")
        sys.exit(1)

    simulator = PlaySimulator(rng=Random(args.seed))
    result = simulator.simulate(games[args.game_id], plays=args.plays)

    table = Table(title=f"{args.game_id}: {result.plays} simulated plays")
    table.add_column("Reward")
    table.add_column("Configured %", justify="right")
    table.add_column("Awarded", justify="right")
    table.add_column("Observed %", justify="right")
    for reward_id, configured in result.configured.items():
        table.add_row(
            reward_id,
            f"{configured:.2f}",
            str(result.awarded[reward_id]),
            f"{result.share(reward_id):.2f}",
        )
    console.print(table)
    if result.no_reward:
        console.print(f"[yellow]{result.no_reward} plays found no available reward.[/yellow]")


def run_checklist(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="RewardForge sanity checks")
    parser.add_argument("catalog", help="Path to games JSON file")
    args = parser.parse_args(argv)

    issues = checklist_run(load_games_file(Path(args.catalog)))
    if not issues:
        console.print("[bold green]No issues found.[/bold green]")
        return
    for issue in issues:
        console.print(f"[{issue.severity.upper()}] {issue.message}", markup=False, soft_wrap=True)
    if any(issue.severity == "error" for issue in issues):
        sys.exit(1)
