#!/usr/bin/env python
"""
Sweep sample sizes and report how estimation error shrinks.
"""

import logging

import typer
from rich.console import Console
from rich.table import Table

from irt_sim.core.exceptions import EstimationError
from irt_sim.core.settings import Settings
from irt_sim.estimators import fit_irt, mixed_model_estimator
from irt_sim.evaluation import run_size_sweep

console = Console(force_terminal=True)
app = typer.Typer()

DEFAULT_SIZES = ["50x10", "100x20", "200x40", "400x80"]


def _parse_size(size: str) -> tuple[int, int]:
    """Parse a SUBJECTSxITEMS string such as 100x20."""
    try:
        n_subjects, n_items = (int(part) for part in size.lower().split("x"))
    except ValueError as e:
        raise typer.BadParameter(
            f"Expected SUBJECTSxITEMS, got {size!r}"
        ) from e
    return n_subjects, n_items


@app.command()
def main(
    sizes: list[str] = typer.Option(
        DEFAULT_SIZES,
        "--size",
        help="Size as SUBJECTSxITEMS; repeat for several sizes",
    ),
    n_runs: int = typer.Option(
        10,
        "-n",
        "--runs",
        help="Runs per size",
    ),
    seed: int = typer.Option(
        42,
        "-s",
        "--seed",
        help="Base random seed",
    ),
    glmm: bool = typer.Option(
        False,
        "--glmm",
        help="Use the mixed-effects estimator instead of Rasch MML",
    ),
) -> None:
    """Run the consistency sweep over sample sizes."""
    settings = Settings()
    logging.getLogger("irt_sim").setLevel(settings.log_level)

    parsed = [_parse_size(size) for size in sizes]
    estimator = mixed_model_estimator() if glmm else fit_irt

    try:
        with console.status("[bold]Sweeping sizes..."):
            points = run_size_sweep(
                parsed, n_runs=n_runs, base_seed=seed, estimator=estimator
            )
    except (EstimationError, ValueError) as e:
        console.print(f"[red]Sweep failed: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title="Mean squared error by size")
    table.add_column("Subjects", justify="right")
    table.add_column("Items", justify="right")
    table.add_column("Ability MSE", justify="right")
    table.add_column("Difficulty MSE", justify="right")
    table.add_column("Failed", justify="right")
    for point in points:
        table.add_row(
            str(point.n_subjects),
            str(point.n_items),
            f"{point.ability_mse:.4f}",
            f"{point.difficulty_mse:.4f}",
            str(point.n_failed),
        )
    console.print(table)


if __name__ == "__main__":
    app()
