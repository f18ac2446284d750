#!/usr/bin/env python
"""
Run a replication study and report bias and spread of the estimates.
"""

import logging

import numpy as np
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from irt_sim.core.exceptions import EstimationError
from irt_sim.core.settings import Settings
from irt_sim.estimators import fit_irt, mixed_model_estimator
from irt_sim.evaluation import (
    FailurePolicy,
    ReplicationSummary,
    run_replications_from_config,
)
from irt_sim.simulation.presets import get_available_presets, get_preset

console = Console(force_terminal=True)
app = typer.Typer()


def _summary_table(summary: ReplicationSummary) -> Table:
    table = Table(title="Recovery across replications")
    table.add_column("Parameter")
    table.add_column("Mean |bias|", justify="right")
    table.add_column("Mean SD", justify="right")
    table.add_column("Mean RMSE", justify="right")

    table.add_row(
        "ability",
        f"{np.mean(np.abs(summary.ability_bias)):.4f}",
        f"{np.mean(summary.sd_abilities):.4f}",
        f"{np.mean(summary.ability_rmse):.4f}",
    )
    table.add_row(
        "difficulty",
        f"{np.mean(np.abs(summary.difficulty_bias)):.4f}",
        f"{np.mean(summary.sd_difficulties):.4f}",
        f"{np.mean(summary.difficulty_rmse):.4f}",
    )
    return table


@app.command()
def main(
    preset: str | None = typer.Argument(
        None,
        help="Preset name (defaults to IRT_SIM_DEFAULT_PRESET)",
    ),
    n_replications: int | None = typer.Option(
        None,
        "-n",
        "--replications",
        help="Number of replications (overrides the preset)",
    ),
    n_workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Worker processes (defaults to IRT_SIM_N_WORKERS)",
    ),
    policy: FailurePolicy | None = typer.Option(
        None,
        "--policy",
        help="Failure policy (overrides the preset)",
    ),
    seed: int | None = typer.Option(
        None,
        "-s",
        "--seed",
        help="Base random seed (overrides the preset)",
    ),
    glmm: bool = typer.Option(
        False,
        "--glmm",
        help="Use the mixed-effects estimator instead of Rasch MML",
    ),
) -> None:
    """Run repeated simulate-and-estimate replications."""
    settings = Settings()
    logging.getLogger("irt_sim").setLevel(settings.log_level)
    preset = preset or settings.default_preset

    if preset not in get_available_presets():
        console.print(
            f"[red]Unknown preset: {preset}[/red]\n"
            f"Available: {', '.join(get_available_presets())}"
        )
        raise typer.Exit(1)

    config = get_preset(preset)
    if n_replications is not None:
        config.n_replications = n_replications
    if policy is not None:
        config.failure_policy = policy.value
    if seed is not None:
        config.random_seed = seed
    workers = n_workers if n_workers is not None else settings.n_workers

    estimator = mixed_model_estimator() if glmm else fit_irt

    console.print(
        Panel(
            f"[bold]Replication study[/bold]\n\n"
            f"Preset: [cyan]{preset}[/cyan]\n"
            f"Estimator: [cyan]{'glmm' if glmm else 'rasch_mml'}[/cyan]\n"
            f"Subjects x items: [cyan]{config.n_subjects} x "
            f"{config.n_items}[/cyan]\n"
            f"Replications: [cyan]{config.n_replications}[/cyan]\n"
            f"Policy: [cyan]{config.failure_policy}[/cyan]\n"
            f"Workers: [cyan]{workers}[/cyan]",
            title="Configuration",
        )
    )

    try:
        with console.status("[bold]Running replications..."):
            summary = run_replications_from_config(
                config, estimator=estimator, n_workers=workers
            )
    except EstimationError as e:
        console.print(f"[red]Replication study failed: {e}[/red]")
        raise typer.Exit(1) from e

    if summary.n_completed == 0:
        console.print("[red]Every replication failed[/red]")
        raise typer.Exit(1)

    console.print(_summary_table(summary))
    console.print(
        Panel(
            f"[bold green]Study complete[/bold green]\n\n"
            f"Completed: [cyan]{summary.n_completed}/"
            f"{summary.n_requested}[/cyan]\n"
            f"Skipped: [cyan]{len(summary.skipped_runs)}[/cyan]\n"
            f"Data draws: [cyan]{summary.total_attempts}[/cyan]",
            title="Results",
        )
    )


if __name__ == "__main__":
    app()
