"""
Consistency sweep: estimation error as the sample size grows.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from irt_sim.core.exceptions import EstimationError
from irt_sim.core.utils import get_rng, spawn_seeds
from irt_sim.estimators.base import Estimator
from irt_sim.estimators.rasch import fit_irt
from irt_sim.evaluation.metrics import mean_squared_error
from irt_sim.simulation.config import SimulationConfig
from irt_sim.simulation.generators import generate_dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SizePoint:
    """
    Mean estimation error at one (n_subjects, n_items) size.

    Attributes:
        n_subjects: Number of subjects.
        n_items: Number of items.
        ability_mse: Mean over runs of the ability MSE.
        difficulty_mse: Mean over runs of the difficulty MSE.
        n_completed: Runs that produced estimates.
        n_failed: Runs whose fit raised an EstimationError.
    """

    n_subjects: int
    n_items: int
    ability_mse: float
    difficulty_mse: float
    n_completed: int
    n_failed: int


def run_size_sweep(
    sizes: Sequence[tuple[int, int]],
    n_runs: int,
    base_seed: int,
    estimator: Estimator = fit_irt,
) -> list[SizePoint]:
    """
    Estimate the mean squared error of an estimator at several sizes.

    True parameters and data are redrawn for every run. Runs whose fit
    fails are counted and left out of the means.

    Args:
        sizes: (n_subjects, n_items) pairs.
        n_runs: Runs per size.
        base_seed: Base random seed.
        estimator: Callable fitting a ResponseMatrix.

    Returns:
        One SizePoint per size, in the given order.
    """
    if n_runs < 1:
        raise ValueError(f"n_runs must be >= 1, got {n_runs}")

    size_seqs = spawn_seeds(base_seed, len(sizes))
    points = []

    for (n_subjects, n_items), size_seq in zip(sizes, size_seqs, strict=True):
        config = SimulationConfig(
            n_subjects=n_subjects,
            n_items=n_items,
            n_replications=n_runs,
            random_seed=base_seed,
        )
        ability_mses = []
        difficulty_mses = []
        n_failed = 0

        for run_seq in size_seq.spawn(n_runs):
            data = generate_dataset(config, get_rng(run_seq))
            try:
                estimates = estimator(data.responses)
            except EstimationError as exc:
                logger.warning(
                    "Run failed at size (%d, %d): %s",
                    n_subjects,
                    n_items,
                    exc,
                )
                n_failed += 1
                continue

            truth = data.true_parameters
            ability_mses.append(
                mean_squared_error(estimates.abilities, truth.abilities)
            )
            difficulty_mses.append(
                mean_squared_error(estimates.difficulties, truth.difficulties)
            )

        point = SizePoint(
            n_subjects=n_subjects,
            n_items=n_items,
            ability_mse=(
                float(np.mean(ability_mses)) if ability_mses else float("nan")
            ),
            difficulty_mse=(
                float(np.mean(difficulty_mses))
                if difficulty_mses
                else float("nan")
            ),
            n_completed=len(ability_mses),
            n_failed=n_failed,
        )
        logger.debug("Size point: %s", point)
        points.append(point)

    return points
