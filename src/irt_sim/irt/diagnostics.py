"""
Diagnostic utilities for Rasch model validation.

Provides functions to compare empirical endorsement proportions against
model-predicted proportions.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.special import expit

from irt_sim.core.data_models import ResponseMatrix
from irt_sim.irt.estimation.data_models import IRTEstimationResult


@dataclass
class ItemFitComparison:
    """Comparison of empirical vs model endorsement proportions per item."""

    item_id: NDArray[np.int64]
    empirical_prob: NDArray[np.float64]
    model_prob: NDArray[np.float64]
    difference: NDArray[np.float64]

    @property
    def max_abs_difference(self) -> float:
        return float(np.max(np.abs(self.difference)))


def compute_item_fit_comparison(
    data: ResponseMatrix,
    model: IRTEstimationResult,
    abilities: NDArray[np.float64],
) -> ItemFitComparison:
    """Compare empirical vs model endorsement proportions.

    Args:
        data: Response matrix with observed responses
        model: Fitted Rasch model
        abilities: Estimated ability values for each subject

    Returns:
        ItemFitComparison with empirical and model proportions per item
    """
    if len(abilities) != data.n_subjects:
        raise ValueError(
            f"Expected {data.n_subjects} abilities, got {len(abilities)}"
        )

    empirical = data.item_scores / data.n_subjects

    # Model: average P(endorse | theta) across all subjects
    z = model.discrimination * (
        abilities[:, np.newaxis] - model.difficulty_array()[np.newaxis, :]
    )
    model_prob = np.mean(expit(z), axis=0)

    return ItemFitComparison(
        item_id=np.arange(data.n_items, dtype=np.int64),
        empirical_prob=empirical.astype(np.float64),
        model_prob=model_prob.astype(np.float64),
        difference=(empirical - model_prob).astype(np.float64),
    )
